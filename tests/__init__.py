"""
Suite de tests para la migración de notas MongoDB → PostgreSQL.

Los tests NO se conectan a bases reales, solo validan:
- Sintaxis de código Python
- Configuración de fases e interfaz de migradores
- Decodificación, remapeo de IDs y orquestación con dobles en memoria
"""
