# reset_database.py
"""
Script para vaciar las tablas destino antes de re-ejecutar la migración.

Re-ejecutar mongomigra.py sobre tablas con datos NO es idempotente para
users, notes y tags (cada corrida genera UUIDs nuevos), así que una nueva
corrida completa debe partir de tablas vacías.

ADVERTENCIA: Esto destruye TODOS los datos de las tablas de notas.
"""

import psycopg2
import config

# Orden inverso a las dependencias; CASCADE cubre el resto
TABLES_TO_TRUNCATE = ["note_tags", "tags", "notes", "users"]


def reset_database():
    """Vacía todas las tablas destino de la migración."""

    conn = psycopg2.connect(config.POSTGRES_DSN)
    cursor = conn.cursor()

    print("=" * 70)
    print("🗑️  LIMPIEZA COMPLETA DE TABLAS DESTINO")
    print("=" * 70)

    try:
        for table in TABLES_TO_TRUNCATE:
            print(f"\n🗑️  Vaciando tabla '{table}'...")
            cursor.execute(f"TRUNCATE TABLE {table} CASCADE")
            print(f"   ✅ Tabla '{table}' vaciada")

        conn.commit()
    except psycopg2.Error:
        conn.rollback()
        raise
    finally:
        cursor.close()
        conn.close()

    print("\n" + "=" * 70)
    print("✅ LIMPIEZA COMPLETA FINALIZADA")
    print("=" * 70)
    print("\nAhora ejecutar:")
    print("  python mongomigra.py (migrar datos)")


if __name__ == "__main__":
    import sys

    # Seguridad: pedir confirmación
    print("\n⚠️  ADVERTENCIA: Esto eliminará TODOS los datos migrados.")
    response = input("¿Continuar? (escribir 'SI' en mayúsculas): ")

    if response == "SI":
        reset_database()
    else:
        print("\n❌ Operación cancelada")
        sys.exit(0)
