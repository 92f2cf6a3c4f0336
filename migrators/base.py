"""
Módulo base para migradores de colecciones MongoDB → PostgreSQL.

Define la interfaz común (contrato) que todos los migradores de entidades
deben implementar. Esto permite que mongomigra.py recorra users, notes y
tags con el mismo código sin conocer sus detalles internos.

Patrón de diseño: Strategy Pattern
- mongomigra.py = Contexto (orquestador)
- BaseMigrator = Estrategia abstracta
- UsersMigrator, NotesMigrator, TagsMigrator = Estrategias concretas

Flujo de uso por documento:
1. decode_document() convierte el documento en un registro legacy
2. resolve_references() traduce FKs legacy a UUIDs nuevos
3. El orquestador asigna el UUID nuevo de la entidad
4. build_row() arma la tupla en el orden de columnas
5. insert_row() ejecuta el INSERT (o nada en dry run)

Ejemplo de implementación:
    class MiMigrador(BaseMigrator):
        table = 'mi_tabla'
        source_collection = 'mi_coleccion'
        kind = 'mi_tipo'
        insert_sql = "INSERT INTO mi_tabla (...) VALUES (...)"

        # ... implementar resto de métodos abstractos
"""

from abc import ABC, abstractmethod

import psycopg2

from .errors import RowWriteError


class BaseMigrator(ABC):
    """
    Clase abstracta que define la interfaz para migradores de entidades.

    Attributes:
        table (str): Tabla PostgreSQL destino
        source_collection (str): Colección MongoDB de origen
        kind (str): Tipo de entidad en el IdentityMap
        insert_sql (str): INSERT parametrizado con el orden de build_row()
    """

    table = None
    source_collection = None
    kind = None
    insert_sql = None

    def __init__(self, table: str = None):
        """
        Args:
            table: Tabla destino; por defecto la declarada en la subclase
        """
        if table is not None:
            self.table = table

    @abstractmethod
    def decode_document(self, doc: dict):
        """
        Convierte un documento MongoDB en un registro legacy.

        Raises:
            DocumentDecodeError: Si el documento no tiene la forma esperada
        """
        pass

    @abstractmethod
    def resolve_references(self, record, identity_map) -> dict:
        """
        Resuelve las FKs legacy del registro contra el IdentityMap.

        Los migradores fuente de verdad (users) retornan dict vacío.

        Returns:
            dict: UUIDs resueltos, ej: {'user_id': UUID(...)}

        Raises:
            UnresolvedReferenceError: Si alguna FK no fue migrada. No es
                fatal: el orquestador decide omitir el registro.
        """
        pass

    @abstractmethod
    def build_row(self, new_id, record, references: dict) -> tuple:
        """
        Arma la tupla de valores para insert_sql.

        Args:
            new_id: UUID asignado a la entidad
            record: Registro legacy
            references: Resultado de resolve_references()
        """
        pass

    @abstractmethod
    def describe(self, record) -> str:
        """Clave natural del registro para mensajes de diagnóstico."""
        pass

    def insert_row(self, row: tuple, cursor, dry_run: bool, natural_key: str = ""):
        """
        Inserta una fila en la tabla destino.

        En dry run no toca la base: el conteo y el remapeo ocurren igual
        en el orquestador.

        Raises:
            RowWriteError: Si PostgreSQL rechaza el INSERT
        """
        if dry_run:
            return
        try:
            cursor.execute(self.insert_sql, row)
        except psycopg2.Error as e:
            raise RowWriteError(self.table, natural_key, e) from e
