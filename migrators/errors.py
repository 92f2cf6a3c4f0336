"""
Excepciones de la migración.

Taxonomía:
- DocumentDecodeError: documento legacy con tipos inesperados (fatal)
- RowWriteError: fallo al insertar en PostgreSQL (fatal)
- UnresolvedReferenceError: FK no encontrada en el IdentityMap (no fatal)

Los errores de conexión son los propios de cada driver
(pymongo.errors.PyMongoError, psycopg2.OperationalError).

Solo el orquestador (mongomigra.py) decide si un error aborta la
ejecución o se registra como omisión.
"""


class MigrationError(Exception):
    """Error base de la migración."""


class DocumentDecodeError(MigrationError):
    """
    Un documento MongoDB no coincide con la estructura esperada.

    Attributes:
        collection: Colección de origen
        document_id: _id del documento (None si no se pudo leer)
        field: Campo que falló
    """

    def __init__(self, collection, document_id, field, detail):
        self.collection = collection
        self.document_id = document_id
        self.field = field
        super().__init__(
            f"failed to decode {collection} document {document_id}: "
            f"campo '{field}' {detail}"
        )


class RowWriteError(MigrationError):
    """
    Falló un INSERT en la base destino.

    Attributes:
        table: Tabla destino
        natural_key: Clave natural para diagnóstico (email, título, nombre)
    """

    def __init__(self, table, natural_key, cause):
        self.table = table
        self.natural_key = natural_key
        self.cause = cause
        super().__init__(f"failed to insert {table} {natural_key}: {cause}")


class UnresolvedReferenceError(MigrationError):
    """
    Una referencia legacy no tiene ID nuevo en el IdentityMap.

    Attributes:
        kind: Tipo de entidad buscada ('user', 'note', 'tag')
        legacy_id: ObjectId legacy que no se encontró
    """

    def __init__(self, kind, legacy_id):
        self.kind = kind
        self.legacy_id = legacy_id
        super().__init__(f"{kind} {legacy_id} not found")
