"""
Migrador para la colección users.

RESPONSABILIDAD:
Migrador de tipo fuente de verdad:
- NO resuelve referencias (resolve_references retorna vacío)
- Sus UUIDs nuevos son los que notes y tags usan como user_id

El hash de contraseña se copia tal cual (argon2id codificado); no se
re-hashea ni se valida.
"""

from .base import BaseMigrator
from .records import decode_user


class UsersMigrator(BaseMigrator):
    """Migra users → users (id, email, username, hash, name, timestamps)."""

    table = "users"
    source_collection = "users"
    kind = "user"
    insert_sql = """
        INSERT INTO users (id, email, username, hash, name, created_at, updated_at)
        VALUES (%s, %s, %s, %s, %s, %s, %s)
    """

    def decode_document(self, doc):
        return decode_user(doc)

    def resolve_references(self, record, identity_map):
        return {}

    def build_row(self, new_id, record, references):
        return (
            new_id,
            record.email,
            record.username,
            record.hash,
            record.name,
            record.created_at,
            record.updated_at,
        )

    def describe(self, record):
        return record.email or str(record.id)
