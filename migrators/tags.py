"""
Migrador para la colección tags.

Simétrico a notes: resuelve el dueño y omite la etiqueta si no existe.
noteIDs es una referencia inversa redundante y no se escribe: la relación
se reconstruye desde notes.tagIDs.
"""

from .base import BaseMigrator
from .errors import UnresolvedReferenceError
from .records import decode_tag


class TagsMigrator(BaseMigrator):
    """Migra tags → tags (id, user_id, name, color, timestamps)."""

    table = "tags"
    source_collection = "tags"
    kind = "tag"
    insert_sql = """
        INSERT INTO tags (id, user_id, name, color, created_at, updated_at)
        VALUES (%s, %s, %s, %s, %s, %s)
    """

    def decode_document(self, doc):
        return decode_tag(doc)

    def resolve_references(self, record, identity_map):
        user_id = identity_map.lookup("user", record.user_id)
        if user_id is None:
            raise UnresolvedReferenceError("user", record.user_id)
        return {"user_id": user_id}

    def build_row(self, new_id, record, references):
        return (
            new_id,
            references["user_id"],
            record.name,
            record.color,
            record.created_at,
            record.updated_at,
        )

    def describe(self, record):
        return record.name or str(record.id)
