"""
Migrador para la colección notes.

Cada nota referencia a su dueño (userId). Si el dueño no fue migrado, la
nota se omite: no recibe UUID, no se inserta y tampoco participa de la
fase note_tags.

Los tagIDs embebidos se ignoran acá; se procesan en NoteTagsMigrator una
vez que todas las etiquetas tienen su UUID.
"""

from .base import BaseMigrator
from .errors import UnresolvedReferenceError
from .records import decode_note


class NotesMigrator(BaseMigrator):
    """Migra notes → notes (id, user_id, title, content, archived, timestamps)."""

    table = "notes"
    source_collection = "notes"
    kind = "note"
    insert_sql = """
        INSERT INTO notes (id, user_id, title, content, archived, created_at, updated_at)
        VALUES (%s, %s, %s, %s, %s, %s, %s)
    """

    def decode_document(self, doc):
        return decode_note(doc)

    def resolve_references(self, record, identity_map):
        user_id = identity_map.lookup("user", record.user_id)
        if user_id is None:
            raise UnresolvedReferenceError("user", record.user_id)
        return {"user_id": user_id}

    def build_row(self, new_id, record, references):
        return (
            new_id,
            references["user_id"],
            record.title,
            record.content,
            record.archived,
            record.created_at,
            record.updated_at,
        )

    def describe(self, record):
        return str(record.id)
