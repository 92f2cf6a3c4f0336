"""
Migrador para la tabla de unión note_tags.

Hace una segunda pasada completa sobre la colección notes y, por cada
tagID embebido, inserta el par (note_id, tag_id) ya remapeado. Debe correr
después de notes y tags para que ambos lados estén en el IdentityMap.

DECISIONES DE DISEÑO:
- Nota sin UUID (omitida en la fase notes): se salta en silencio
- Tag sin UUID: se omite solo esa asociación
- INSERT con ON CONFLICT (note_id, tag_id) DO NOTHING: re-aplicar la misma
  asociación no falla ni duplica
"""

from datetime import datetime, timezone

import psycopg2

from .base import BaseMigrator
from .errors import RowWriteError, UnresolvedReferenceError
from .records import decode_note


class NoteTagsMigrator(BaseMigrator):
    """Migra notes.tagIDs → note_tags (note_id, tag_id, created_at)."""

    table = "note_tags"
    source_collection = "notes"
    kind = None
    insert_sql = """
        INSERT INTO note_tags (note_id, tag_id, created_at)
        VALUES (%s, %s, %s)
        ON CONFLICT (note_id, tag_id) DO NOTHING
    """

    def decode_document(self, doc):
        return decode_note(doc)

    def resolve_references(self, record, identity_map):
        note_id = identity_map.lookup("note", record.id)
        if note_id is None:
            raise UnresolvedReferenceError("note", record.id)
        return {"note_id": note_id}

    def resolve_tag(self, legacy_tag_id, identity_map):
        """
        Resuelve un tagID embebido en la nota.

        Raises:
            UnresolvedReferenceError: Si la etiqueta no fue migrada
        """
        tag_id = identity_map.lookup("tag", legacy_tag_id)
        if tag_id is None:
            raise UnresolvedReferenceError("tag", legacy_tag_id)
        return tag_id

    def build_row(self, new_id, record, references):
        # new_id es el UUID de la nota; la tabla de unión no tiene ID propio
        return (new_id, references["tag_id"], datetime.now(timezone.utc))

    def describe(self, record):
        return str(record.id)

    def insert_row(self, row, cursor, dry_run, natural_key=""):
        """
        Inserta la asociación ignorando duplicados.

        Returns:
            bool: True si se insertó (o se insertaría en dry run),
                  False si el par ya existía
        """
        if dry_run:
            return True
        try:
            cursor.execute(self.insert_sql, row)
        except psycopg2.Error as e:
            raise RowWriteError(self.table, natural_key, e) from e
        return cursor.rowcount != 0
