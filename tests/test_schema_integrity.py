"""
Test de integridad de schemas.

Valida que:
1. Las tablas que escriben los migradores existen en dbsetup.py
2. La cantidad de placeholders de cada INSERT coincide con build_row()
3. note_tags ignora duplicados con ON CONFLICT (note_id, tag_id)
"""

import sys
import os
import re
import uuid

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from migrators.identity_map import IdentityMap
from tests.helpers import get_all_migrator_instances, make_note, make_tag, make_user

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _sample_row(migrator):
    """Arma una fila de ejemplo con referencias resueltas."""
    ids = IdentityMap()
    user_doc = make_user("ana@example.com")
    ids.assign("user", user_doc["_id"])
    tag_doc = make_tag(user_doc["_id"], "trabajo")
    note_doc = make_note(user_doc["_id"], "Plan", tag_ids=[tag_doc["_id"]])

    docs = {"users": user_doc, "notes": note_doc, "tags": tag_doc}
    record = migrator.decode_document(docs[migrator.source_collection])

    if migrator.table == "note_tags":
        note_id = ids.assign("note", note_doc["_id"])
        ids.assign("tag", tag_doc["_id"])
        tag_id = migrator.resolve_tag(tag_doc["_id"], ids)
        return migrator.build_row(note_id, record, {"tag_id": tag_id})

    references = migrator.resolve_references(record, ids)
    return migrator.build_row(uuid.uuid4(), record, references)


def test_tables_exist_in_dbsetup():
    """Verifica que cada tabla destino se crea en dbsetup.py."""
    print("\n🔍 Test: Tablas en dbsetup.py")

    with open(os.path.join(PROJECT_ROOT, "dbsetup.py"), encoding="utf-8") as f:
        dbsetup_source = f.read()

    for name, migrator in get_all_migrator_instances():
        assert f"CREATE TABLE IF NOT EXISTS {migrator.table} (" in dbsetup_source, (
            f"{name}: tabla '{migrator.table}' no está en dbsetup.py"
        )
        print(f"   ✅ {migrator.table}")


def test_insert_placeholders_match_rows():
    """Verifica que INSERT y build_row() tienen la misma aridad."""
    print("\n🔍 Test: Placeholders vs build_row()")

    for name, migrator in get_all_migrator_instances():
        assert re.search(rf"INSERT INTO {migrator.table} \(", migrator.insert_sql), name

        columns = re.search(r"\(([^)]*)\)", migrator.insert_sql).group(1).split(",")
        placeholders = migrator.insert_sql.count("%s")
        row = _sample_row(migrator)

        assert len(columns) == placeholders == len(row), (
            f"{name}: {len(columns)} columnas, {placeholders} placeholders, {len(row)} valores"
        )
        print(f"   ✅ {name}: {placeholders} columnas")


def test_note_tags_conflict_clause():
    """La tabla de unión debe ignorar pares duplicados."""
    print("\n🔍 Test: ON CONFLICT en note_tags")

    migrators = dict(get_all_migrator_instances())
    sql = " ".join(migrators["NoteTagsMigrator"].insert_sql.split())
    assert "ON CONFLICT (note_id, tag_id) DO NOTHING" in sql

    for name in ("UsersMigrator", "NotesMigrator", "TagsMigrator"):
        assert "ON CONFLICT" not in migrators[name].insert_sql, name
    print("   ✅ Solo note_tags ignora conflictos")


if __name__ == "__main__":
    test_tables_exist_in_dbsetup()
    test_insert_placeholders_match_rows()
    test_note_tags_conflict_clause()
    print("\n✅ TODOS LOS TESTS PASARON")
