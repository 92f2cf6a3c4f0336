"""
Funciones helper compartidas para todos los tests.

Proporciona:
- Carga dinámica de migradores basándose en config.py
- Dobles en memoria de MongoDB (cliente, base, colección, cursor) y de
  un cursor psycopg2 con las cuatro tablas destino

Los tests NO se conectan a bases reales.
"""

import sys
import os
import re
import importlib
from datetime import datetime, timezone

import psycopg2
from bson import ObjectId

# Agregar directorio raíz al path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config


def get_migrator_class_for_phase(phase_name):
    """
    Carga dinámicamente la clase migrador para una fase.

    Sigue la convención de nombres:
    - users → UsersMigrator (en migrators/users.py)
    - note_tags → NoteTagsMigrator (en migrators/note_tags.py)
    """
    config.get_collection_config(phase_name)
    class_name = "".join(word.capitalize() for word in phase_name.split("_")) + "Migrator"
    module = importlib.import_module(f"migrators.{phase_name}")
    return getattr(module, class_name)


def get_all_migrator_classes():
    """Retorna lista de tuplas (nombre_clase, clase) en orden de migración."""
    migradores = []
    for phase_name in config.MIGRATION_ORDER:
        migrator_class = get_migrator_class_for_phase(phase_name)
        migradores.append((migrator_class.__name__, migrator_class))
    return migradores


def get_all_migrator_instances():
    """Retorna lista de tuplas (nombre_clase, instancia) en orden de migración."""
    return [(name, cls()) for name, cls in get_all_migrator_classes()]


# =========================================================================
# DATOS DE EJEMPLO
# =========================================================================

CREATED = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
UPDATED = datetime(2024, 3, 2, 8, 30, tzinfo=timezone.utc)


def make_user(email, username=None, _id=None):
    return {
        "_id": _id or ObjectId(),
        "email": email,
        "username": username or email.split("@")[0],
        "hash": "$argon2id$v=19$m=65536,t=1,p=4$c2FsdA$aGFzaA",
        "name": username or email.split("@")[0].capitalize(),
        "createdAt": CREATED,
        "updatedAt": UPDATED,
    }


def make_note(user_id, title, tag_ids=None, archived=False, _id=None):
    return {
        "_id": _id or ObjectId(),
        "userId": user_id,
        "title": title,
        "content": f"Contenido de {title}",
        "archived": archived,
        "tagIDs": list(tag_ids or []),
        "createdAt": CREATED,
        "updatedAt": UPDATED,
    }


def make_tag(user_id, name, note_ids=None, _id=None):
    return {
        "_id": _id or ObjectId(),
        "userId": user_id,
        "name": name,
        "color": "#fff",
        "noteIDs": list(note_ids or []),
        "createdAt": CREATED,
        "updatedAt": UPDATED,
    }


# =========================================================================
# DOBLE DE MONGODB
# =========================================================================


class FakeMongoCursor:
    def __init__(self, docs):
        self._docs = list(docs)
        self.closed = False

    def __iter__(self):
        return iter(self._docs)

    def close(self):
        self.closed = True


class FakeCollection:
    def __init__(self, docs=None):
        self.docs = list(docs or [])
        self.find_calls = []

    def find(self, filter=None, **kwargs):
        self.find_calls.append((filter, kwargs))
        return FakeMongoCursor(self.docs)

    def count_documents(self, filter):
        return len(self.docs)


class FakeSession:
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeMongoClient:
    def __init__(self):
        self.sessions = 0

    def start_session(self):
        self.sessions += 1
        return FakeSession()

    def close(self):
        pass


class FakeMongoDatabase:
    def __init__(self, users=None, notes=None, tags=None):
        self.collections = {
            "users": FakeCollection(users),
            "notes": FakeCollection(notes),
            "tags": FakeCollection(tags),
        }

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())


# =========================================================================
# DOBLE DE PSYCOPG2
# =========================================================================

TABLE_COLUMNS = {
    "users": ["id", "email", "username", "hash", "name", "created_at", "updated_at"],
    "notes": ["id", "user_id", "title", "content", "archived", "created_at", "updated_at"],
    "tags": ["id", "user_id", "name", "color", "created_at", "updated_at"],
    "note_tags": ["note_id", "tag_id", "created_at"],
}


class FakePgCursor:
    """
    Cursor en memoria que entiende los INSERT de los migradores y los
    SELECT COUNT(*) del reporte.

    Valida FKs y el UNIQUE(note_id, tag_id) como lo haría PostgreSQL.

    Args:
        fail_tables: Tablas cuyo INSERT debe fallar con IntegrityError
    """

    def __init__(self, fail_tables=None):
        self.tables = {name: [] for name in TABLE_COLUMNS}
        self.inserts = 0
        self.rowcount = -1
        self.fail_tables = set(fail_tables or [])
        self._result = None

    def rows(self, table):
        columns = TABLE_COLUMNS[table]
        return [dict(zip(columns, row)) for row in self.tables[table]]

    def _ids(self, table):
        return {row[0] for row in self.tables[table]}

    def execute(self, sql, params=None):
        count_match = re.search(r"SELECT COUNT\(\*\) FROM (\w+)", sql)
        if count_match:
            self._result = (len(self.tables[count_match.group(1)]),)
            return

        insert_match = re.search(r"INSERT INTO (\w+)", sql)
        if not insert_match:
            raise AssertionError(f"SQL inesperado en el doble: {sql}")

        table = insert_match.group(1)
        if table in self.fail_tables:
            raise psycopg2.IntegrityError(f"simulated failure on {table}")
        if len(params) != len(TABLE_COLUMNS[table]):
            raise psycopg2.ProgrammingError(f"wrong number of params for {table}")

        # Todas las columnas destino son NOT NULL (ver dbsetup.py)
        for column, value in zip(TABLE_COLUMNS[table], params):
            if value is None:
                raise psycopg2.IntegrityError(f"{table}.{column} violates not-null constraint")

        if table in ("notes", "tags") and params[1] not in self._ids("users"):
            raise psycopg2.IntegrityError(f"{table}.user_id violates foreign key")

        if table == "note_tags":
            if params[0] not in self._ids("notes"):
                raise psycopg2.IntegrityError("note_tags.note_id violates foreign key")
            if params[1] not in self._ids("tags"):
                raise psycopg2.IntegrityError("note_tags.tag_id violates foreign key")
            pairs = {(row[0], row[1]) for row in self.tables["note_tags"]}
            if (params[0], params[1]) in pairs:
                self.rowcount = 0
                return

        self.tables[table].append(tuple(params))
        self.inserts += 1
        self.rowcount = 1

    def fetchone(self):
        return self._result

    def close(self):
        pass
