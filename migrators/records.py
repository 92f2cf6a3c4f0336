"""
Registros legacy leídos desde MongoDB.

Convierte los documentos BSON (dict de pymongo) en dataclasses tipadas.
Los campos ausentes toman su valor cero ("", False, [], ZERO_TIME); un campo
presente con tipo incorrecto lanza DocumentDecodeError, porque indica que
el schema de origen no es el esperado y el remapeo de IDs quedaría corrupto.

Nombres de campos en MongoDB:
    users: _id, email, username, hash, name, createdAt, updatedAt
    notes: _id, userId, title, content, archived, tagIDs, createdAt, updatedAt
    tags:  _id, userId, name, color, noteIDs, createdAt, updatedAt
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId

from .errors import DocumentDecodeError

# Fecha cero (0001-01-01 UTC) para createdAt/updatedAt ausentes; las
# columnas destino son NOT NULL
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


@dataclass
class LegacyUser:
    id: ObjectId
    email: str = ""
    username: str = ""
    hash: str = ""
    name: str = ""
    created_at: datetime = ZERO_TIME
    updated_at: datetime = ZERO_TIME


@dataclass
class LegacyNote:
    id: ObjectId
    user_id: Optional[ObjectId] = None
    title: str = ""
    content: str = ""
    archived: bool = False
    tag_ids: List[ObjectId] = field(default_factory=list)
    created_at: datetime = ZERO_TIME
    updated_at: datetime = ZERO_TIME


@dataclass
class LegacyTag:
    id: ObjectId
    user_id: Optional[ObjectId] = None
    name: str = ""
    color: str = ""
    # Referencia inversa redundante; no se usa para escribir note_tags
    note_ids: List[ObjectId] = field(default_factory=list)
    created_at: datetime = ZERO_TIME
    updated_at: datetime = ZERO_TIME


# =========================================================================
# HELPERS DE DECODIFICACIÓN
# =========================================================================


class _Decoder:
    """Lee campos de un documento validando tipos."""

    def __init__(self, collection, doc):
        self.collection = collection
        self.doc = doc
        self.document_id = doc.get("_id")

    def fail(self, field_name, detail):
        raise DocumentDecodeError(
            self.collection, self.document_id, field_name, detail
        )

    def object_id(self, key, required=False):
        value = self.doc.get(key)
        if value is None:
            if required:
                self.fail(key, "es obligatorio")
            return None
        if not isinstance(value, ObjectId):
            self.fail(key, f"debe ser ObjectId, se recibió {type(value).__name__}")
        return value

    def string(self, key):
        value = self.doc.get(key)
        if value is None:
            return ""
        if not isinstance(value, str):
            self.fail(key, f"debe ser string, se recibió {type(value).__name__}")
        return value

    def boolean(self, key):
        value = self.doc.get(key)
        if value is None:
            return False
        if not isinstance(value, bool):
            self.fail(key, f"debe ser boolean, se recibió {type(value).__name__}")
        return value

    def timestamp(self, key):
        value = self.doc.get(key)
        if value is None:
            return ZERO_TIME
        if not isinstance(value, datetime):
            self.fail(key, f"debe ser fecha, se recibió {type(value).__name__}")
        return value

    def object_id_list(self, key):
        value = self.doc.get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            self.fail(key, f"debe ser array, se recibió {type(value).__name__}")
        for item in value:
            if not isinstance(item, ObjectId):
                self.fail(key, f"contiene un elemento {type(item).__name__}")
        return list(value)


def _decoder_for(collection, doc):
    if not isinstance(doc, dict):
        raise DocumentDecodeError(
            collection, None, "_id", f"documento inválido ({type(doc).__name__})"
        )
    return _Decoder(collection, doc)


# =========================================================================
# DECODIFICADORES PÚBLICOS
# =========================================================================


def decode_user(doc) -> LegacyUser:
    d = _decoder_for("users", doc)
    return LegacyUser(
        id=d.object_id("_id", required=True),
        email=d.string("email"),
        username=d.string("username"),
        hash=d.string("hash"),
        name=d.string("name"),
        created_at=d.timestamp("createdAt"),
        updated_at=d.timestamp("updatedAt"),
    )


def decode_note(doc) -> LegacyNote:
    d = _decoder_for("notes", doc)
    return LegacyNote(
        id=d.object_id("_id", required=True),
        user_id=d.object_id("userId"),
        title=d.string("title"),
        content=d.string("content"),
        archived=d.boolean("archived"),
        tag_ids=d.object_id_list("tagIDs"),
        created_at=d.timestamp("createdAt"),
        updated_at=d.timestamp("updatedAt"),
    )


def decode_tag(doc) -> LegacyTag:
    d = _decoder_for("tags", doc)
    return LegacyTag(
        id=d.object_id("_id", required=True),
        user_id=d.object_id("userId"),
        name=d.string("name"),
        color=d.string("color"),
        note_ids=d.object_id_list("noteIDs"),
        created_at=d.timestamp("createdAt"),
        updated_at=d.timestamp("updatedAt"),
    )
