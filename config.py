"""
Configuración centralizada para la migración de notas MongoDB → PostgreSQL.

ARQUITECTURA:
La migración se divide en cuatro fases, una por tabla destino:
- users: Fuente de verdad de usuarios (no depende de nadie)
- notes: Notas, referencian a users vía user_id
- tags: Etiquetas, referencian a users vía user_id
- note_tags: Tabla de unión N:M entre notes y tags

FLUJO DE MIGRACIÓN:
1. Ejecutar fases en orden de MIGRATION_ORDER
2. Cada fase de entidad asigna UUIDs nuevos y los registra en el IdentityMap
3. Las fases posteriores resuelven FKs contra el IdentityMap

VARIABLES DE ENTORNO (.env):
    MONGO_URL       URI de conexión a MongoDB (obligatoria)
    MONGO_DB_NAME   Nombre de la base de datos origen (obligatoria)
    DB_ADDR         DSN de PostgreSQL destino (obligatoria)
    DRY_RUN         "true" para simular sin escribir (opcional)

USO DE LAS FUNCIONES HELPER:
    config = get_collection_config('notes')
    table = config['target_table']  # 'notes'

    deps = validate_migration_order('note_tags')
    # ['notes', 'tags']
"""

import os
from dotenv import load_dotenv

# Carga las variables del archivo .env en las variables de entorno del sistema
load_dotenv(override=True)


def parse_dry_run(value) -> bool:
    """
    Interpreta el valor de DRY_RUN.

    Solo el string exacto "true" activa el modo simulación; cualquier otro
    valor (incluido None) significa ejecución real.

    Ejemplo:
        >>> parse_dry_run("true")
        True
        >>> parse_dry_run("TRUE")
        False
    """
    return value == "true"


# --- Configuración de MongoDB (Origen) ---
MONGO_URL = os.getenv("MONGO_URL") or ""
MONGO_DATABASE_NAME = os.getenv("MONGO_DB_NAME") or ""

# --- Configuración de PostgreSQL (Destino) ---
POSTGRES_DSN = os.getenv("DB_ADDR") or ""

# --- Configuración de Migración ---
DRY_RUN = parse_dry_run(os.getenv("DRY_RUN", "false"))
PROGRESS_EVERY = 100  # Cada cuántos documentos refrescar la línea de progreso
MONGO_TIMEOUT_MS = 5000

REQUIRED_SETTINGS = {
    "MONGO_URL": "MONGO_URL",
    "MONGO_DB_NAME": "MONGO_DATABASE_NAME",
    "DB_ADDR": "POSTGRES_DSN",
}

# --- Configuración por fase ---
# Cada fase define:
# - source_collection: Colección MongoDB que se recorre
# - target_table: Tabla PostgreSQL destino
# - kind: Tipo de entidad en el IdentityMap (None para la tabla de unión)
# - phase_type: 'entity' (asigna IDs nuevos) o 'association' (solo resuelve)
# - depends_on: Fases que DEBEN completarse antes (por FKs)
# - description: Descripción de negocio

COLLECTIONS = {
    # === FUENTE DE VERDAD (sin dependencias) ===
    "users": {
        "source_collection": "users",
        "target_table": "users",
        "kind": "user",
        "phase_type": "entity",
        "depends_on": [],
        "description": "Usuarios registrados (email, username, hash de contraseña)",
    },
    # === ENTIDADES CON DUEÑO ===
    "notes": {
        "source_collection": "notes",
        "target_table": "notes",
        "kind": "note",
        "phase_type": "entity",
        "depends_on": ["users"],  # notes.user_id → users.id
        "description": "Notas de cada usuario (título, contenido, archivada)",
    },
    "tags": {
        "source_collection": "tags",
        "target_table": "tags",
        "kind": "tag",
        "phase_type": "entity",
        "depends_on": ["users"],  # tags.user_id → users.id
        "description": "Etiquetas de cada usuario (nombre, color)",
    },
    # === TABLA DE UNIÓN ===
    "note_tags": {
        "source_collection": "notes",  # Segunda pasada sobre notes.tagIDs
        "target_table": "note_tags",
        "kind": None,
        "phase_type": "association",
        "depends_on": ["notes", "tags"],
        "description": "Relación N:M entre notas y etiquetas",
    },
}

# --- Orden de Migración ---
# Derivado de las dependencias declaradas en COLLECTIONS.
MIGRATION_ORDER = [
    "users",  # Sin dependencias
    "notes",  # Depende de users
    "tags",  # Depende de users
    "note_tags",  # Depende de notes y tags
]


# --- Funciones Helper ---


def get_collection_config(phase_name: str) -> dict:
    """
    Obtiene la configuración de una fase por nombre.

    Args:
        phase_name: Nombre de la fase (ej: 'notes')

    Returns:
        dict: Configuración con keys source_collection, target_table, kind,
              phase_type, depends_on, description

    Raises:
        KeyError: Si la fase no está configurada
    """
    if phase_name not in COLLECTIONS:
        available = ", ".join(COLLECTIONS.keys())
        raise KeyError(
            f"Fase '{phase_name}' no está configurada.\n"
            f"Fases disponibles: {available}"
        )
    return COLLECTIONS[phase_name]


def validate_migration_order(phase_name: str) -> list:
    """
    Retorna las fases que deben completarse antes de la indicada.

    Ejemplo:
        >>> validate_migration_order('note_tags')
        ['notes', 'tags']
        >>> validate_migration_order('users')
        []
    """
    config = get_collection_config(phase_name)
    return config.get("depends_on", [])


def is_entity_phase(phase_name: str) -> bool:
    """
    Verifica si una fase migra entidades (asigna IDs nuevos).

    La fase de asociación (note_tags) no asigna IDs: solo resuelve
    los ya asignados por notes y tags.
    """
    config = get_collection_config(phase_name)
    return config.get("phase_type") == "entity"


def get_target_table(phase_name: str) -> str:
    """Obtiene el nombre de la tabla PostgreSQL destino de una fase."""
    config = get_collection_config(phase_name)
    return config["target_table"]


def missing_settings() -> list:
    """
    Lista las variables de entorno obligatorias que no están definidas.

    Returns:
        list: Nombres de variables faltantes (vacía si todo está OK)
    """
    module_globals = globals()
    return [
        env_name
        for env_name, attr in REQUIRED_SETTINGS.items()
        if not module_globals.get(attr)
    ]
