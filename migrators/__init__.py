"""
Migradores para transformar colecciones MongoDB a tablas PostgreSQL.

Cada fase de config.MIGRATION_ORDER tiene un migrador que implementa la
interfaz BaseMigrator y se carga dinámicamente en runtime.

Estructura:
    base.py: Clase abstracta BaseMigrator
    users.py: UsersMigrator (fase users)
    notes.py: NotesMigrator (fase notes)
    tags.py: TagsMigrator (fase tags)
    note_tags.py: NoteTagsMigrator (fase note_tags)
    records.py: Registros legacy y decodificación de documentos
    identity_map.py: Mapeo ObjectId → UUID por tipo de entidad
    reader.py: Recorrido secuencial de colecciones
    errors.py: Excepciones de la migración

Los migradores son instanciados por load_migrator_for_phase() en
mongomigra.py usando importlib.import_module() para carga dinámica.

Interfaz requerida (ver BaseMigrator):
    - decode_document(doc)
    - resolve_references(record, identity_map)
    - build_row(new_id, record, references)
    - describe(record)
    - insert_row(row, cursor, dry_run, natural_key)
"""
