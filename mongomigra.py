r"""
Script principal de migración de notas MongoDB → PostgreSQL.

Arquitectura con carga dinámica de migradores:
- mongomigra.py: Infraestructura genérica (conexiones, fases, progreso, reporte)
- migrators/*.py: Lógica específica por tabla (implementan BaseMigrator)
- config.py: Configuración centralizada (.env + fases)

Flujo de ejecución (estrictamente secuencial, sin reintentos):
1. Conectar a MongoDB y PostgreSQL (fallo → abortar sin tocar nada)
2. users: asignar UUID nuevo e insertar cada usuario
3. notes: resolver dueño; omitir si no fue migrado; insertar
4. tags: resolver dueño; omitir si no fue migrado; insertar
5. note_tags: segunda pasada sobre notes; insertar pares resolubles
6. Reporte final con conteos

Política de errores:
- Conexión, decodificación o INSERT fallido → abortar toda la ejecución
- Referencia no encontrada en el IdentityMap → omitir registro y seguir

Prerrequisitos:
- Tablas destino creadas (ejecutar dbsetup.py o las migraciones de schema)
- Variables MONGO_URL, MONGO_DB_NAME y DB_ADDR en el entorno o en .env

Uso:
    python mongomigra.py

    # Simulación sin escrituras
    DRY_RUN=true python mongomigra.py
"""

from pathlib import Path
import sys
import io
import importlib
import traceback
import psycopg2
from psycopg2.extras import register_uuid
from pymongo import MongoClient
from pymongo.errors import PyMongoError

# Asegurar que el directorio raíz esté en sys.path para imports dinámicos
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import config
from migrators.base import BaseMigrator
from migrators.errors import MigrationError, UnresolvedReferenceError
from migrators.identity_map import IdentityMap
from migrators.reader import count_documents, iter_documents

TARGET_TABLES = ["users", "notes", "tags", "note_tags"]


def connect_to_mongo():
    """
    Establece conexión a MongoDB usando MONGO_URL y MONGO_DB_NAME.

    Returns:
        tuple: (client, database) de pymongo

    Raises:
        SystemExit: Si no puede conectar o la URI es inválida
    """
    try:
        print("🔌 Conectando a MongoDB...")
        client = MongoClient(
            config.MONGO_URL, serverSelectionTimeoutMS=config.MONGO_TIMEOUT_MS
        )
        client.admin.command("ping")
        db = client[config.MONGO_DATABASE_NAME]
        print("✅ Conexión a MongoDB exitosa")
        return client, db
    except PyMongoError as e:
        print(f"❌ Failed to connect to MongoDB: {e}", file=sys.stderr)
        sys.exit(1)


def connect_to_postgres():
    """
    Establece conexión a PostgreSQL usando DB_ADDR.

    La conexión queda en autocommit: cada INSERT es su propia transacción,
    así una ejecución abortada conserva las filas ya escritas.

    Returns:
        tuple: (conexión, cursor) de psycopg2

    Raises:
        SystemExit: Si no puede conectar
    """
    try:
        print("🔌 Conectando a PostgreSQL...")
        conn = psycopg2.connect(config.POSTGRES_DSN)
        conn.autocommit = True
        register_uuid(conn_or_curs=conn)
        cursor = conn.cursor()
        print("✅ Conexión a PostgreSQL exitosa")
        return conn, cursor
    except psycopg2.Error as e:
        print(f"❌ Failed to connect to PostgreSQL: {e}", file=sys.stderr)
        sys.exit(1)


def load_migrator_for_phase(phase_name):
    """
    Carga dinámicamente el migrador correspondiente a una fase.

    Convención de nombres:
        users → migrators.users → UsersMigrator
        note_tags → migrators.note_tags → NoteTagsMigrator

    Args:
        phase_name: Nombre de la fase en config.COLLECTIONS

    Returns:
        BaseMigrator: Instancia del migrador específico

    Raises:
        MigrationError: Si no existe el módulo o la clase, o no hereda
            de BaseMigrator
    """
    phase_config = config.get_collection_config(phase_name)
    class_name = (
        "".join(word.capitalize() for word in phase_name.split("_")) + "Migrator"
    )

    try:
        module = importlib.import_module(f"migrators.{phase_name}")
    except ModuleNotFoundError as e:
        raise MigrationError(
            f"No existe migrador para '{phase_name}' "
            f"(se esperaba migrators/{phase_name}.py)"
        ) from e

    migrator_class = getattr(module, class_name, None)
    if migrator_class is None:
        raise MigrationError(
            f"El módulo migrators.{phase_name} no tiene la clase '{class_name}'"
        )

    # Verificar que hereda de BaseMigrator (type safety en runtime)
    if not issubclass(migrator_class, BaseMigrator):
        raise MigrationError(f"{class_name} no hereda de BaseMigrator")

    return migrator_class(table=phase_config["target_table"])


def _print_progress(count, total):
    if total and (count % config.PROGRESS_EVERY == 0 or count == total):
        # \033[K limpia la línea para evitar basura visual
        print(
            f"\r\033[K⏳ Procesados: {count:,}/{total:,} ({count*100//total}%)",
            end="",
            flush=True,
        )


def _print_skip(message):
    print(f"\r\033[K  ⚠️  {message}")


def migrate_entities(migrator, mongo_client, mongo_db, pg_cursor, identity_map, dry_run):
    """
    Migra una colección de entidades (users, notes o tags).

    Por cada registro: resolver FKs, asignar UUID nuevo, insertar.
    Si una FK no está en el IdentityMap el registro se omite sin asignarle
    UUID, de modo que las fases siguientes también lo ignoran.

    Args:
        migrator: Instancia de BaseMigrator para la colección
        mongo_client: Cliente de pymongo
        mongo_db: Base de datos de pymongo
        pg_cursor: Cursor de psycopg2
        identity_map: IdentityMap compartido por toda la ejecución
        dry_run: Si True no se escribe nada en PostgreSQL

    Returns:
        dict: {'migrated': int, 'skipped': int}

    Raises:
        DocumentDecodeError: Documento con estructura inesperada
        RowWriteError: INSERT rechazado por PostgreSQL
    """
    total = count_documents(mongo_db, migrator.source_collection)
    print(f"   📊 Total de documentos: {total:,}")

    stats = {"migrated": 0, "skipped": 0}
    processed = 0

    records = iter_documents(
        mongo_client, mongo_db, migrator.source_collection, migrator.decode_document
    )
    for record in records:
        processed += 1

        try:
            references = migrator.resolve_references(record, identity_map)
        except UnresolvedReferenceError as e:
            _print_skip(
                f"Omitiendo {migrator.kind} {migrator.describe(record)}: "
                f"{e.kind} no encontrado ({e.legacy_id})"
            )
            stats["skipped"] += 1
            _print_progress(processed, total)
            continue

        new_id = identity_map.assign(migrator.kind, record.id)
        row = migrator.build_row(new_id, record, references)
        migrator.insert_row(
            row, pg_cursor, dry_run, natural_key=migrator.describe(record)
        )
        stats["migrated"] += 1

        _print_progress(processed, total)

    print(f"\r\033[K  ✓ Migrados {stats['migrated']:,} registros en '{migrator.table}'")
    return stats


def migrate_note_tags(migrator, mongo_client, mongo_db, pg_cursor, identity_map, dry_run):
    """
    Crea las asociaciones nota-etiqueta (segunda pasada sobre notes).

    - Nota sin UUID: se salta en silencio (ya se reportó en la fase notes)
    - Etiqueta sin UUID: se omite esa asociación y se reporta
    - Par ya existente: ON CONFLICT DO NOTHING, se cuenta en 'existing'

    Returns:
        dict: {'migrated': int, 'skipped': int, 'existing': int}
    """
    stats = {"migrated": 0, "skipped": 0, "existing": 0}

    records = iter_documents(
        mongo_client, mongo_db, migrator.source_collection, migrator.decode_document
    )
    for note in records:
        try:
            references = migrator.resolve_references(note, identity_map)
        except UnresolvedReferenceError:
            continue

        for legacy_tag_id in note.tag_ids:
            try:
                tag_id = migrator.resolve_tag(legacy_tag_id, identity_map)
            except UnresolvedReferenceError:
                _print_skip(
                    f"Omitiendo asociación de la nota {migrator.describe(note)}: "
                    f"tag no encontrado ({legacy_tag_id})"
                )
                stats["skipped"] += 1
                continue

            row = migrator.build_row(references["note_id"], note, {"tag_id": tag_id})
            inserted = migrator.insert_row(
                row,
                pg_cursor,
                dry_run,
                natural_key=f"{migrator.describe(note)}/{legacy_tag_id}",
            )
            stats["migrated"] += 1
            if not inserted:
                stats["existing"] += 1

    print(f"  ✓ Creadas {stats['migrated']:,} asociaciones nota-etiqueta")
    return stats


def run_migration(mongo_client, mongo_db, pg_cursor, dry_run, identity_map=None):
    """
    Ejecuta todas las fases de config.MIGRATION_ORDER en secuencia.

    Una fase solo arranca cuando terminaron todas sus dependencias; no hay
    paralelismo ni reintentos. Cualquier excepción aborta las fases
    restantes.

    Returns:
        dict: Estadísticas por fase, ej: {'users': {'migrated': 2, ...}, ...}
    """
    if identity_map is None:
        identity_map = IdentityMap()

    phase_icons = {"users": "👥", "notes": "📝", "tags": "🏷️ ", "note_tags": "🔗"}
    results = {}

    for phase_name in config.MIGRATION_ORDER:
        pending = [
            dep for dep in config.validate_migration_order(phase_name)
            if dep not in results
        ]
        if pending:
            raise MigrationError(
                f"La fase '{phase_name}' requiere completar antes: {', '.join(pending)}"
            )

        phase_config = config.get_collection_config(phase_name)
        migrator = load_migrator_for_phase(phase_name)

        print(f"\n{phase_icons.get(phase_name, '📦')} Migrando {phase_name}...")
        print(f"   └─ {phase_config['description']}")

        if config.is_entity_phase(phase_name):
            results[phase_name] = migrate_entities(
                migrator, mongo_client, mongo_db, pg_cursor, identity_map, dry_run
            )
        else:
            results[phase_name] = migrate_note_tags(
                migrator, mongo_client, mongo_db, pg_cursor, identity_map, dry_run
            )

    return results


def count_target_rows(pg_cursor):
    """
    Cuenta filas de las tablas destino.

    Se usa antes y después de migrar: en dry run ambos conteos deben
    coincidir.

    Returns:
        dict: {'users': int, 'notes': int, 'tags': int, 'note_tags': int}
    """
    counts = {}
    for table in TARGET_TABLES:
        pg_cursor.execute(f"SELECT COUNT(*) FROM {table}")
        counts[table] = pg_cursor.fetchone()[0]
    return counts


def print_summary(results, dry_run, before=None, after=None):
    """Imprime el reporte final de la migración."""
    users = results.get("users", {}).get("migrated", 0)
    notes = results.get("notes", {}).get("migrated", 0)
    tags = results.get("tags", {}).get("migrated", 0)
    associations = results.get("note_tags", {}).get("migrated", 0)

    print("\n" + "=" * 70)
    if dry_run:
        print("🔍 DRY RUN: no se escribió nada en PostgreSQL")
    print("✨ Migración completada exitosamente")
    print("=" * 70)
    print(
        f"📊 Migrados: {users:,} usuarios, {notes:,} notas, {tags:,} etiquetas, "
        f"{associations:,} asociaciones"
    )

    skipped = {
        phase: stats["skipped"]
        for phase, stats in results.items()
        if stats.get("skipped")
    }
    if skipped:
        detail = ", ".join(f"{phase}: {count:,}" for phase, count in skipped.items())
        print(f"⚠️  Omitidos por referencias faltantes: {detail}")

    existing = results.get("note_tags", {}).get("existing", 0)
    if existing:
        print(f"ℹ️  {existing:,} asociaciones ya existían en destino")

    if before is not None and after is not None:
        print("\n🗄️  Filas en destino (antes → después):")
        for table in TARGET_TABLES:
            print(f"   • {table}: {before[table]:,} → {after[table]:,}")


def main():
    """
    Función principal que coordina el flujo completo de migración.

    Exit Codes:
        0: Éxito
        1: Configuración incompleta, error de conexión o error de migración
    """
    print("=" * 70)
    print("🚀 MIGRACIÓN DE NOTAS MONGODB → POSTGRESQL")
    print("=" * 70)

    missing = config.missing_settings()
    if missing:
        print(
            f"❌ Faltan variables de entorno obligatorias: {', '.join(missing)}",
            file=sys.stderr,
        )
        sys.exit(1)

    dry_run = config.DRY_RUN
    print(f"📍 MongoDB: {config.MONGO_DATABASE_NAME}")
    if dry_run:
        print("🔍 Modo DRY RUN: no se escribirá ningún dato")

    mongo_client, mongo_db = connect_to_mongo()
    pg_conn, pg_cursor = connect_to_postgres()
    print("✅ Conectado a ambas bases de datos")

    try:
        before = count_target_rows(pg_cursor)
        results = run_migration(mongo_client, mongo_db, pg_cursor, dry_run)
        after = count_target_rows(pg_cursor)
        print_summary(results, dry_run, before, after)

    except Exception as e:
        print(f"\n❌ Error durante la migración: {e}", file=sys.stderr)
        traceback.print_exc()
        sys.exit(1)

    finally:
        print("\n🔒 Cerrando conexiones...")
        pg_cursor.close()
        pg_conn.close()
        mongo_client.close()
        print("✅ Conexiones cerradas correctamente")


if __name__ == "__main__":
    # Forzar UTF-8 en stdout/stderr para emojis en Windows
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8")
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding="utf-8")
    main()
