# dbsetup.py
"""
Script de configuración de base de datos PostgreSQL.
Crea las tablas destino de la migración de notas.

La migración (mongomigra.py) asume que estas tablas ya existen; este
script solo es necesario cuando el schema no se creó con las migraciones
propias de la aplicación.

TABLAS:
- users: Usuarios (fuente de verdad)
- notes: Notas, FK a users
- tags: Etiquetas, FK a users, nombre único por usuario
- note_tags: Relación N:M entre notes y tags, par único
"""

import psycopg2
import config


def create_connection():
    """Establece conexión con PostgreSQL."""
    try:
        conn = psycopg2.connect(config.POSTGRES_DSN)
        return conn
    except psycopg2.Error as e:
        print(f"❌ Error conectando a PostgreSQL: {e}")
        return None


def setup_users_table(cursor):
    """
    Crea la tabla users.

    DECISIONES DE DISEÑO:
    - id UUID generado por la migración (no por la base)
    - email y username únicos
    - hash guarda el argon2id codificado tal como venía de MongoDB
    """
    print("\n   🔧 Creando tabla 'users'...")

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            email VARCHAR(255) NOT NULL UNIQUE,
            username VARCHAR(255) NOT NULL UNIQUE,
            hash TEXT NOT NULL,
            name VARCHAR(255),
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    print("   ✅ Tabla 'users' creada")


def setup_notes_table(cursor):
    """Crea la tabla notes (depende de users)."""
    print("\n   🔧 Creando tabla 'notes'...")

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS notes (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            title VARCHAR(500) NOT NULL DEFAULT '',
            content TEXT NOT NULL DEFAULT '',
            archived BOOLEAN NOT NULL DEFAULT FALSE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)

    cursor.execute("""
        CREATE INDEX IF NOT EXISTS idx_notes_user
        ON notes(user_id);

        CREATE INDEX IF NOT EXISTS idx_notes_user_archived
        ON notes(user_id, archived);
    """)

    print("   ✅ Tabla 'notes' creada (2 índices)")


def setup_tags_table(cursor):
    """
    Crea la tabla tags (depende de users).

    UNIQUE(user_id, name): la aplicación resuelve etiquetas por nombre
    dentro de cada usuario.
    """
    print("\n   🔧 Creando tabla 'tags'...")

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS tags (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            name VARCHAR(255) NOT NULL,
            color VARCHAR(50) NOT NULL DEFAULT '#fff',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),

            UNIQUE(user_id, name)
        )
    """)

    print("   ✅ Tabla 'tags' creada")


def setup_note_tags_table(cursor):
    """Crea la tabla de unión note_tags (depende de notes y tags)."""
    print("\n   🔧 Creando tabla 'note_tags'...")

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS note_tags (
            note_id UUID NOT NULL REFERENCES notes(id) ON DELETE CASCADE,
            tag_id UUID NOT NULL REFERENCES tags(id) ON DELETE CASCADE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),

            -- Una etiqueta se asocia una sola vez a cada nota
            UNIQUE(note_id, tag_id)
        )
    """)

    cursor.execute("""
        CREATE INDEX IF NOT EXISTS idx_note_tags_tag
        ON note_tags(tag_id);
    """)

    print("   ✅ Tabla 'note_tags' creada (1 índice)")


def main():
    """
    Punto de entrada principal.

    ORDEN DE EJECUCIÓN:
    1. users (sin dependencias)
    2. notes y tags (dependen de users)
    3. note_tags (depende de notes y tags)
    """
    print("=" * 80)
    print("🚀 CONFIGURACIÓN DE BASE DE DATOS PostgreSQL")
    print("=" * 80)

    conn = create_connection()
    if not conn:
        print("\n❌ No se pudo conectar a la base de datos")
        return

    cursor = conn.cursor()

    try:
        print("\n🔨 Creando estructura de base de datos...")

        # Orden crítico: fuentes de verdad primero
        setup_users_table(cursor)
        setup_notes_table(cursor)
        setup_tags_table(cursor)
        setup_note_tags_table(cursor)

        conn.commit()

        print("\n" + "=" * 80)
        print("✅ Base de datos configurada correctamente")
        print("=" * 80)

    except psycopg2.Error as e:
        conn.rollback()
        print(f"\n❌ Error durante la configuración: {e}")
        import traceback
        traceback.print_exc()
    finally:
        cursor.close()
        conn.close()


if __name__ == '__main__':
    main()
