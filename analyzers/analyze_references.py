# analyze_references.py
"""
Script de análisis de integridad referencial de las muestras legacy.

Lee las muestras exportadas por export_sample.py y anticipa qué omitirá
la migración:
- notes y tags cuyo userId no está entre los users
- tagIDs de notes que apuntan a tags inexistentes (o a tags huérfanas)

Uso:
    python export_sample.py users 0
    python export_sample.py notes 0
    python export_sample.py tags 0
    python analyzers/analyze_references.py
"""

from pathlib import Path

from bson.json_util import loads

# Configuración
SAMPLES_DIR = Path('samples')


def load_sample(collection_name, samples_dir=SAMPLES_DIR):
    """
    Carga la muestra Extended JSON de una colección.

    Returns:
        list | None: Documentos con ObjectId/fechas reconstruidos, o None
                     si el archivo no existe
    """
    sample_file = Path(samples_dir) / f'{collection_name}_sample.json'
    try:
        with open(sample_file, 'r', encoding='utf-8') as f:
            return loads(f.read())
    except FileNotFoundError:
        print(f"[ERROR] No se encontró el archivo {sample_file}")
        return None


def find_orphans(documents, user_ids):
    """
    Documentos cuyo userId no pertenece a ningún usuario conocido.

    Returns:
        list: Documentos huérfanos
    """
    return [doc for doc in documents if doc.get('userId') not in user_ids]


def find_dangling_tag_refs(notes, tag_ids):
    """
    Pares (nota, tagID) cuyo tagID no está entre las tags migrables.

    Returns:
        list: Tuplas (note_id, tag_id)
    """
    dangling = []
    for note in notes:
        for tag_id in note.get('tagIDs') or []:
            if tag_id not in tag_ids:
                dangling.append((note.get('_id'), tag_id))
    return dangling


def analyze(users, notes, tags):
    """
    Calcula el reporte de referencias rotas.

    Replica la política de la migración: una tag huérfana no se migra, así
    que las asociaciones hacia ella también se cuentan como rotas.

    Returns:
        dict: {'orphan_notes', 'orphan_tags', 'dangling_tag_refs',
               'migratable_associations'}
    """
    user_ids = {user.get('_id') for user in users}

    orphan_notes = find_orphans(notes, user_ids)
    orphan_tags = find_orphans(tags, user_ids)

    orphan_note_ids = {note.get('_id') for note in orphan_notes}
    orphan_tag_ids = {tag.get('_id') for tag in orphan_tags}
    migratable_tag_ids = {tag.get('_id') for tag in tags} - orphan_tag_ids
    migratable_notes = [n for n in notes if n.get('_id') not in orphan_note_ids]

    dangling = find_dangling_tag_refs(migratable_notes, migratable_tag_ids)
    total_refs = sum(len(n.get('tagIDs') or []) for n in migratable_notes)

    return {
        'orphan_notes': orphan_notes,
        'orphan_tags': orphan_tags,
        'dangling_tag_refs': dangling,
        'migratable_associations': total_refs - len(dangling),
    }


def print_report(users, notes, tags, report):
    print("=" * 70)
    print("🔍 ANÁLISIS DE REFERENCIAS LEGACY")
    print("=" * 70)
    print(f"\n📊 Documentos: {len(users)} users, {len(notes)} notes, {len(tags)} tags")

    print(f"\n📝 Notas huérfanas: {len(report['orphan_notes'])}")
    for note in report['orphan_notes'][:10]:
        print(f"   • {note.get('_id')} (userId={note.get('userId')})")

    print(f"\n🏷️  Tags huérfanas: {len(report['orphan_tags'])}")
    for tag in report['orphan_tags'][:10]:
        print(f"   • {tag.get('name')} (userId={tag.get('userId')})")

    print(f"\n🔗 Asociaciones rotas: {len(report['dangling_tag_refs'])}")
    for note_id, tag_id in report['dangling_tag_refs'][:10]:
        print(f"   • nota {note_id} → tag {tag_id}")

    print(f"\n✅ Asociaciones migrables: {report['migratable_associations']}")
    print("=" * 70)


def main():
    users = load_sample('users')
    notes = load_sample('notes')
    tags = load_sample('tags')

    if users is None or notes is None or tags is None:
        print("\n[ERROR] Exportar primero las tres muestras con export_sample.py")
        return

    report = analyze(users, notes, tags)
    print_report(users, notes, tags, report)


if __name__ == '__main__':
    main()
