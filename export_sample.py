"""
export_sample.py - Exporta muestra de colección MongoDB a JSON

Las muestras alimentan a analyzers/analyze_references.py para detectar
referencias rotas antes de migrar.

Uso:
    python export_sample.py <collection_name> [limit]

Ejemplo:
    python export_sample.py notes 500
"""

import sys
from pathlib import Path
from bson.json_util import dumps
from pymongo import MongoClient
import config

SAMPLES_DIR = Path("samples")
LEGACY_COLLECTIONS = ["users", "notes", "tags"]


def export_collection_sample(collection_name, limit=200):
    """
    Exporta muestra de una colección a JSON en formato Extended JSON.

    Args:
        collection_name: Nombre de la colección en MongoDB
        limit: Número de documentos a exportar (0 = todos)

    Returns:
        Path | None: Archivo generado, o None si la colección está vacía
    """
    client = MongoClient(config.MONGO_URL)
    try:
        collection = client[config.MONGO_DATABASE_NAME][collection_name]

        print(f"📥 Obteniendo {limit or 'todos los'} documentos de '{collection_name}'...")
        docs = list(collection.find().limit(limit))
    finally:
        client.close()

    if not docs:
        print(f"⚠️  La colección '{collection_name}' está vacía o no existe")
        return None

    SAMPLES_DIR.mkdir(exist_ok=True)

    # Serializar usando bson.json_util (mantiene ObjectId y fechas)
    json_output = dumps(docs, indent=2, ensure_ascii=False)

    filename = SAMPLES_DIR / f"{collection_name}_sample.json"
    with open(filename, 'w', encoding='utf-8') as f:
        f.write(json_output)

    print(f"✅ Exportados {len(docs)} documentos")
    print(f"📄 Archivo: {filename}")
    print(f"📊 Tamaño: {len(json_output) / 1024:.2f} KB")
    return filename


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Uso: python export_sample.py <collection_name> [limit]")
        print(f"Colecciones: {', '.join(LEGACY_COLLECTIONS)}")
        sys.exit(1)

    collection_name = sys.argv[1]
    limit = int(sys.argv[2]) if len(sys.argv) > 2 else 200

    export_collection_sample(collection_name, limit)
