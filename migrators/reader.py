"""
Lectura secuencial de colecciones MongoDB.

Recorre una colección completa (sin filtro ni paginación) con sesión
explícita y cursor sin timeout, decodificando cada documento. Un error de
decodificación se propaga tal cual: nunca se omite el documento.
"""


def iter_documents(mongo_client, mongo_db, collection_name, decoder):
    """
    Genera los registros decodificados de una colección.

    Args:
        mongo_client: Cliente de pymongo (para la sesión)
        mongo_db: Base de datos de pymongo
        collection_name: Nombre de la colección ('users', 'notes', 'tags')
        decoder: Función doc → registro legacy (ver migrators.records)

    Yields:
        Registro legacy por cada documento, en el orden del cursor

    Raises:
        DocumentDecodeError: Si algún documento no se puede decodificar
    """
    collection = mongo_db[collection_name]

    # Sesión explícita para prevenir timeout de cursor en colecciones grandes
    with mongo_client.start_session() as session:
        cursor = collection.find({}, no_cursor_timeout=True, session=session)
        try:
            for doc in cursor:
                yield decoder(doc)
        finally:
            cursor.close()


def count_documents(mongo_db, collection_name):
    """Cantidad total de documentos (solo para mostrar progreso)."""
    return mongo_db[collection_name].count_documents({})
