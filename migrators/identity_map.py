"""
Mapa de identidades legacy → nuevas.

Mantiene tres diccionarios independientes (user, note, tag) desde el
ObjectId de MongoDB hacia un UUID aleatorio generado en esta ejecución.
Solo vive en memoria durante la corrida: re-ejecutar la migración genera
UUIDs distintos.
"""

import uuid

KINDS = ("user", "note", "tag")


class IdentityMap:
    """
    Mapeos ObjectId → UUID por tipo de entidad.

    Cada ObjectId se asigna una sola vez por tipo (durante la fase de su
    propia entidad) y el mapa nunca se achica.

    Ejemplo:
        >>> ids = IdentityMap()
        >>> new_id = ids.assign('user', legacy_id)
        >>> ids.lookup('user', legacy_id) == new_id
        True
        >>> ids.lookup('user', otro_id) is None
        True
    """

    def __init__(self):
        self._maps = {kind: {} for kind in KINDS}

    def _map(self, kind):
        if kind not in self._maps:
            raise KeyError(f"Tipo de entidad desconocido: '{kind}'")
        return self._maps[kind]

    def assign(self, kind, legacy_id):
        """
        Genera un UUID nuevo para legacy_id y lo registra.

        Raises:
            ValueError: Si legacy_id ya fue asignado para ese tipo
        """
        mapping = self._map(kind)
        if legacy_id in mapping:
            raise ValueError(f"{kind} {legacy_id} ya tiene un ID asignado")
        new_id = uuid.uuid4()
        mapping[legacy_id] = new_id
        return new_id

    def lookup(self, kind, legacy_id):
        """
        Busca el UUID nuevo de legacy_id.

        Returns:
            uuid.UUID | None: None si la entidad no fue migrada
        """
        return self._map(kind).get(legacy_id)

    def has(self, kind, legacy_id):
        return legacy_id in self._map(kind)

    def count(self, kind):
        return len(self._map(kind))
