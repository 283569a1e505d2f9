"""Local creature store backed by one JSON file per creature.

Files live under ``<cache_dir>/creatures/<key>.json`` where ``key`` is the
lower-cased creature name. Each file holds the full serialized creature, so
saving replaces every child collection at once. ``<cache_dir>/aliases.json``
maps alternate lookup keys (numeric ids, for example) to creature names.

A store instance is meant to be used from one thread at a time.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

from .cache.io import (
    atomic_write_json,
    ensure_dir,
    list_json_files,
    read_json,
    record_is_stale,
    safe_filename,
    wrap_record,
)
from .errors import StoreError
from .models import Creature
from .naming import normalize_key

logger = logging.getLogger("pokecatalog.store")

CREATURES_SUBDIR = "creatures"
ALIASES_FILE = "aliases.json"


class CreatureStore:
    """Case-insensitive, file-backed persistence for ``Creature`` records."""

    def __init__(self, cache_dir: str) -> None:
        self.cache_dir = cache_dir
        self.creatures_dir = os.path.join(cache_dir, CREATURES_SUBDIR)
        self.aliases_path = os.path.join(cache_dir, ALIASES_FILE)
        ensure_dir(self.creatures_dir)

    def _path(self, name: str) -> str:
        return os.path.join(self.creatures_dir, f"{safe_filename(name)}.json")

    def _read(self, name: str) -> Optional[Dict[str, Any]]:
        """Return the envelope stored for exactly ``name``, or None."""
        record = read_json(self._path(name))
        if record is None:
            return None
        meta = record.get("_meta")
        # Distinct names can share a file stem ("mr.mime" / "mr mime").
        if not isinstance(meta, dict) or meta.get("name") != normalize_key(name):
            return None
        return record

    def _decode(self, record: Optional[Dict[str, Any]], source: str) -> Optional[Creature]:
        if record is None:
            return None
        try:
            return Creature.from_dict(record["data"])
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Ignoring corrupt cache entry %s: %s", source, exc)
            return None

    def _load_all(self) -> List[Creature]:
        creatures = []
        for path in list_json_files(self.creatures_dir):
            creature = self._decode(read_json(path), path)
            if creature is not None:
                creatures.append(creature)
        creatures.sort(key=lambda c: c.id)
        return creatures

    def get(self, name: str) -> Optional[Creature]:
        """Return the stored creature, or None when absent or unreadable."""
        return self._decode(self._read(name), name)

    def exists(self, name: str) -> bool:
        """Agrees with ``get``: unreadable entries do not exist."""
        return self.get(name) is not None

    def save(self, creature: Creature) -> None:
        """Insert or fully replace the record stored under the creature's name.

        Raises ``StoreError`` when the file cannot be written.
        """
        path = self._path(creature.name)
        try:
            atomic_write_json(
                path,
                wrap_record(creature.to_dict(), id=creature.id, name=normalize_key(creature.name)),
            )
        except OSError as exc:
            raise StoreError(
                f"Could not save {creature.name!r}: {exc}", resource=creature.name
            ) from exc
        logger.debug("Saved %s (id=%d) to %s", creature.name, creature.id, path)

    def delete(self, name: str) -> bool:
        """Remove a creature and everything it owns. Returns False if absent."""
        if self._read(name) is None:
            return False
        os.remove(self._path(name))
        return True

    def _aliases(self) -> Dict[str, str]:
        data = read_json(self.aliases_path) or {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def add_alias(self, alias: str, name: str) -> None:
        """Record ``alias`` as another lookup key for creature ``name``."""
        alias, name = normalize_key(alias), normalize_key(name)
        if alias == name:
            return
        aliases = self._aliases()
        if aliases.get(alias) == name:
            return
        aliases[alias] = name
        try:
            atomic_write_json(self.aliases_path, aliases)
        except OSError as exc:
            raise StoreError(f"Could not save alias {alias!r}: {exc}", resource=alias) from exc

    def resolve(self, name: str) -> str:
        """Return the creature name ``name`` refers to (itself if no alias)."""
        key = normalize_key(name)
        return self._aliases().get(key, key)

    def is_stale(self, name: str, ttl_days: float) -> bool:
        """Return True when the entry is missing or older than ``ttl_days``."""
        return record_is_stale(self._read(name), ttl_days)

    def page(self, offset: int, limit: int) -> List[Creature]:
        """Return up to ``limit`` creatures in ascending id order, from ``offset``."""
        offset = max(offset, 0)
        limit = max(limit, 0)
        return self._load_all()[offset:offset + limit]

    def count(self) -> int:
        """Number of readable entries."""
        return len(self._load_all())

    def names(self) -> List[str]:
        """Return stored creature names in ascending id order."""
        return [c.name for c in self._load_all()]

    def by_type(self, type_name: str) -> List[Creature]:
        """Return stored creatures having ``type_name`` in any slot."""
        key = normalize_key(type_name)
        return [c for c in self._load_all() if key in c.type_names]
