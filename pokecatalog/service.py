"""Catalog service: cache-first lookups, bulk import and evolution chains.

Orchestrates ``PokeApiClient`` and ``CreatureStore``. All calls are
synchronous; ``import_range`` fetches one name at a time.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from .errors import CatalogError, StoreError, TransportError
from .fetch import PokeApiClient
from .models import (
    AbilityDetail,
    AbilitySlot,
    Creature,
    EvolutionStage,
    MoveRef,
    SpriteSet,
    StatEntry,
)
from .naming import normalize_key
from .store import CreatureStore
from .transform import (
    extract_chain_url,
    map_ability_detail,
    map_creature,
    map_type_members,
)
from .transform_evolution import flatten_evolution_chain

logger = logging.getLogger("pokecatalog.service")

T = TypeVar("T")

ProgressCallback = Callable[[int, int, str], None]


def _should_retry(exc: TransportError) -> bool:
    status_code = exc.status_code
    if status_code is None:
        return True
    if status_code == 429:
        return True
    return 500 <= status_code <= 599


class CatalogService:
    """Cache-first access to creature data.

    ``max_retries``, ``retry_backoff_seconds`` and ``request_delay_seconds``
    govern upstream calls: transient ``TransportError``s (no status, 429, 5xx)
    are retried with exponential backoff, and every successful upstream call
    is followed by ``request_delay_seconds`` of sleep. When ``ttl_days`` is
    set, cached entries older than that count as misses.
    """

    def __init__(
        self,
        client: PokeApiClient,
        store: CreatureStore,
        *,
        max_retries: int = 0,
        retry_backoff_seconds: float = 1.0,
        request_delay_seconds: float = 0.0,
        ttl_days: Optional[float] = None,
    ) -> None:
        self.client = client
        self.store = store
        self.max_retries = max_retries
        self.retry_backoff_seconds = retry_backoff_seconds
        self.request_delay_seconds = request_delay_seconds
        self.ttl_days = ttl_days

    def _call_upstream(self, fn: Callable[..., T], *args: Any) -> T:
        attempt = 0
        while True:
            try:
                result = fn(*args)
            except TransportError as exc:
                if attempt >= self.max_retries or not _should_retry(exc):
                    raise
                attempt += 1
                backoff = self.retry_backoff_seconds * (2 ** (attempt - 1))
                logger.warning(
                    "Retrying %s (attempt %d/%d) in %.2fs: %s",
                    exc.resource, attempt, self.max_retries, backoff, exc,
                )
                time.sleep(backoff)
                continue
            if self.request_delay_seconds > 0:
                time.sleep(self.request_delay_seconds)
            return result

    def _cached(self, key: str) -> Optional[Creature]:
        creature = self.store.get(key)
        if creature is None:
            return None
        if self.ttl_days is not None and self.store.is_stale(key, self.ttl_days):
            logger.debug("Cache entry for %s is stale", key)
            return None
        return creature

    def lookup(self, name: str, *, force: bool = False) -> Creature:
        """Return a creature from the store, fetching and saving it on a miss.

        Upstream ``NotFound``, ``TransportError``, ``DecodeError`` and
        ``MalformedRecord`` propagate unchanged; ``StoreError`` when the
        fetched record cannot be saved. A lookup key other than the
        creature's own name (a numeric id, say) is remembered as an alias.
        """
        key = normalize_key(name)
        if not key:
            raise ValueError("Creature name must be non-empty")

        if not force:
            cached = self._cached(self.store.resolve(key))
            if cached is not None:
                logger.debug("Cache hit for %s", key)
                return cached

        raw = self._call_upstream(self.client.fetch_by_name, key)
        warnings: List[str] = []
        creature = map_creature(raw, warnings)
        if warnings:
            logger.warning("Mapped %s with %d skipped element(s)", key, len(warnings))
        self.store.save(creature)
        if key != normalize_key(creature.name):
            self.store.add_alias(key, creature.name)
        return creature

    def import_range(
        self,
        limit: int,
        offset: int,
        progress: Optional[ProgressCallback] = None,
    ) -> Tuple[int, List[CatalogError]]:
        """Import one listing page into the store, one name at a time.

        Returns ``(imported, errors)``; a failure for one name is collected
        and the batch continues. A failure fetching the page itself raises.
        """
        names = self._call_upstream(self.client.fetch_page, limit, offset)
        imported = 0
        errors: List[CatalogError] = []
        total = len(names)
        for index, name in enumerate(names, start=1):
            try:
                self.lookup(name)
                imported += 1
            except CatalogError as exc:
                logger.warning("Import of %s failed: %s", name, exc)
                errors.append(exc)
            except OSError as exc:
                logger.warning("Import of %s failed: %s", name, exc)
                errors.append(StoreError(str(exc), resource=name))
            if progress is not None:
                progress(index, total, name)

        logger.info(
            "Imported %d/%d creatures (limit=%d, offset=%d, failed=%d)",
            imported, total, limit, offset, len(errors),
        )
        return imported, errors

    def evolution_chain_for(self, species_name: str) -> List[EvolutionStage]:
        """Return the flattened evolution chain of a species."""
        key = normalize_key(species_name)
        if not key:
            raise ValueError("Species name must be non-empty")
        species = self._call_upstream(self.client.fetch_species, key)
        chain_url = extract_chain_url(species)
        payload = self._call_upstream(self.client.fetch_evolution_chain, chain_url)
        return flatten_evolution_chain(payload.get("chain"))

    def sprites_for(self, name: str) -> SpriteSet:
        return self.lookup(name).sprites

    def abilities_for(self, name: str) -> List[AbilitySlot]:
        return list(self.lookup(name).abilities)

    def ability_details(self, ability_name: str) -> AbilityDetail:
        """Upstream catalog entry for an ability. Not cached."""
        key = normalize_key(ability_name)
        if not key:
            raise ValueError("Ability name must be non-empty")
        return map_ability_detail(self._call_upstream(self.client.fetch_ability, key))

    def moves_for(self, name: str) -> List[MoveRef]:
        return list(self.lookup(name).moves)

    def stats_for(self, name: str) -> Dict[str, StatEntry]:
        return {s.name: s for s in self.lookup(name).stats}

    def creatures_of_type(self, type_name: str) -> List[Creature]:
        """Stored creatures of a type, ascending id. No network access."""
        return self.store.by_type(type_name)

    def type_members(self, type_name: str) -> List[str]:
        """Upstream creature names for a type."""
        key = normalize_key(type_name)
        if not key:
            raise ValueError("Type name must be non-empty")
        return map_type_members(self._call_upstream(self.client.fetch_type, key))

    def page(self, offset: int, limit: int) -> List[Creature]:
        return self.store.page(offset, limit)
