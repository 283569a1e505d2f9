"""Creature catalog core: PokéAPI client, mappers, local store and service."""

from .config import Settings, build_service, load_settings
from .errors import (
    CatalogError,
    DecodeError,
    MalformedRecord,
    NotFound,
    StoreError,
    TransportError,
)
from .fetch import PokeApiClient
from .models import (
    AbilityDetail,
    AbilitySlot,
    Creature,
    EvolutionStage,
    MoveRef,
    SpeciesRef,
    SpriteSet,
    StatEntry,
    TypeSlot,
    VersionGroupDetail,
)
from .service import CatalogService
from .store import CreatureStore
from .transform import map_creature
from .transform_evolution import flatten_evolution_chain

__all__ = [
    "AbilityDetail",
    "AbilitySlot",
    "CatalogError",
    "CatalogService",
    "Creature",
    "CreatureStore",
    "DecodeError",
    "EvolutionStage",
    "MalformedRecord",
    "MoveRef",
    "NotFound",
    "PokeApiClient",
    "Settings",
    "SpeciesRef",
    "SpriteSet",
    "StatEntry",
    "StoreError",
    "TransportError",
    "TypeSlot",
    "VersionGroupDetail",
    "build_service",
    "flatten_evolution_chain",
    "load_settings",
    "map_creature",
]
