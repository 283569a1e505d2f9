"""Typed domain records produced by the mappers.

Records are frozen dataclasses. ``Creature`` round-trips through plain dicts
(``to_dict`` / ``from_dict``) so the store can persist it as JSON.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .naming import slug_titlecase

STAT_NAMES: Tuple[str, ...] = (
    "hp",
    "attack",
    "defense",
    "special-attack",
    "special-defense",
    "speed",
)

SPRITE_KEYS: Tuple[str, ...] = (
    "front_default",
    "back_default",
    "front_shiny",
    "back_shiny",
    "front_female",
    "back_female",
    "front_shiny_female",
    "back_shiny_female",
)


@dataclass(frozen=True)
class AbilitySlot:
    name: str
    url: str
    is_hidden: bool
    slot: int


@dataclass(frozen=True)
class SpeciesRef:
    name: str
    url: str


@dataclass(frozen=True)
class AbilityDetail:
    """Catalog entry for an ability, from `/ability/{name}`. Not persisted."""

    id: int
    name: str
    is_main_series: bool
    generation: Optional[str] = None
    effect: Optional[str] = None
    short_effect: Optional[str] = None
    holders: Tuple[str, ...] = ()


@dataclass(frozen=True)
class StatEntry:
    name: str
    base_stat: int
    effort: int


@dataclass(frozen=True)
class TypeSlot:
    slot: int
    name: str
    url: str


@dataclass(frozen=True)
class VersionGroupDetail:
    level_learned_at: int
    move_learn_method: str
    version_group: str


@dataclass(frozen=True)
class MoveRef:
    name: str
    url: str
    version_group_details: Tuple[VersionGroupDetail, ...] = ()


@dataclass(frozen=True)
class SpriteSet:
    """Up to eight optional image URLs. An all-``None`` set is valid."""

    front_default: Optional[str] = None
    back_default: Optional[str] = None
    front_shiny: Optional[str] = None
    back_shiny: Optional[str] = None
    front_female: Optional[str] = None
    back_female: Optional[str] = None
    front_shiny_female: Optional[str] = None
    back_shiny_female: Optional[str] = None

    def available(self) -> Dict[str, str]:
        """Return only the sprite keys that carry a URL, in canonical order."""
        out: Dict[str, str] = {}
        for key in SPRITE_KEYS:
            url = getattr(self, key)
            if url:
                out[key] = url
        return out


@dataclass(frozen=True)
class Creature:
    id: int
    name: str
    base_experience: int
    height: int
    weight: int
    order: int
    abilities: Tuple[AbilitySlot, ...] = ()
    stats: Tuple[StatEntry, ...] = ()
    types: Tuple[TypeSlot, ...] = ()
    moves: Tuple[MoveRef, ...] = ()
    sprites: SpriteSet = field(default_factory=SpriteSet)
    species: Optional[SpeciesRef] = None

    @property
    def display_name(self) -> str:
        return slug_titlecase(self.name)

    @property
    def type_names(self) -> List[str]:
        return [t.name for t in self.types]

    @property
    def base_stat_total(self) -> int:
        return sum(s.base_stat for s in self.stats)

    def stat(self, name: str) -> Optional[StatEntry]:
        for entry in self.stats:
            if entry.name == name:
                return entry
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible primitives (tuples become lists)."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Creature":
        """Rebuild a creature from ``to_dict`` output.

        Raises ``KeyError`` / ``TypeError`` on a structurally wrong dict; the
        store treats those as a corrupt cache entry.
        """
        return cls(
            id=data["id"],
            name=data["name"],
            base_experience=data["base_experience"],
            height=data["height"],
            weight=data["weight"],
            order=data["order"],
            abilities=tuple(AbilitySlot(**a) for a in data.get("abilities") or []),
            stats=tuple(StatEntry(**s) for s in data.get("stats") or []),
            types=tuple(TypeSlot(**t) for t in data.get("types") or []),
            moves=tuple(
                MoveRef(
                    name=m["name"],
                    url=m["url"],
                    version_group_details=tuple(
                        VersionGroupDetail(**d)
                        for d in m.get("version_group_details") or []
                    ),
                )
                for m in data.get("moves") or []
            ),
            sprites=SpriteSet(**(data.get("sprites") or {})),
            species=SpeciesRef(**data["species"]) if data.get("species") else None,
        )


@dataclass(frozen=True)
class EvolutionStage:
    """One node of a flattened evolution chain. Never persisted.

    ``evolution_details`` holds the raw trigger dicts, so it takes part in
    equality but not in hashing.
    """

    species_name: str
    species_url: str
    evolution_details: Tuple[Dict[str, Any], ...] = field(default=(), hash=False)
    position: int = 0
