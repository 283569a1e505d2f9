"""Transform layer: raw PokéAPI payloads -> typed domain records.

- Reads only already-decoded JSON dicts; performs no network access
- Required scalars fail loudly with ``MalformedRecord``
- Malformed list elements are soft-skipped and reported through ``warnings``
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

from .errors import MalformedRecord
from .models import (
    SPRITE_KEYS,
    STAT_NAMES,
    AbilityDetail,
    AbilitySlot,
    Creature,
    MoveRef,
    SpeciesRef,
    SpriteSet,
    StatEntry,
    TypeSlot,
    VersionGroupDetail,
)

logger = logging.getLogger("pokecatalog.transform")

T = TypeVar("T")

REQUIRED_INT_FIELDS = ("id", "base_experience", "height", "weight", "order")


def _as_int(value: Any) -> Optional[int]:
    # bool is an int subclass; PokéAPI never uses it for numbers.
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _as_nonempty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _named_resource(node: Any) -> Optional[Dict[str, str]]:
    """Decode a ``{"name": ..., "url": ...}`` reference, or return None."""
    if not isinstance(node, dict):
        return None
    name = _as_nonempty_str(node.get("name"))
    if name is None:
        return None
    url = node.get("url")
    return {"name": name, "url": url if isinstance(url, str) else ""}


def _map_ability(entry: Any) -> Optional[AbilitySlot]:
    if not isinstance(entry, dict):
        return None
    ref = _named_resource(entry.get("ability"))
    slot = _as_int(entry.get("slot"))
    is_hidden = entry.get("is_hidden")
    if ref is None or slot is None or not isinstance(is_hidden, bool):
        return None
    return AbilitySlot(name=ref["name"], url=ref["url"], is_hidden=is_hidden, slot=slot)


def _map_stat(entry: Any) -> Optional[StatEntry]:
    if not isinstance(entry, dict):
        return None
    ref = _named_resource(entry.get("stat"))
    base = _as_int(entry.get("base_stat"))
    effort = _as_int(entry.get("effort"))
    if ref is None or ref["name"] not in STAT_NAMES:
        return None
    if base is None or effort is None or base < 0 or effort < 0:
        return None
    return StatEntry(name=ref["name"], base_stat=base, effort=effort)


def _map_type(entry: Any) -> Optional[TypeSlot]:
    if not isinstance(entry, dict):
        return None
    ref = _named_resource(entry.get("type"))
    slot = _as_int(entry.get("slot"))
    if ref is None or slot not in (1, 2):
        return None
    return TypeSlot(slot=slot, name=ref["name"], url=ref["url"])


def _map_version_group_detail(detail: Any) -> Optional[VersionGroupDetail]:
    if not isinstance(detail, dict):
        return None
    level = _as_int(detail.get("level_learned_at"))
    method = _named_resource(detail.get("move_learn_method"))
    version_group = _named_resource(detail.get("version_group"))
    if level is None or method is None or version_group is None:
        return None
    return VersionGroupDetail(
        level_learned_at=level,
        move_learn_method=method["name"],
        version_group=version_group["name"],
    )


def _map_move(entry: Any, warnings: List[str]) -> Optional[MoveRef]:
    if not isinstance(entry, dict):
        return None
    ref = _named_resource(entry.get("move"))
    if ref is None:
        return None
    details = entry.get("version_group_details")
    if not isinstance(details, list):
        details = []
    parsed = _map_list(
        details,
        _map_version_group_detail,
        label=f"moves[{ref['name']}].version_group_details",
        warnings=warnings,
    )
    return MoveRef(name=ref["name"], url=ref["url"], version_group_details=tuple(parsed))


def _map_list(
    items: List[Any],
    mapper: Callable[[Any], Optional[T]],
    *,
    label: str,
    warnings: List[str],
) -> List[T]:
    out: List[T] = []
    for index, item in enumerate(items):
        mapped = mapper(item)
        if mapped is None:
            message = f"Skipped malformed {label}[{index}]"
            logger.warning(message)
            warnings.append(message)
            continue
        out.append(mapped)
    return out


def _get_list(raw: Dict[str, Any], key: str) -> List[Any]:
    value = raw.get(key)
    return value if isinstance(value, list) else []


def _map_sprites(raw: Any) -> SpriteSet:
    if not isinstance(raw, dict):
        return SpriteSet()
    return SpriteSet(**{key: _as_nonempty_str(raw.get(key)) for key in SPRITE_KEYS})


def _map_species(node: Any) -> Optional[SpeciesRef]:
    ref = _named_resource(node)
    if ref is None:
        return None
    return SpeciesRef(name=ref["name"], url=ref["url"])


def _require_unique_slots(slots: List[int], *, label: str, name: str) -> None:
    seen: set[int] = set()
    for slot in slots:
        if slot in seen:
            raise MalformedRecord(
                f"Duplicate {label} slot {slot} for {name!r}", resource=name
            )
        seen.add(slot)


def map_creature(raw: Dict[str, Any], warnings: Optional[List[str]] = None) -> Creature:
    """Build one ``Creature`` from a ``/pokemon/{name}`` payload.

    Raises ``MalformedRecord`` when a required scalar is missing or mistyped,
    or when type/ability slots repeat. Each skipped list element appends one
    message to ``warnings`` when a list is supplied.
    """
    if warnings is None:
        warnings = []
    if not isinstance(raw, dict):
        raise MalformedRecord("Creature payload is not an object")

    name = _as_nonempty_str(raw.get("name"))
    if name is None:
        raise MalformedRecord("Missing or invalid required field 'name'")

    scalars: Dict[str, int] = {}
    for key in REQUIRED_INT_FIELDS:
        value = _as_int(raw.get(key))
        if value is None:
            raise MalformedRecord(
                f"Missing or invalid required field {key!r} for {name!r}",
                resource=name,
            )
        scalars[key] = value

    abilities = _map_list(
        _get_list(raw, "abilities"), _map_ability, label="abilities", warnings=warnings
    )
    stats = _map_list(_get_list(raw, "stats"), _map_stat, label="stats", warnings=warnings)
    types = _map_list(_get_list(raw, "types"), _map_type, label="types", warnings=warnings)
    moves = _map_list(
        _get_list(raw, "moves"),
        lambda entry: _map_move(entry, warnings),
        label="moves",
        warnings=warnings,
    )

    _require_unique_slots([a.slot for a in abilities], label="ability", name=name)
    # Slots are limited to 1 and 2, so unique slots also cap types at two.
    _require_unique_slots([t.slot for t in types], label="type", name=name)
    types.sort(key=lambda t: t.slot)

    return Creature(
        id=scalars["id"],
        name=name,
        base_experience=scalars["base_experience"],
        height=scalars["height"],
        weight=scalars["weight"],
        order=scalars["order"],
        abilities=tuple(abilities),
        stats=tuple(stats),
        types=tuple(types),
        moves=tuple(moves),
        sprites=_map_sprites(raw.get("sprites")),
        species=_map_species(raw.get("species")),
    )


def map_resource_names(raw: Dict[str, Any]) -> List[str]:
    """Return the ordered names of a paged listing payload."""
    results = raw.get("results") if isinstance(raw, dict) else None
    if not isinstance(results, list):
        raise MalformedRecord("Listing payload has no 'results' list")
    names: List[str] = []
    for entry in results:
        ref = _named_resource(entry)
        if ref is None:
            logger.warning("Skipped malformed listing entry: %r", entry)
            continue
        names.append(ref["name"])
    return names


def map_type_members(raw: Dict[str, Any]) -> List[str]:
    """Return creature names listed under a ``/type/{name}`` payload."""
    members = raw.get("pokemon") if isinstance(raw, dict) else None
    if not isinstance(members, list):
        raise MalformedRecord("Type payload has no 'pokemon' list")
    names: List[str] = []
    for entry in members:
        ref = _named_resource(entry.get("pokemon")) if isinstance(entry, dict) else None
        if ref is not None:
            names.append(ref["name"])
    return names


def extract_chain_url(species_raw: Dict[str, Any]) -> str:
    """Return the evolution-chain URL embedded in a species payload."""
    chain = species_raw.get("evolution_chain") if isinstance(species_raw, dict) else None
    url = _as_nonempty_str(chain.get("url")) if isinstance(chain, dict) else None
    if url is None:
        species = species_raw.get("name") if isinstance(species_raw, dict) else None
        raise MalformedRecord(
            "Species payload lacks 'evolution_chain.url'",
            resource=species if isinstance(species, str) else None,
        )
    return url


def _pick_effect(entries: Any, language: str) -> Dict[str, Optional[str]]:
    if not isinstance(entries, list):
        return {"effect": None, "short_effect": None}
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        if ((entry.get("language") or {}).get("name")) != language:
            continue
        return {
            "effect": _normalize_text(entry.get("effect")),
            "short_effect": _normalize_text(entry.get("short_effect")),
        }
    return {"effect": None, "short_effect": None}


def _normalize_text(value: Any) -> Optional[str]:
    if not isinstance(value, str) or not value.strip():
        return None
    return " ".join(value.replace("\f", " ").split())


def map_ability_detail(raw: Dict[str, Any], language: str = "en") -> AbilityDetail:
    """Build an ``AbilityDetail`` from an ``/ability/{name}`` payload.

    ``id`` and ``name`` are required; effect text is taken from the first
    entry in ``language`` and is optional.
    """
    if not isinstance(raw, dict):
        raise MalformedRecord("Ability payload is not an object")
    name = _as_nonempty_str(raw.get("name"))
    ident = _as_int(raw.get("id"))
    if name is None or ident is None:
        raise MalformedRecord(
            "Ability payload lacks a valid 'id' or 'name'",
            resource=name,
        )
    generation = _named_resource(raw.get("generation"))
    holders = []
    for entry in _get_list(raw, "pokemon"):
        ref = _named_resource(entry.get("pokemon")) if isinstance(entry, dict) else None
        if ref is not None:
            holders.append(ref["name"])
    return AbilityDetail(
        id=ident,
        name=name,
        is_main_series=raw.get("is_main_series") is True,
        generation=generation["name"] if generation else None,
        holders=tuple(holders),
        **_pick_effect(raw.get("effect_entries"), language),
    )
