"""Shared fixtures: PokéAPI-shaped payloads and an in-memory fake client."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import pytest

from pokecatalog.errors import NotFound
from pokecatalog.store import CreatureStore

API = "https://pokeapi.co/api/v2"


def _ref(kind: str, name: str, ident: int = 1) -> Dict[str, str]:
    return {"name": name, "url": f"{API}/{kind}/{ident}/"}


def build_raw_creature(ident: int, name: str, **overrides: Any) -> Dict[str, Any]:
    raw: Dict[str, Any] = {
        "id": ident,
        "name": name,
        "base_experience": 64,
        "height": 7,
        "weight": 69,
        "order": ident,
        "abilities": [
            {"ability": _ref("ability", "overgrow", 65), "is_hidden": False, "slot": 1},
            {"ability": _ref("ability", "chlorophyll", 34), "is_hidden": True, "slot": 3},
        ],
        "stats": [
            {"base_stat": 45, "effort": 0, "stat": _ref("stat", "hp", 1)},
            {"base_stat": 49, "effort": 0, "stat": _ref("stat", "attack", 2)},
            {"base_stat": 65, "effort": 1, "stat": _ref("stat", "special-attack", 4)},
        ],
        "types": [
            {"slot": 2, "type": _ref("type", "poison", 4)},
            {"slot": 1, "type": _ref("type", "grass", 12)},
        ],
        "moves": [
            {
                "move": _ref("move", "tackle", 33),
                "version_group_details": [
                    {
                        "level_learned_at": 1,
                        "move_learn_method": _ref("move-learn-method", "level-up", 1),
                        "version_group": _ref("version-group", "red-blue", 1),
                    }
                ],
            }
        ],
        "species": _ref("pokemon-species", name, ident),
        "sprites": {
            "front_default": f"https://sprites.example/{ident}.png",
            "back_default": None,
            "front_shiny": f"https://sprites.example/shiny/{ident}.png",
        },
    }
    raw.update(overrides)
    return raw


def build_chain_node(name: str, *children: Dict[str, Any], details=None) -> Dict[str, Any]:
    node: Dict[str, Any] = {
        "species": {"name": name, "url": f"{API}/pokemon-species/{name}/"},
        "evolution_details": details if details is not None else [],
    }
    if children:
        node["evolves_to"] = list(children)
    return node


class FakeClient:
    """Stand-in for ``PokeApiClient`` serving canned payloads."""

    def __init__(
        self,
        creatures: Optional[Dict[str, Dict[str, Any]]] = None,
        failures: Optional[Dict[str, Exception]] = None,
        species: Optional[Dict[str, Dict[str, Any]]] = None,
        chains: Optional[Dict[str, Dict[str, Any]]] = None,
        types: Optional[Dict[str, Dict[str, Any]]] = None,
        abilities: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> None:
        self.creatures = creatures or {}
        self.failures = failures or {}
        self.species = species or {}
        self.chains = chains or {}
        self.types = types or {}
        self.abilities = abilities or {}
        self.calls: List[tuple] = []

    def _serve(self, kind: str, table: Dict[str, Dict[str, Any]], key: str) -> Dict[str, Any]:
        self.calls.append((kind, key))
        if key in self.failures:
            raise self.failures[key]
        if key not in table:
            raise NotFound(f"{key!r} not found upstream", resource=key)
        return table[key]

    def fetch_by_name(self, name: str) -> Dict[str, Any]:
        return self._serve("pokemon", self.creatures, name)

    def fetch_species(self, name: str) -> Dict[str, Any]:
        return self._serve("species", self.species, name)

    def fetch_evolution_chain(self, url: str) -> Dict[str, Any]:
        return self._serve("chain", self.chains, url)

    def fetch_type(self, name: str) -> Dict[str, Any]:
        return self._serve("type", self.types, name)

    def fetch_ability(self, name: str) -> Dict[str, Any]:
        return self._serve("ability", self.abilities, name)

    def fetch_page(self, limit: int, offset: int) -> List[str]:
        self.calls.append(("page", limit, offset))
        return list(self.creatures)[offset:offset + limit]


@pytest.fixture
def raw_creature() -> Callable[..., Dict[str, Any]]:
    return build_raw_creature


@pytest.fixture
def chain_node() -> Callable[..., Dict[str, Any]]:
    return build_chain_node


@pytest.fixture
def store(tmp_path) -> CreatureStore:
    return CreatureStore(str(tmp_path / "cache"))
