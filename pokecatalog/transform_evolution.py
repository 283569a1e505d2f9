"""Evolution transforms: typed chain nodes and preorder flattening."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from .models import EvolutionStage


@dataclass(frozen=True)
class ChainNode:
    species_name: str
    species_url: str
    evolution_details: Tuple[Dict[str, Any], ...] = field(default=(), hash=False)
    evolves_to: Tuple["ChainNode", ...] = ()


def parse_chain_node(raw: Any) -> Optional[ChainNode]:
    """Decode a PokéAPI ``chain`` node (and its subtree) into a ``ChainNode``.

    Returns None when the node carries no species name; such a node and its
    subtree are dropped.
    """
    if not isinstance(raw, dict):
        return None
    species = raw.get("species")
    if not isinstance(species, dict):
        return None
    name = species.get("name")
    if not isinstance(name, str) or not name:
        return None
    url = species.get("url")

    details = raw.get("evolution_details")
    if not isinstance(details, list):
        details = []

    evolves_to = raw.get("evolves_to")
    if not isinstance(evolves_to, list):
        evolves_to = []

    children = tuple(node for node in (parse_chain_node(c) for c in evolves_to) if node)
    return ChainNode(
        species_name=name,
        species_url=url if isinstance(url, str) else "",
        evolution_details=tuple(d for d in details if isinstance(d, dict)),
        evolves_to=children,
    )


def _walk(node: ChainNode, stages: List[EvolutionStage], visited: Set[str]) -> None:
    if node.species_name in visited:
        return
    visited.add(node.species_name)
    stages.append(
        EvolutionStage(
            species_name=node.species_name,
            species_url=node.species_url,
            evolution_details=node.evolution_details,
            position=len(stages),
        )
    )
    for child in node.evolves_to:
        _walk(child, stages, visited)


def flatten_evolution_chain(chain_root: Any) -> List[EvolutionStage]:
    """Flatten an evolution chain into depth-first preorder stages.

    Each stage is followed immediately by its children's stages, in the order
    the source tree lists them. An empty root yields an empty list.
    """
    root = chain_root if isinstance(chain_root, ChainNode) else parse_chain_node(chain_root)
    if root is None:
        return []
    stages: List[EvolutionStage] = []
    _walk(root, stages, set())
    return stages
