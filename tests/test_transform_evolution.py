"""Tests for evolution chain parsing and flattening."""

from dataclasses import replace

from pokecatalog.transform_evolution import flatten_evolution_chain, parse_chain_node


class TestFlattenEvolutionChain:
    """Depth-first preorder flattening."""

    def test_linear_chain_keeps_parent_before_child(self, chain_node):
        root = chain_node(
            "bulbasaur",
            chain_node("ivysaur", chain_node("venusaur", details=[{"min_level": 32}]), details=[{"min_level": 16}]),
        )

        stages = flatten_evolution_chain(root)

        assert [s.species_name for s in stages] == ["bulbasaur", "ivysaur", "venusaur"]
        assert [s.position for s in stages] == [0, 1, 2]
        assert stages[2].evolution_details == ({"min_level": 32},)

    def test_long_linear_chain_length(self, chain_node):
        node = chain_node("stage-9")
        for i in range(8, -1, -1):
            node = chain_node(f"stage-{i}", node)

        stages = flatten_evolution_chain(node)

        assert len(stages) == 10
        assert [s.species_name for s in stages] == [f"stage-{i}" for i in range(10)]

    def test_root_without_evolves_to_is_single_stage(self, chain_node):
        stages = flatten_evolution_chain(chain_node("tauros"))

        assert len(stages) == 1
        assert stages[0].species_name == "tauros"
        assert stages[0].species_url.endswith("/pokemon-species/tauros/")

    def test_branching_chain_is_preorder(self, chain_node):
        root = chain_node(
            "oddish",
            chain_node("gloom", chain_node("vileplume"), chain_node("bellossom")),
            chain_node("other"),
        )

        stages = flatten_evolution_chain(root)

        assert [s.species_name for s in stages] == [
            "oddish", "gloom", "vileplume", "bellossom", "other",
        ]

    def test_empty_input_returns_empty_list(self):
        assert flatten_evolution_chain({}) == []
        assert flatten_evolution_chain(None) == []

    def test_details_are_passed_through_verbatim(self, chain_node):
        detail = {
            "trigger": {"name": "use-item", "url": "u"},
            "item": {"name": "water-stone", "url": "u"},
            "min_level": None,
        }
        root = chain_node("eevee", chain_node("vaporeon", details=[detail]))

        stages = flatten_evolution_chain(root)

        assert stages[1].evolution_details == (detail,)

    def test_repeated_species_is_emitted_once(self, chain_node):
        root = chain_node("a", chain_node("b", chain_node("a")))

        assert [s.species_name for s in flatten_evolution_chain(root)] == ["a", "b"]


class TestParseChainNode:
    def test_node_without_species_is_dropped(self, chain_node):
        root = chain_node("eevee", {"evolves_to": []}, chain_node("jolteon"))

        node = parse_chain_node(root)

        assert [c.species_name for c in node.evolves_to] == ["jolteon"]

    def test_non_list_fields_are_tolerated(self):
        node = parse_chain_node(
            {"species": {"name": "ditto"}, "evolution_details": None, "evolves_to": None}
        )

        assert node.species_name == "ditto"
        assert node.species_url == ""
        assert node.evolution_details == ()
        assert node.evolves_to == ()

    def test_flatten_accepts_parsed_node(self, chain_node):
        node = parse_chain_node(chain_node("pichu", chain_node("pikachu")))

        assert len(flatten_evolution_chain(node)) == 2

    def test_nodes_and_stages_are_hashable(self, chain_node):
        root = chain_node("eevee", chain_node("umbreon", details=[{"time_of_day": "night"}]))
        node = parse_chain_node(root)

        stages = flatten_evolution_chain(node)

        assert len({node, node.evolves_to[0]}) == 2
        assert len(set(stages)) == 2
        assert stages[1] != replace(stages[1], evolution_details=())
