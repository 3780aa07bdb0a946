"""Tests for NetworkRegistry — operand parsing, node creation, network loading."""

import pytest

from combinator_engine.combinators.base import CombinatorState, SignalProvider
from combinator_engine.combinators.circuit import Circuit
from combinator_engine.combinators.decider import DeciderCombinator
from combinator_engine.combinators.registry import NODE_BUILDERS, NetworkRegistry
from combinator_engine.models.operands import Comparator, Constant, NamedSignal, Wildcard
from combinator_engine.models.signals import Signal, SignalID, SignalType

IRON = SignalID(SignalType.ITEM, "iron-plate")
FLAG = SignalID(SignalType.VIRTUAL, "signal-F")


def filter_config(**overrides):
    conditions = {
        "first_signal": {"type": "item", "name": "iron-plate"},
        "comparator": ">",
        "constant": 10,
        "output_signal": {"type": "virtual", "name": "signal-F"},
        "copy_count_from_input": False,
    }
    conditions.update(overrides)
    return {
        "nodes": {
            "feed": {
                "type": "source",
                "signals": [{"type": "item", "name": "iron-plate", "count": 40}],
            },
            "filter": {
                "type": "decider",
                "connections": ["feed"],
                "conditions": conditions,
            },
        }
    }


# ---------------------------------------------------------------------------
# Node types
# ---------------------------------------------------------------------------

class TestNodeBuilders:
    def test_available_types(self):
        assert NetworkRegistry.get_available_node_types() == ["source", "circuit", "decider"]
        assert set(NODE_BUILDERS) == {"source", "circuit", "decider"}

    def test_create_source(self):
        node = NetworkRegistry.create_node("feed", {
            "type": "source",
            "signals": [{"type": "item", "name": "iron-plate", "count": 40}],
        })
        assert isinstance(node, SignalProvider)
        assert node.signals == [Signal(IRON, 40)]

    def test_source_skips_bad_signals(self):
        node = NetworkRegistry.create_node("feed", {
            "type": "source",
            "signals": [
                {"name": "ok", "count": 1},
                {"count": 2},
                {"type": "plasma", "name": "x", "count": 3},
                "garbage",
            ],
        })
        assert node.signals == [Signal(SignalID(SignalType.VIRTUAL, "ok"), 1)]

    def test_create_circuit(self):
        assert isinstance(NetworkRegistry.create_node("bus", {"type": "circuit"}), Circuit)

    def test_create_decider_without_conditions(self):
        node = NetworkRegistry.create_node("dc", {"type": "decider"})
        assert isinstance(node, DeciderCombinator)
        assert node.conditions is None

    def test_unknown_type_returns_none(self):
        assert NetworkRegistry.create_node("x", {"type": "arithmetic"}) is None


# ---------------------------------------------------------------------------
# Operand parsing
# ---------------------------------------------------------------------------

class TestParseOperand:
    @pytest.mark.parametrize("text,expected", [
        ("any", Wildcard.ANY),
        ("each", Wildcard.EACH),
        ("EVERY", Wildcard.EVERY),
    ])
    def test_wildcards(self, text, expected):
        assert NetworkRegistry.parse_operand(text) is expected

    def test_named_signal(self):
        operand = NetworkRegistry.parse_operand({"type": "item", "name": "iron-plate"})
        assert operand == NamedSignal(IRON)

    def test_named_signal_defaults_to_virtual(self):
        operand = NetworkRegistry.parse_operand({"name": "signal-F"})
        assert operand == NamedSignal(FLAG)

    def test_constant(self):
        assert NetworkRegistry.parse_operand({"constant": 5}) == Constant(5)
        assert NetworkRegistry.parse_operand({"constant": None}) == Constant()

    def test_non_integer_constant_is_unset(self):
        assert NetworkRegistry.parse_operand({"constant": "5"}) is None

    def test_unknown_string_is_unset(self):
        assert NetworkRegistry.parse_operand("signal-each") is None

    def test_missing_name_is_unset(self):
        assert NetworkRegistry.parse_operand({"type": "item"}) is None

    def test_unknown_type_is_unset(self):
        assert NetworkRegistry.parse_operand({"type": "plasma", "name": "x"}) is None

    def test_none(self):
        assert NetworkRegistry.parse_operand(None) is None


class TestParseConditions:
    def test_full_conditions(self):
        conditions = NetworkRegistry.parse_conditions(
            filter_config()["nodes"]["filter"]["conditions"]
        )
        assert conditions.first_signal == NamedSignal(IRON)
        assert conditions.comparator is Comparator.GT
        assert conditions.second_signal is None
        assert conditions.constant == 10
        assert conditions.output_signal == NamedSignal(FLAG)
        assert conditions.copy_count_from_input is False
        assert conditions.validate() is None

    def test_unknown_comparator_left_unset(self):
        conditions = NetworkRegistry.parse_conditions({"comparator": "~"})
        assert conditions.comparator is None

    @pytest.mark.parametrize("value", ["2", 2.5, True])
    def test_non_integer_constant_left_unset(self, value):
        conditions = NetworkRegistry.parse_conditions({"constant": value})
        assert conditions.constant is None

    def test_absent_section(self):
        assert NetworkRegistry.parse_conditions(None) is None


# ---------------------------------------------------------------------------
# load_network_from_config
# ---------------------------------------------------------------------------

class TestLoadNetworkFromConfig:
    def test_loads_and_runs(self):
        network = NetworkRegistry.load_network_from_config(filter_config())
        assert len(network) == 2
        assert network.step()["filter"] == [Signal(FLAG, 1)]

    def test_invalid_conditions_load_but_output_nothing(self):
        network = NetworkRegistry.load_network_from_config(
            filter_config(output_signal="any")
        )
        snapshot = network.step()
        assert snapshot["filter"] == []
        dc = network.get(network.handle_of("filter"))
        assert dc.state == CombinatorState.INVALID

    def test_string_constant_loads_but_outputs_nothing(self):
        network = NetworkRegistry.load_network_from_config(filter_config(constant="2"))
        assert network.step()["filter"] == []
        dc = network.get(network.handle_of("filter"))
        assert dc.state == CombinatorState.INVALID

    def test_skips_disabled_nodes(self):
        config = filter_config()
        config["nodes"]["feed"]["enabled"] = False
        network = NetworkRegistry.load_network_from_config(config)
        assert len(network) == 1
        assert network.get(network.handle_of("filter")).connections == []

    def test_skips_unknown_node_types(self):
        config = filter_config()
        config["nodes"]["mystery"] = {"type": "arithmetic"}
        network = NetworkRegistry.load_network_from_config(config)
        assert len(network) == 2

    @pytest.mark.parametrize("definition", [None, "decider", ["feed"]])
    def test_skips_node_definitions_that_are_not_mappings(self, definition):
        config = filter_config()
        config["nodes"]["broken"] = definition
        network = NetworkRegistry.load_network_from_config(config)
        assert len(network) == 2
        with pytest.raises(KeyError):
            network.handle_of("broken")
        assert network.step()["filter"] == [Signal(FLAG, 1)]

    @pytest.mark.parametrize("nodes", [["feed", "filter"], "feed"])
    def test_nodes_section_not_a_mapping_gives_empty_network(self, nodes):
        assert len(NetworkRegistry.load_network_from_config({"nodes": nodes})) == 0

    def test_single_connection_as_string(self):
        config = filter_config()
        config["nodes"]["filter"]["connections"] = "feed"
        network = NetworkRegistry.load_network_from_config(config)
        assert len(network.get(network.handle_of("filter")).connections) == 1
        assert network.step()["filter"] == [Signal(FLAG, 1)]

    def test_unknown_connection_skipped(self):
        config = filter_config()
        config["nodes"]["filter"]["connections"] = ["feed", "ghost"]
        network = NetworkRegistry.load_network_from_config(config)
        assert len(network.get(network.handle_of("filter")).connections) == 1

    def test_forward_references_and_loops(self):
        config = {
            "nodes": {
                "counter": {
                    "type": "decider",
                    "connections": ["pulse", "counter"],
                    "conditions": {
                        "first_signal": {"name": "signal-A"},
                        "comparator": ">",
                        "constant": 0,
                        "output_signal": {"name": "signal-A"},
                        "copy_count_from_input": True,
                    },
                },
                "pulse": {"type": "source", "signals": [{"name": "signal-A", "count": 1}]},
            }
        }
        network = NetworkRegistry.load_network_from_config(config)
        counts = [s["counter"][0].count for s in network.run(3)]
        assert counts == [1, 2, 3]

    def test_circuit_loop_skipped(self):
        config = {
            "nodes": {
                "w1": {"type": "circuit", "connections": ["w2"]},
                "w2": {"type": "circuit", "connections": ["w1"]},
            }
        }
        network = NetworkRegistry.load_network_from_config(config)
        assert len(network.get(network.handle_of("w1")).connections) == 1
        assert network.get(network.handle_of("w2")).connections == []

    def test_empty_config(self):
        assert len(NetworkRegistry.load_network_from_config({})) == 0


class TestDescribeNetwork:
    def test_describes_nodes(self):
        network = NetworkRegistry.load_network_from_config(filter_config(comparator=None))
        network.step()
        desc = NetworkRegistry.describe_network(network)
        assert "feed:" in desc
        assert "State: INVALID" in desc
        assert "comparator is not set" in desc
        assert "iron-plate=40" in desc
