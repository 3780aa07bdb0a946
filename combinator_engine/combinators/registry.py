"""
Node registry for building networks from configuration.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from ..models.operands import Comparator, Constant, NamedSignal, Operand, Wildcard, is_count
from ..models.signals import Signal, SignalID, SignalType
from ..network import Network
from .base import Combinator, SignalProvider, Source
from .circuit import Circuit
from .decider import DeciderCombinator, DeciderConditions

logger = logging.getLogger(__name__)


class NetworkRegistry:
    """
    Registry for creating network nodes from configuration.

    Provides methods to:
    - Parse signals, operands and decider conditions
    - Create a single node from its config section
    - Load a whole network, wiring included
    """

    @staticmethod
    def get_available_node_types() -> List[str]:
        """Get list of all node type names."""
        return list(NODE_BUILDERS.keys())

    @staticmethod
    def parse_signal_id(data: Any) -> Optional[SignalID]:
        """Parse ``{type, name}`` into a SignalID; None if malformed."""
        if not isinstance(data, dict) or not data.get("name"):
            logger.warning(f"Signal definition without a name: {data!r}")
            return None
        try:
            signal_type = SignalType(data.get("type", SignalType.VIRTUAL.value))
        except ValueError:
            logger.warning(f"Unknown signal type {data.get('type')!r} for {data['name']}")
            return None
        return SignalID(signal_type, str(data["name"]))

    @staticmethod
    def parse_operand(data: Any) -> Optional[Operand]:
        """
        Parse an operand.

        Accepted forms:
            "any" / "each" / "every"     -> Wildcard
            {"constant": 5}              -> Constant
            {"type": ..., "name": ...}   -> NamedSignal

        Returns None (operand left unset) if the form is not recognised.
        """
        if data is None:
            return None

        if isinstance(data, str):
            try:
                return Wildcard(data.strip().lower())
            except ValueError:
                logger.warning(f"Unknown wildcard operand: {data!r}")
                return None

        if isinstance(data, dict) and "constant" in data:
            value = data["constant"]
            if not is_count(value):
                logger.warning(f"Constant operand {value!r} is not an integer")
                return None
            return Constant(value)

        signal_id = NetworkRegistry.parse_signal_id(data)
        return NamedSignal(signal_id) if signal_id else None

    @staticmethod
    def parse_conditions(config: Optional[dict]) -> Optional[DeciderConditions]:
        """Build decider conditions; None if the section is absent."""
        if config is None:
            return None

        comparator = config.get("comparator")
        if comparator is not None:
            try:
                comparator = Comparator(comparator)
            except ValueError:
                logger.warning(f"Unknown comparator: {comparator!r}")
                comparator = None

        constant = config.get("constant")
        if not is_count(constant):
            logger.warning(f"Constant {constant!r} is not an integer")
            constant = None

        return DeciderConditions(
            first_signal=NetworkRegistry.parse_operand(config.get("first_signal")),
            comparator=comparator,
            second_signal=NetworkRegistry.parse_operand(config.get("second_signal")),
            constant=constant,
            output_signal=NetworkRegistry.parse_operand(config.get("output_signal")),
            copy_count_from_input=config.get("copy_count_from_input"),
        )

    @staticmethod
    def create_node(node_name: str, config: dict) -> Optional[Source]:
        """
        Create a node instance from configuration.

        Args:
            node_name: Name of the node (used in log messages)
            config: Node section with a ``type`` key

        Returns:
            Node instance or None if the type is unknown
        """
        node_type = config.get("type")
        builder = NODE_BUILDERS.get(node_type)
        if builder is None:
            logger.warning(f"Unknown node type {node_type!r} for node {node_name}")
            return None
        return builder(node_name, config)

    @staticmethod
    def load_network_from_config(config: dict) -> Network:
        """
        Build a network from configuration.

        Nodes are all created before any wiring is done, so connections may
        refer to nodes defined later and may form loops.

        Args:
            config: Full configuration dict with a 'nodes' section

        Returns:
            The wired network
        """
        network = Network()
        nodes_config = config.get("nodes") or {}
        if not isinstance(nodes_config, dict):
            logger.warning(f"Expected a mapping of nodes, got {type(nodes_config).__name__}")
            nodes_config = {}

        for node_name, node_config in nodes_config.items():
            if not isinstance(node_config, dict):
                logger.warning(f"Skipping node {node_name}: definition is not a mapping")
                continue
            if not node_config.get("enabled", True):
                logger.info(f"Skipping disabled node: {node_name}")
                continue

            node = NetworkRegistry.create_node(node_name, node_config)
            if node is not None:
                network.add(node, name=node_name)
                logger.info(f"Loaded node: {node_name} ({node_config['type']})")

        for node_name, node_config in nodes_config.items():
            if not isinstance(node_config, dict):
                continue

            connections = node_config.get("connections") or []
            if isinstance(connections, str):
                connections = [connections]
            if not connections:
                continue

            try:
                handle = network.handle_of(node_name)
            except KeyError:
                continue

            for upstream_name in connections:
                try:
                    network.connect(handle, network.handle_of(upstream_name))
                except KeyError:
                    logger.warning(f"Node {node_name}: unknown connection {upstream_name!r}")
                except ValueError as e:
                    logger.warning(f"Node {node_name}: {e}")

        logger.info(f"Loaded {len(network)} nodes")
        return network

    @staticmethod
    def describe_network(network: Network) -> str:
        """Get a human-readable description of a network."""
        lines = ["Network:", "=" * 40]

        for handle in network.handles:
            node = network.get(handle)
            lines.append(f"\n{network.name_of(handle)}:")
            lines.append(f"  Kind: {node.__class__.__name__}")
            if isinstance(node, DeciderCombinator):
                lines.append(f"  State: {node.state.value}")
                if node.validation_error:
                    lines.append(f"  Problem: {node.validation_error}")
            if isinstance(node, (Combinator, Circuit)):
                lines.append(f"  Inputs: {len(node.connections)}")
            lines.append(f"  Output: {_format_signals(node.signals)}")

        return "\n".join(lines)


def _format_signals(signals: List[Signal]) -> str:
    if not signals:
        return "(none)"
    return ", ".join(f"{s.signal.name}={s.count}" for s in signals)


def _build_source(node_name: str, config: dict) -> SignalProvider:
    signals = []
    for entry in config.get("signals") or []:
        try:
            signals.append(Signal.from_dict(entry))
        except (ValueError, AttributeError) as e:
            logger.warning(f"Node {node_name}: skipping signal {entry!r}: {e}")
    return SignalProvider(signals=signals)


def _build_circuit(node_name: str, config: dict) -> Circuit:
    return Circuit()


def _build_decider(node_name: str, config: dict) -> DeciderCombinator:
    return DeciderCombinator(NetworkRegistry.parse_conditions(config.get("conditions")))


# Registry mapping config node types to builders
NODE_BUILDERS: Dict[str, Callable[[str, dict], Source]] = {
    "source": _build_source,
    "circuit": _build_circuit,
    "decider": _build_decider,
}
