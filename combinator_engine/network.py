"""
Network of signal sources and combinators.

The network is an arena: every node is stored under a stable integer handle,
and wiring is expressed between handles. Nodes keep plain references to
their upstream Sources, so wiring may be cyclic.

Each discrete step runs in two passes:
1. advance every combinator (all read the previously committed outputs)
2. commit every combinator
"""

import logging
from typing import Dict, Iterable, List, Optional

from .combinators.base import Combinator, Source
from .combinators.circuit import Circuit
from .models.signals import Signal

logger = logging.getLogger(__name__)


class Network:
    """
    Registry of nodes and driver of the two-pass step loop.

    Usage::

        network = Network()
        feed = network.add(SignalProvider([...]), name="feed")
        gate = network.add(DeciderCombinator(conditions), name="gate")
        network.connect(gate, feed)
        network.run(5)
    """

    def __init__(self):
        self._nodes: Dict[int, Source] = {}
        self._names: Dict[int, str] = {}
        self._next_handle = 0
        self.step_count = 0

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, handle: int) -> bool:
        return handle in self._nodes

    @property
    def handles(self) -> List[int]:
        """All handles, in insertion order."""
        return list(self._nodes.keys())

    @property
    def combinators(self) -> Dict[int, Combinator]:
        """Nodes that take part in advance/commit, by handle."""
        return {
            handle: node for handle, node in self._nodes.items()
            if isinstance(node, Combinator)
        }

    def add(self, node: Source, name: Optional[str] = None) -> int:
        """
        Register a node and return its handle.

        Raises:
            TypeError: if the node does not expose ``signals``
            ValueError: if the name is already taken
        """
        if not isinstance(node, Source):
            raise TypeError(f"{node!r} does not expose a signals property")

        handle = self._next_handle
        name = name or f"node-{handle}"
        if name in self._names.values():
            raise ValueError(f"Node name {name!r} is already in use")

        self._nodes[handle] = node
        self._names[handle] = name
        self._next_handle += 1
        logger.debug(f"Added node {name} ({node!r}) as handle {handle}")
        return handle

    def get(self, handle: int) -> Source:
        try:
            return self._nodes[handle]
        except KeyError:
            raise KeyError(f"Unknown node handle: {handle}") from None

    def name_of(self, handle: int) -> str:
        self.get(handle)
        return self._names[handle]

    def handle_of(self, name: str) -> int:
        for handle, node_name in self._names.items():
            if node_name == name:
                return handle
        raise KeyError(f"Unknown node name: {name}")

    def remove(self, handle: int) -> Source:
        """Remove a node and unwire it from every consumer."""
        node = self.get(handle)
        del self._nodes[handle]
        name = self._names.pop(handle)

        for other in self._nodes.values():
            if isinstance(other, (Combinator, Circuit)):
                other.connections = [c for c in other.connections if c is not node]

        logger.debug(f"Removed node {name} (handle {handle})")
        return node

    def connect(self, handle: int, upstream: int) -> None:
        """
        Wire the output of ``upstream`` into the inputs of ``handle``.

        Raises:
            KeyError: if either handle is unknown
            ValueError: if the consumer takes no inputs, or the wire would
                close a loop made only of circuits
        """
        consumer = self.get(handle)
        source = self.get(upstream)

        if not isinstance(consumer, (Combinator, Circuit)):
            raise ValueError(f"Node {self._names[handle]} does not accept inputs")

        # Circuits re-read their providers on every access, so a loop of
        # circuits with no combinator in it would never terminate.
        if isinstance(consumer, Circuit) and self._reaches_through_circuits(source, consumer):
            raise ValueError(
                f"Connecting {self._names[upstream]} to {self._names[handle]} "
                f"would create a loop of circuits"
            )

        consumer.connections.append(source)
        logger.debug(f"Connected {self._names[upstream]} -> {self._names[handle]}")

    def disconnect(self, handle: int, upstream: int) -> None:
        """Remove every wire from ``upstream`` into ``handle``."""
        consumer = self.get(handle)
        source = self.get(upstream)

        if isinstance(consumer, (Combinator, Circuit)):
            consumer.connections = [c for c in consumer.connections if c is not source]

    def advance(self, order: Optional[Iterable[int]] = None) -> None:
        """Run the advance phase of every combinator (or those in ``order``)."""
        for handle in self._ordered(order):
            node = self.get(handle)
            if isinstance(node, Combinator):
                node.advance()

    def commit(self, order: Optional[Iterable[int]] = None) -> None:
        """Run the commit phase of every combinator (or those in ``order``)."""
        for handle in self._ordered(order):
            node = self.get(handle)
            if isinstance(node, Combinator):
                node.commit()

    def step(self) -> Dict[str, List[Signal]]:
        """Run one full advance pass and one full commit pass."""
        self.advance()
        self.commit()
        self.step_count += 1
        logger.debug(f"Completed step {self.step_count}")
        return self.snapshot()

    def run(self, steps: int) -> List[Dict[str, List[Signal]]]:
        """Run several steps, returning the snapshot after each."""
        if steps < 0:
            raise ValueError(f"steps={steps} must be non-negative")
        return [self.step() for _ in range(steps)]

    def snapshot(self) -> Dict[str, List[Signal]]:
        """Current output of every node, by name."""
        return {
            self._names[handle]: node.signals
            for handle, node in self._nodes.items()
        }

    def _ordered(self, order: Optional[Iterable[int]]) -> List[int]:
        return list(order) if order is not None else self.handles

    @staticmethod
    def _reaches_through_circuits(start: Source, target: Circuit) -> bool:
        stack = [start]
        seen = set()
        while stack:
            node = stack.pop()
            if node is target:
                return True
            if not isinstance(node, Circuit) or id(node) in seen:
                continue
            seen.add(id(node))
            stack.extend(node.connections)
        return False
