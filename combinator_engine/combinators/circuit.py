"""
Circuits join several providers onto a single wire.
"""

from typing import Iterable, List, Optional

from ..models.signals import Signal, SignalAggregator
from .base import Source


class Circuit:
    """
    A wire carrying the merged signals of every connected provider.

    Circuits hold no state of their own: reading ``signals`` merges the
    providers' current output, so a circuit fed by combinators shows their
    committed values.
    """

    def __init__(self, connections: Optional[Iterable[Source]] = None):
        self.connections: List[Source] = list(connections or [])

    @property
    def signals(self) -> List[Signal]:
        return SignalAggregator.merge(self.connections)

    def __repr__(self) -> str:
        return f"Circuit(connections={len(self.connections)})"
