"""
Base classes for combinators and signal sources.

Every element of a network is a Source: it exposes its current signal set
through a read-only ``signals`` property. Combinators are Sources that also
read from other Sources, and they publish in two phases:

1. advance() computes the next output into a pending buffer
2. commit() publishes the pending buffer as the visible output

Running advance() on every combinator before commit() on any of them means
no combinator ever reads another's unpublished output.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Protocol, runtime_checkable

from ..models.signals import Signal, SignalAggregator


@runtime_checkable
class Source(Protocol):
    """Anything that exposes a current signal set."""

    @property
    def signals(self) -> List[Signal]:
        ...


class CombinatorState(Enum):
    """Validity of a combinator's configuration."""
    UNINITIALIZED = "UNINITIALIZED"
    INVALID = "INVALID"
    VALID = "VALID"


@dataclass
class SignalProvider:
    """A raw source whose signals are set directly by its owner."""
    signals: List[Signal] = field(default_factory=list)


class Combinator(ABC):
    """
    Base class for combinators.

    To create a new combinator:
    1. Subclass this class
    2. Implement advance(), writing the next output to self._pending

    ``connections`` holds references to upstream Sources. The combinator does
    not own them, and a combinator may appear in its own connections.
    """

    def __init__(self):
        self.connections: List[Source] = []
        self._pending: List[Signal] = []
        self._committed: List[Signal] = []

    @property
    def signals(self) -> List[Signal]:
        """Committed output."""
        return list(self._committed)

    def read_inputs(self) -> List[Signal]:
        """Merged signal set of every connection."""
        return SignalAggregator.merge(self.connections)

    @abstractmethod
    def advance(self) -> None:
        """Compute the next output without publishing it."""
        pass

    def commit(self) -> None:
        """Publish the output computed by the last advance()."""
        self._committed = list(self._pending)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(connections={len(self.connections)})"
