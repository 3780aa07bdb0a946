"""
Combinators module.
"""

from .base import Combinator, CombinatorState, SignalProvider, Source
from .circuit import Circuit
from .decider import DeciderCombinator, DeciderConditions

__all__ = [
    "Combinator",
    "CombinatorState",
    "SignalProvider",
    "Source",
    "Circuit",
    "DeciderCombinator",
    "DeciderConditions",
]
