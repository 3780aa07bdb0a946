"""
Data models for the combinator engine.
"""

from .operands import Comparator, Constant, NamedSignal, Operand, Wildcard
from .signals import Signal, SignalAggregator, SignalID, SignalType

__all__ = [
    "Signal",
    "SignalAggregator",
    "SignalID",
    "SignalType",
    "Comparator",
    "Constant",
    "NamedSignal",
    "Operand",
    "Wildcard",
]
