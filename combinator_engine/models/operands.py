"""
Operands and comparators used by decider conditions.

An operand is one of:
- NamedSignal: a concrete signal channel
- Constant: a literal integer (unset reads as 0)
- Wildcard: ANY / EACH / EVERY, evaluated against the whole input set
"""

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Union

from .signals import SignalID


@dataclass(frozen=True)
class NamedSignal:
    """Operand referring to a single signal channel."""
    signal: SignalID


@dataclass(frozen=True)
class Constant:
    """Operand holding a literal value."""
    value: Optional[int] = None

    def resolve(self) -> int:
        return self.value if self.value is not None else 0


class Wildcard(Enum):
    """Operands that evaluate against every input signal."""
    ANY = "any"
    EACH = "each"
    EVERY = "every"


Operand = Union[NamedSignal, Constant, Wildcard]


def is_count(value) -> bool:
    """True for a usable constant: None or a plain int (bools excluded)."""
    return value is None or (isinstance(value, int) and not isinstance(value, bool))


class Comparator(str, Enum):
    """Comparison operators."""
    LT = "<"
    LTE = "≤"
    GT = ">"
    GTE = "≥"
    EQ = "="
    NEQ = "≠"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            return _COMPARATOR_ALIASES.get(value.strip().lower())
        return None

    def compare(self, left: int, right: int) -> bool:
        """Apply the comparison to two values."""
        return _COMPARATOR_FUNCS[self](left, right)


_COMPARATOR_ALIASES: Dict[str, Comparator] = {
    "<=": Comparator.LTE,
    ">=": Comparator.GTE,
    "==": Comparator.EQ,
    "!=": Comparator.NEQ,
    "lt": Comparator.LT,
    "lte": Comparator.LTE,
    "gt": Comparator.GT,
    "gte": Comparator.GTE,
    "eq": Comparator.EQ,
    "neq": Comparator.NEQ,
}

_COMPARATOR_FUNCS: Dict[Comparator, Callable[[int, int], bool]] = {
    Comparator.LT: operator.lt,
    Comparator.LTE: operator.le,
    Comparator.GT: operator.gt,
    Comparator.GTE: operator.ge,
    Comparator.EQ: operator.eq,
    Comparator.NEQ: operator.ne,
}
