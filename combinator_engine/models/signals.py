"""
Signal models and signal aggregation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List

if TYPE_CHECKING:
    from ..combinators.base import Source


class SignalType(Enum):
    """Signal categories."""
    ITEM = "item"
    FLUID = "fluid"
    VIRTUAL = "virtual"


@dataclass(frozen=True)
class SignalID:
    """Identity of a signal channel."""
    type: SignalType
    name: str

    def to_dict(self) -> dict:
        return {"type": self.type.value, "name": self.name}


@dataclass(frozen=True)
class Signal:
    """A single count carried on a signal channel."""
    signal: SignalID
    count: int

    def to_dict(self) -> dict:
        return {
            "type": self.signal.type.value,
            "name": self.signal.name,
            "count": self.count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Signal":
        """
        Build a signal from its mapping form.

        Raises:
            ValueError: if the name is missing or the type/count is not valid
        """
        name = data.get("name")
        if not name:
            raise ValueError("Signal must have a name")

        count = data.get("count", 0)
        if isinstance(count, bool) or not isinstance(count, int):
            raise ValueError(f"Signal {name} has non-integer count {count!r}")

        return cls(
            signal=SignalID(SignalType(data.get("type", "virtual")), name),
            count=count,
        )


class SignalAggregator:
    """
    Merges signal sets from several providers into one.

    Entries are keyed by signal name: contributions sharing a name are summed
    and the resulting entry keeps the identity (type included) of the first
    contribution seen. Entries that sum to 0 are dropped. Output order is the
    order in which names first appear.
    """

    @staticmethod
    def combine(signals: Iterable[Signal]) -> List[Signal]:
        """Merge a flat sequence of signals."""
        identities: Dict[str, SignalID] = {}
        totals: Dict[str, int] = {}

        for entry in signals:
            name = entry.signal.name
            if name not in identities:
                identities[name] = entry.signal
                totals[name] = 0
            totals[name] += entry.count

        return [
            Signal(signal=identities[name], count=total)
            for name, total in totals.items()
            if total != 0
        ]

    @staticmethod
    def merge(sources: Iterable["Source"]) -> List[Signal]:
        """Merge the current signal sets of several sources."""
        merged: List[Signal] = []
        for source in sources:
            merged.extend(source.signals)
        return SignalAggregator.combine(merged)

    @staticmethod
    def drop_zeros(signals: Iterable[Signal]) -> List[Signal]:
        """Remove entries with a count of 0."""
        return [s for s in signals if s.count != 0]
