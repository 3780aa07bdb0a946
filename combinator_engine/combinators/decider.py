"""
Decider combinator.

Compares a left operand against a right operand and, when the condition
holds, outputs either a single signal or a set of signals taken from its
inputs.

Natural language examples:
- "Output A=1 when iron-plate > 100"
- "Pass through every input whose count is above 5"  (each > 5 → each)
- "Count how many inputs are negative"               (each < 0 → B, no copy)
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from ..models.operands import Comparator, Constant, NamedSignal, Operand, Wildcard, is_count
from ..models.signals import Signal, SignalAggregator
from .base import Combinator, CombinatorState

logger = logging.getLogger(__name__)


@dataclass
class DeciderConditions:
    """
    Configuration of a decider combinator.

    Attributes:
        first_signal: Left operand (signal or wildcard)
        comparator: Comparison applied between left and right
        second_signal: Right operand (signal or constant)
        constant: Right operand used when second_signal is not set
        output_signal: Signal(s) to emit on a match
        copy_count_from_input: Emit input counts instead of 1

    Every field may be left unset; an incomplete configuration makes the
    combinator invalid rather than raising.
    """
    first_signal: Optional[Operand] = None
    comparator: Optional[Union[Comparator, str]] = None
    second_signal: Optional[Operand] = None
    constant: Optional[int] = None
    output_signal: Optional[Operand] = None
    copy_count_from_input: Optional[bool] = None

    def validate(self) -> Optional[str]:
        """
        Check the configuration.

        Returns an error message if invalid, None if OK.
        """
        if self.first_signal is None:
            return "first_signal is not set"
        if self.comparator is None:
            return "comparator is not set"
        if self.second_signal is None and self.constant is None:
            return "neither second_signal nor constant is set"
        if self.output_signal is None:
            return "output_signal is not set"
        if self.copy_count_from_input is None:
            return "copy_count_from_input is not set"

        try:
            Comparator(self.comparator)
        except ValueError:
            return f"unknown comparator {self.comparator!r}"

        if not isinstance(self.copy_count_from_input, bool):
            return f"copy_count_from_input={self.copy_count_from_input!r} is not a bool"

        if not isinstance(self.first_signal, (NamedSignal, Wildcard)):
            return f"first_signal must be a signal or wildcard, got {self.first_signal!r}"
        if not isinstance(self.second_signal, (NamedSignal, Constant, type(None))):
            return f"second_signal must be a signal or constant, got {self.second_signal!r}"
        if isinstance(self.second_signal, Constant) and not is_count(self.second_signal.value):
            return f"second_signal constant {self.second_signal.value!r} is not an integer"
        if not is_count(self.constant):
            return f"constant={self.constant!r} is not an integer"
        if not isinstance(self.output_signal, (NamedSignal, Wildcard)):
            return f"output_signal must be a signal or wildcard, got {self.output_signal!r}"

        if self.output_signal is Wildcard.ANY:
            return "output_signal cannot be 'any'"
        if self.output_signal is Wildcard.EACH and self.first_signal is not Wildcard.EACH:
            return "output_signal can only be 'each' when first_signal is 'each'"
        if self.first_signal is Wildcard.EACH and self.output_signal is Wildcard.EVERY:
            return "output_signal cannot be 'every' when first_signal is 'each'"

        return None


class DeciderCombinator(Combinator):
    """
    Combinator that emits signals when its condition holds.

    Validity is checked at the start of each advance(). An uninitialized or
    invalid combinator computes an empty output instead of raising, so one
    misconfigured element never stops the rest of a network.
    """

    def __init__(self, conditions: Optional[DeciderConditions] = None):
        super().__init__()
        self.conditions = conditions
        self._state = CombinatorState.UNINITIALIZED
        self._validation_error: Optional[str] = None

    @property
    def state(self) -> CombinatorState:
        """Validity as of the last advance()."""
        return self._state

    @property
    def valid(self) -> bool:
        return self._state is CombinatorState.VALID

    @property
    def validation_error(self) -> Optional[str]:
        """Why the last advance() found the configuration unusable."""
        return self._validation_error

    def refresh_state(self) -> CombinatorState:
        """Recompute validity from the current conditions."""
        previous = self._state

        if self.conditions is None:
            self._state = CombinatorState.UNINITIALIZED
            self._validation_error = "no conditions configured"
        else:
            self._validation_error = self.conditions.validate()
            self._state = (
                CombinatorState.INVALID if self._validation_error
                else CombinatorState.VALID
            )

        if self._state is CombinatorState.INVALID and previous is not CombinatorState.INVALID:
            logger.warning(f"Decider combinator invalid: {self._validation_error}")
        elif self._state is CombinatorState.VALID and previous is CombinatorState.INVALID:
            logger.info("Decider combinator configuration is valid again")

        return self._state

    def advance(self) -> None:
        if self.refresh_state() is not CombinatorState.VALID:
            self._pending = []
            return

        inputs = self.read_inputs()
        counts: Dict[str, int] = {s.signal.name: s.count for s in inputs}

        conditions = self.conditions
        comparator = Comparator(conditions.comparator)
        right = self._resolve_right(counts)
        first = conditions.first_signal

        if first is Wildcard.EACH:
            matches = [s for s in inputs if comparator.compare(s.count, right)]
            output = self._each_output(matches)
        else:
            if first is Wildcard.EVERY:
                matched = all(comparator.compare(s.count, right) for s in inputs)
            elif first is Wildcard.ANY:
                matched = any(comparator.compare(s.count, right) for s in inputs)
            else:
                matched = comparator.compare(counts.get(first.signal.name, 0), right)
            output = self._match_output(inputs, counts) if matched else []

        self._pending = SignalAggregator.drop_zeros(output)
        logger.debug(
            f"Decider advanced: {len(inputs)} inputs, "
            f"{len(self._pending)} pending outputs"
        )

    def _resolve_right(self, counts: Dict[str, int]) -> int:
        second = self.conditions.second_signal
        if isinstance(second, NamedSignal):
            return counts.get(second.signal.name, 0)
        if isinstance(second, Constant):
            return second.resolve()
        return Constant(self.conditions.constant).resolve()

    def _match_output(self, inputs: List[Signal], counts: Dict[str, int]) -> List[Signal]:
        """Output for a single-valued condition that holds."""
        output = self.conditions.output_signal
        copy_count = self.conditions.copy_count_from_input

        if output is Wildcard.EVERY:
            return [Signal(s.signal, s.count if copy_count else 1) for s in inputs]

        count = counts.get(output.signal.name, 0) if copy_count else 1
        return [Signal(output.signal, count)]

    def _each_output(self, matches: List[Signal]) -> List[Signal]:
        """Output for an 'each' condition, given the matching inputs."""
        output = self.conditions.output_signal
        copy_count = self.conditions.copy_count_from_input

        if output is Wildcard.EACH:
            return [Signal(s.signal, s.count if copy_count else 1) for s in matches]

        # Named output: total of the matches, or how many matched
        count = sum(s.count for s in matches) if copy_count else len(matches)
        return [Signal(output.signal, count)]

    def __repr__(self) -> str:
        return (
            f"DeciderCombinator(state={self._state.value}, "
            f"connections={len(self.connections)})"
        )
