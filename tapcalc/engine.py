"""Calculator state machine.

Each key press is a pure transition from one CalcState to the next:

    state, display = handle(state, Key.SEVEN)

Arithmetic is immediate-execution, strictly left to right: pressing an
operator after a typed value first resolves whatever operation was pending.
There is no precedence and no expression parsing.

Calculator wraps the transition function in a session object that owns the
current state and tells subscribed listeners about every press.
"""

from __future__ import annotations

import operator
from dataclasses import replace
from typing import Callable, Iterable, Optional

from tapcalc.models import ERROR_DISPLAY, ZERO_DISPLAY, CalcState, Key, Operation

Listener = Callable[[Key, CalcState, CalcState], None]

_OPERATORS: dict[Operation, Callable[[float, float], float]] = {
    Operation.ADD: operator.add,
    Operation.SUBTRACT: operator.sub,
    Operation.MULTIPLY: operator.mul,
    Operation.DIVIDE: operator.truediv,
}


def format_number(value: float) -> str:
    """Render a computed value for the display.

    Whole numbers drop the fractional part ("5", not "5.0"); everything else
    uses the shortest repr that round-trips. Negative zero shows as "0".
    """
    if value.is_integer():
        if value == 0:
            return ZERO_DISPLAY
        return f"{value:.0f}"
    return repr(value)


def parse_display(text: str) -> Optional[float]:
    """Parse a display string, returning None for the error marker or junk."""
    try:
        return float(text)
    except ValueError:
        return None


def _value_of(text: str) -> float:
    # Unparseable displays count as zero.
    value = parse_display(text)
    return 0.0 if value is None else value


def apply_operation(op: Operation, a: float, b: float) -> float:
    """Compute ``a <op> b``.

    Raises:
        ZeroDivisionError: when dividing by zero.
    """
    return _OPERATORS[op](a, b)


def _digit_count(text: str) -> int:
    return sum(1 for ch in text if ch.isdigit())


def _press_digit(state: CalcState, digit: str, max_digits: int) -> CalcState:
    if not state.typing:
        return replace(state, display=digit, typing=True)
    if max_digits and _digit_count(state.display) >= max_digits:
        return state
    if state.display == ZERO_DISPLAY:
        return replace(state, display=digit)
    candidate = state.display + digit
    if parse_display(candidate) is None:
        # e.g. "inf" after an overflow; start a fresh number instead
        candidate = digit
    return replace(state, display=candidate)


def _press_decimal(state: CalcState) -> CalcState:
    if not state.typing:
        return replace(state, display=ZERO_DISPLAY + ".", typing=True)
    if "." in state.display:
        return state
    candidate = state.display + "."
    if parse_display(candidate) is None:
        candidate = ZERO_DISPLAY + "."
    return replace(state, display=candidate, typing=True)


def _press_equals(state: CalcState) -> CalcState:
    if state.operator is None or state.is_error:
        return state
    current = parse_display(state.display)
    if current is None:
        return state
    left = state.operand if state.operand is not None else 0.0
    try:
        result = apply_operation(state.operator, left, current)
    except ZeroDivisionError:
        return CalcState(display=ERROR_DISPLAY)
    return CalcState(display=format_number(result), operand=result)


def _press_operator(state: CalcState, op: Operation) -> CalcState:
    if state.is_error:
        return state
    if state.typing and state.has_pending:
        state = _press_equals(state)
        if state.is_error:
            return state
    return replace(state, operand=_value_of(state.display), operator=op, typing=False)


def _transform(state: CalcState, fn: Callable[[float], float]) -> CalcState:
    value = parse_display(state.display)
    if value is None:
        return state
    return replace(state, display=format_number(fn(value)))


def handle(state: CalcState, key: Key, max_digits: int = 0) -> tuple[CalcState, str]:
    """Apply one key press to ``state``.

    Args:
        state: Current calculator state (never mutated).
        key: The key that was pressed.
        max_digits: Ignore digit presses once the number being typed holds
            this many digits. 0 means unlimited.

    Returns:
        (new_state, display) — the display is ``new_state.display``.
    """
    if key.is_digit:
        new = _press_digit(state, key.value, max_digits)
    elif key is Key.DECIMAL:
        new = _press_decimal(state)
    elif key.operation is not None:
        new = _press_operator(state, key.operation)
    elif key is Key.EQUALS:
        new = _press_equals(state)
    elif key is Key.CLEAR:
        new = CalcState()
    elif key is Key.NEGATE:
        new = _transform(state, lambda v: -v)
    elif key is Key.PERCENT:
        new = _transform(state, lambda v: v / 100)
    else:
        raise ValueError(f"Unhandled key: {key!r}")
    return new, new.display


class Calculator:
    """A calculator session: current state plus change listeners."""

    def __init__(self, max_digits: int = 0) -> None:
        self.max_digits = max_digits
        self._state = CalcState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> CalcState:
        return self._state

    @property
    def display(self) -> str:
        return self._state.display

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener(key, before, after)`` after every press."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def press(self, key: Key) -> str:
        """Handle one key press and return the new display."""
        before = self._state
        after, display = handle(before, key, self.max_digits)
        self._state = after
        for listener in list(self._listeners):
            listener(key, before, after)
        return display

    def press_all(self, keys: Iterable[Key]) -> str:
        """Press each key in order and return the final display."""
        for key in keys:
            self.press(key)
        return self.display

    def reset(self) -> str:
        return self.press(Key.CLEAR)
