"""Data models for the tapcalc calculator.

Key and Operation enums, CalcState, and the keypad layout — the typed
structures that flow through keymap → engine → tape → CLI.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

ZERO_DISPLAY = "0"
ERROR_DISPLAY = "Error"


class Operation(str, Enum):
    """Binary arithmetic operations."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"


class Key(str, Enum):
    """Keypad buttons. Values are the labels printed on the keys."""

    ZERO = "0"
    ONE = "1"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    DECIMAL = "."
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "×"
    DIVIDE = "÷"
    EQUALS = "="
    CLEAR = "AC"
    NEGATE = "+/-"
    PERCENT = "%"

    @property
    def is_digit(self) -> bool:
        return self.value.isdigit()

    @property
    def operation(self) -> Optional[Operation]:
        """The Operation this key triggers, or None for non-operator keys."""
        return _KEY_OPERATIONS.get(self)


_KEY_OPERATIONS: dict[Key, Operation] = {
    Key.ADD: Operation.ADD,
    Key.SUBTRACT: Operation.SUBTRACT,
    Key.MULTIPLY: Operation.MULTIPLY,
    Key.DIVIDE: Operation.DIVIDE,
}

# Button grid, top row first.
KEYPAD: list[list[Key]] = [
    [Key.CLEAR, Key.NEGATE, Key.PERCENT, Key.DIVIDE],
    [Key.SEVEN, Key.EIGHT, Key.NINE, Key.MULTIPLY],
    [Key.FOUR, Key.FIVE, Key.SIX, Key.SUBTRACT],
    [Key.ONE, Key.TWO, Key.THREE, Key.ADD],
    [Key.ZERO, Key.DECIMAL, Key.EQUALS],
]


@dataclass(frozen=True)
class CalcState:
    """Everything the calculator remembers between key presses.

    ``operand`` and ``operator`` describe an operation awaiting its right-hand
    value. ``typing`` is True while the display holds digits the user is
    still entering, False when it shows a computed or reset value.
    """

    display: str = ZERO_DISPLAY
    operand: Optional[float] = None
    operator: Optional[Operation] = None
    typing: bool = False

    @property
    def is_error(self) -> bool:
        return self.display == ERROR_DISPLAY

    @property
    def has_pending(self) -> bool:
        return self.operator is not None

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "display": self.display,
            "operand": self.operand,
            "operator": self.operator.value if self.operator else None,
            "typing": self.typing,
        }

    @classmethod
    def from_dict(cls, d: dict) -> CalcState:
        op = d.get("operator")
        return cls(
            display=d.get("display", ZERO_DISPLAY),
            operand=d.get("operand"),
            operator=Operation(op) if op else None,
            typing=d.get("typing", False),
        )
