"""Translate typed text into calculator keys.

Keypad labels use "×" and "÷", which are awkward to type, so each key also
accepts a few ASCII aliases. A compact run such as ``"12+3="`` is scanned
left to right, always taking the longest alias that matches.
"""

from __future__ import annotations

from tapcalc.models import Key


class UnknownKeyError(ValueError):
    """Raised when input text does not name a calculator key."""

    def __init__(self, text: str, position: int = 0) -> None:
        self.text = text
        self.position = position
        super().__init__(f"Unknown key at position {position}: {text[position:]!r}")


# Aliases are matched case-insensitively.
ALIASES: dict[str, Key] = {
    "*": Key.MULTIPLY,
    "x": Key.MULTIPLY,
    "/": Key.DIVIDE,
    ":": Key.DIVIDE,
    "c": Key.CLEAR,
    "ac": Key.CLEAR,
    "clear": Key.CLEAR,
    "±": Key.NEGATE,
    "neg": Key.NEGATE,
    "enter": Key.EQUALS,
    "pct": Key.PERCENT,
}


def _build_table() -> dict[str, Key]:
    table = {k.value.lower(): k for k in Key}
    table.update(ALIASES)
    return table


_TABLE = _build_table()
# Longest first so "+/-" wins over "+" and "clear" over "c".
_SPELLINGS = sorted(_TABLE, key=len, reverse=True)


def parse_key(token: str) -> Key:
    """Resolve a single token (label or alias) to a Key."""
    key = _TABLE.get(token.strip().lower())
    if key is None:
        raise UnknownKeyError(token)
    return key


def parse_keys(text: str) -> list[Key]:
    """Scan ``text`` into a sequence of keys, ignoring whitespace.

    Raises:
        UnknownKeyError: at the first position no key spelling matches.
    """
    keys: list[Key] = []
    pos = 0
    while pos < len(text):
        if text[pos].isspace():
            pos += 1
            continue
        for spelling in _SPELLINGS:
            if text[pos:pos + len(spelling)].lower() == spelling:
                keys.append(_TABLE[spelling])
                pos += len(spelling)
                break
        else:
            raise UnknownKeyError(text, pos)
    return keys
