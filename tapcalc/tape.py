"""Key tape — a record of every press in a session, rendered with Rich.

Attach a Tape to a Calculator and it logs each key together with the state
that key produced. render_tape() prints the log as a table; render_keypad()
prints the button grid and the typed aliases each key accepts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from rich.console import Console
from rich.table import Table

from tapcalc.engine import Calculator, format_number
from tapcalc.keymap import ALIASES
from tapcalc.models import ERROR_DISPLAY, KEYPAD, CalcState, Key


@dataclass
class TapeEntry:
    """One key press and the state it left behind."""

    key: Key
    display: str
    operand: Optional[float]
    operator: Optional[str]
    typing: bool
    changed: bool = True

    def to_dict(self) -> dict:
        return {
            "key": self.key.value,
            "display": self.display,
            "operand": self.operand,
            "operator": self.operator,
            "typing": self.typing,
            "changed": self.changed,
        }


@dataclass
class Tape:
    """Ordered log of key presses."""

    entries: list[TapeEntry] = field(default_factory=list)

    def attach(self, calc: Calculator) -> None:
        calc.subscribe(self.record)

    def detach(self, calc: Calculator) -> None:
        calc.unsubscribe(self.record)

    def record(self, key: Key, before: CalcState, after: CalcState) -> None:
        self.entries.append(
            TapeEntry(
                key=key,
                display=after.display,
                operand=after.operand,
                operator=after.operator.value if after.operator else None,
                typing=after.typing,
                changed=after != before,
            )
        )

    def clear(self) -> None:
        self.entries.clear()

    def to_dict(self) -> dict:
        return {"entries": [e.to_dict() for e in self.entries]}


def _fmt_operand(value: Optional[float]) -> str:
    """Format a pending operand, '--' when absent."""
    if value is None:
        return "--"
    return format_number(value)


def render_tape(tape: Tape, console: Console) -> None:
    """Render a Rich table of every press on the tape."""
    if not tape.entries:
        console.print("[yellow]Tape is empty.[/yellow]")
        return

    table = Table(title="Tape", show_header=True, header_style="bold")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Key", style="cyan", justify="center")
    table.add_column("Display", justify="right", min_width=12)
    table.add_column("Operand", justify="right")
    table.add_column("Op", justify="center")
    table.add_column("Typing", justify="center")

    for i, e in enumerate(tape.entries, 1):
        display = e.display
        if display == ERROR_DISPLAY:
            display = f"[red]{display}[/red]"
        elif not e.changed:
            display = f"[dim]{display}[/dim]"
        table.add_row(
            str(i),
            e.key.value,
            display,
            _fmt_operand(e.operand),
            e.operator or "--",
            "yes" if e.typing else "",
        )

    console.print()
    console.print(table)
    console.print()


def render_keypad(console: Console) -> None:
    """Render the keypad layout and the aliases accepted for each key."""
    pad = Table(title="Keypad", show_header=False, show_lines=True)
    for _ in range(max(len(row) for row in KEYPAD)):
        pad.add_column(justify="center", min_width=5)

    styles = {"operator": "bold yellow", "function": "dim", "digit": "white"}
    for row in KEYPAD:
        cells = []
        for key in row:
            if key.operation is not None or key is Key.EQUALS:
                style = styles["operator"]
            elif key in (Key.CLEAR, Key.NEGATE, Key.PERCENT):
                style = styles["function"]
            else:
                style = styles["digit"]
            cells.append(f"[{style}]{key.value}[/{style}]")
        pad.add_row(*cells)

    aliases = Table(title="Aliases", show_header=True, header_style="bold")
    aliases.add_column("Key", style="cyan", justify="center")
    aliases.add_column("Also accepts")
    by_key: dict[Key, list[str]] = {}
    for spelling, key in ALIASES.items():
        by_key.setdefault(key, []).append(spelling)
    for key, spellings in by_key.items():
        aliases.add_row(key.value, ", ".join(spellings))

    console.print()
    console.print(pad)
    console.print(aliases)
    console.print()
