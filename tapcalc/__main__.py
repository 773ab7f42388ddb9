"""CLI for the tapcalc keypad calculator.

Usage:
    python -m tapcalc press 12 + 3 =            # Prints 15
    python -m tapcalc press "10/0=" --trace     # Error, plus the key tape
    python -m tapcalc keys                      # Show keypad and aliases
    python -m tapcalc repl                      # Interactive session
"""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from tapcalc.config import load_settings
from tapcalc.engine import Calculator
from tapcalc.keymap import UnknownKeyError, parse_keys
from tapcalc.models import CalcState, Key
from tapcalc.tape import Tape, render_keypad, render_tape

app = typer.Typer(
    name="tapcalc",
    help="Four-function keypad calculator",
    no_args_is_help=True,
)
console = Console(stderr=True)

_QUIT_WORDS = ("q", "quit", "exit")


def _log_press(key: Key, before: CalcState, after: CalcState) -> None:
    """Print one state transition (verbose mode)."""
    if after == before:
        console.print(f"  [dim]{key.value:>3}  no change ({after.display})[/dim]")
        return
    pending = after.operator.value if after.operator else "-"
    console.print(f"  [dim]{key.value:>3}  {before.display} -> {after.display}  pending={pending}[/dim]")


def _make_session(max_digits: Optional[int], verbose: bool) -> tuple[Calculator, Tape]:
    """Build a Calculator with an attached Tape, honouring env settings."""
    settings = load_settings()
    calc = Calculator(max_digits=settings.max_digits if max_digits is None else max_digits)
    tape = Tape()
    tape.attach(calc)
    if verbose:
        calc.subscribe(_log_press)
    return calc, tape


@app.command("press")
def cmd_press(
    keys: list[str] = typer.Argument(help="Keys to press, e.g. '12 + 3 =' or '12+3='"),
    trace: bool = typer.Option(False, "--trace", "-t", help="Print the key tape after the result"),
    max_digits: Optional[int] = typer.Option(None, "--max-digits", min=0, help="Digits allowed per number (0 = unlimited)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every state change"),
) -> None:
    """Press a sequence of keys and print the final display."""
    try:
        parsed = parse_keys(" ".join(keys))
    except UnknownKeyError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    calc, tape = _make_session(max_digits, verbose)
    display = calc.press_all(parsed)

    if trace or load_settings().trace:
        render_tape(tape, console)
    typer.echo(display)


@app.command("keys")
def cmd_keys() -> None:
    """Show the keypad layout and accepted aliases."""
    render_keypad(console)


@app.command("repl")
def cmd_repl(
    trace: bool = typer.Option(False, "--trace", "-t", help="Print the key tape on exit"),
    max_digits: Optional[int] = typer.Option(None, "--max-digits", min=0, help="Digits allowed per number (0 = unlimited)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every state change"),
) -> None:
    """Interactive session: type keys line by line, 'q' to quit."""
    calc, tape = _make_session(max_digits, verbose)
    console.print("[bold]tapcalc[/bold]: enter keys (e.g. 12+3=), 'q' to quit")

    while True:
        try:
            line = typer.prompt(calc.display, prompt_suffix=" > ")
        except typer.Abort:
            break
        if line.strip().lower() in _QUIT_WORDS:
            break
        try:
            parsed = parse_keys(line)
        except UnknownKeyError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            continue
        typer.echo(calc.press_all(parsed))

    if trace or load_settings().trace:
        render_tape(tape, console)


if __name__ == "__main__":
    app()
