"""tapcalc — four-function keypad calculator.

Immediate-execution arithmetic driven one key press at a time, the way a
phone calculator behaves: 2 + 3 + 4 = shows 9, each operator resolving the
previous one. The core is a pure state machine (tapcalc.engine.handle); the
CLI in tapcalc.__main__ stands in for the keypad.

Usage:
    python -m tapcalc press 2 + 3 =     # 5
    python -m tapcalc repl              # Interactive session
"""
