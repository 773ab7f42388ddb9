"""Tests for the calculator state machine.

Drives Calculator through key sequences and checks the display and the
pending operation, plus the pure helpers (format_number, parse_display).
"""

import pytest

from tapcalc.engine import Calculator, apply_operation, format_number, handle, parse_display
from tapcalc.keymap import parse_keys
from tapcalc.models import ERROR_DISPLAY, CalcState, Key, Operation


@pytest.fixture
def calc():
    return Calculator()


def run(calc, text):
    """Press the keys spelled by ``text`` and return the display."""
    return calc.press_all(parse_keys(text))


# --- Digit entry ---

def test_initial_display_is_zero(calc):
    assert calc.display == "0"
    assert calc.state == CalcState()


def test_digits_append(calc):
    assert run(calc, "123") == "123"


def test_leading_zeros_collapse(calc):
    assert run(calc, "0007") == "7"


def test_zero_stays_single(calc):
    assert run(calc, "000") == "0"


def test_first_digit_replaces_computed_result(calc):
    run(calc, "2+3=")
    assert run(calc, "9") == "9"


def test_max_digits_caps_entry():
    calc = Calculator(max_digits=3)
    assert run(calc, "12345") == "123"
    # Cap applies per number, not per session
    assert run(calc, "+4567") == "456"


# --- Decimal point ---

def test_decimal_from_zero(calc):
    assert run(calc, ".5") == "0.5"


def test_second_decimal_ignored(calc):
    assert run(calc, "1.2.3") == "1.23"


def test_decimal_after_error_starts_fresh(calc):
    run(calc, "1/0=")
    assert run(calc, ".") == "0."
    assert run(calc, "5") == "0.5"


def test_decimal_after_result_starts_new_number(calc):
    run(calc, "2+3=")
    assert run(calc, ".4") == "0.4"


def test_decimal_after_operator_starts_new_number(calc):
    run(calc, "1.5+")
    assert run(calc, ".5=") == "2"


# --- Basic arithmetic ---

@pytest.mark.parametrize(
    "keys, expected",
    [
        ("2+3=", "5"),
        ("10-4=", "6"),
        ("3×7=", "21"),
        ("15÷4=", "3.75"),
        ("1-5=", "-4"),
        (".1+.2=", "0.30000000000000004"),
    ],
)
def test_binary_operations(calc, keys, expected):
    assert run(calc, keys) == expected


def test_equals_clears_operator_keeps_result(calc):
    run(calc, "6×7=")
    assert calc.state.operator is None
    assert calc.state.operand == 42
    assert calc.state.typing is False


def test_operator_does_not_change_display(calc):
    run(calc, "12")
    assert run(calc, "+") == "12"
    assert calc.state.operator is Operation.ADD
    assert calc.state.operand == 12


def test_equals_without_second_operand_reuses_display(calc):
    assert run(calc, "4×=") == "16"


# --- Chaining ---

def test_chained_operators_evaluate_left_to_right(calc):
    assert run(calc, "2+3+4=") == "9"


def test_chain_shows_intermediate_result(calc):
    run(calc, "2+3")
    assert run(calc, "×") == "5"
    assert run(calc, "4=") == "20"


def test_no_precedence(calc):
    assert run(calc, "2+3×4=") == "20"


def test_consecutive_operators_replace_pending(calc):
    run(calc, "8+-")
    assert calc.state.operator is Operation.SUBTRACT
    assert calc.state.operand == 8
    assert run(calc, "3=") == "5"


def test_operator_after_equals_continues_from_result(calc):
    run(calc, "2+3=")
    assert run(calc, "×10=") == "50"


# --- Equals edge cases ---

def test_equals_without_operator_is_noop(calc):
    run(calc, "42")
    before = calc.state
    assert run(calc, "=") == "42"
    assert calc.state == before


def test_repeated_equals_is_noop(calc):
    run(calc, "2+3=")
    assert run(calc, "==") == "5"


# --- Division by zero ---

def test_divide_by_zero_shows_error(calc):
    assert run(calc, "10÷0=") == ERROR_DISPLAY
    assert calc.state.operator is None
    assert calc.state.operand is None
    assert calc.state.typing is False


def test_divide_by_zero_in_chain(calc):
    assert run(calc, "5÷0+") == ERROR_DISPLAY
    assert calc.state.operator is None


def test_operator_and_equals_ignored_in_error(calc):
    run(calc, "1÷0=")
    error_state = calc.state
    run(calc, "+=×")
    assert calc.state == error_state


def test_sign_and_percent_ignored_in_error(calc):
    run(calc, "1÷0=")
    assert run(calc, "+/-%") == ERROR_DISPLAY


def test_digit_recovers_from_error(calc):
    run(calc, "1÷0=")
    assert run(calc, "7+1=") == "8"


# --- Clear ---

@pytest.mark.parametrize("keys", ["", "123", "5+", "5+3", "5+3=", "1÷0=", "2.5+/-", "9%×"])
def test_clear_resets_everything(calc, keys):
    run(calc, keys)
    run(calc, "AC")
    assert calc.state == CalcState()


def test_reset(calc):
    run(calc, "9×9")
    assert calc.reset() == "0"
    assert calc.state.operator is None


# --- Sign toggle and percent ---

def test_sign_toggle(calc):
    assert run(calc, "7+/-") == "-7"
    assert run(calc, "+/-") == "7"


@pytest.mark.parametrize("keys", ["7", "2.5", "0.125", "123456789"])
def test_sign_toggle_is_involution(calc, keys):
    original = run(calc, keys)
    run(calc, "+/-+/-")
    assert calc.display == original


def test_sign_toggle_of_zero(calc):
    assert run(calc, "+/-") == "0"


def test_sign_toggle_keeps_pending(calc):
    run(calc, "10+3+/-")
    assert calc.state.operator is Operation.ADD
    assert run(calc, "=") == "7"


def test_percent(calc):
    assert run(calc, "5%") == "0.05"


def test_percent_of_fifty(calc):
    assert run(calc, "50%") == "0.5"


def test_percent_repeated_divides_again(calc):
    assert run(calc, "50%%") == "0.005"


def test_percent_in_operation(calc):
    assert run(calc, "200×10%=") == "20"


# --- Pure transition ---

def test_handle_does_not_mutate_state():
    state = CalcState()
    new, display = handle(state, Key.FIVE)
    assert state == CalcState()
    assert new.display == display == "5"
    assert new.typing is True


def test_handle_all_keys_keep_display_parseable():
    state = CalcState()
    for key in Key:
        state, display = handle(state, key)
        assert display == ERROR_DISPLAY or parse_display(display) is not None


def test_listeners_see_every_press(calc):
    seen = []
    calc.subscribe(lambda key, before, after: seen.append((key, before.display, after.display)))
    run(calc, "1+=")
    assert seen == [
        (Key.ONE, "0", "1"),
        (Key.ADD, "1", "1"),
        (Key.EQUALS, "1", "2"),
    ]


def test_unsubscribe(calc):
    seen = []
    listener = lambda key, before, after: seen.append(key)  # noqa: E731
    calc.subscribe(listener)
    calc.press(Key.ONE)
    calc.unsubscribe(listener)
    calc.press(Key.TWO)
    assert seen == [Key.ONE]


# --- Helpers ---

@pytest.mark.parametrize(
    "value, expected",
    [
        (5.0, "5"),
        (-7.0, "-7"),
        (0.5, "0.5"),
        (-0.0, "0"),
        (1e20, "100000000000000000000"),
        (0.1 + 0.2, "0.30000000000000004"),
        (1e-05, "1e-05"),
        (float("inf"), "inf"),
    ],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_parse_display():
    assert parse_display("12.5") == 12.5
    assert parse_display("5.") == 5.0
    assert parse_display(ERROR_DISPLAY) is None


def test_apply_operation_divide_by_zero():
    with pytest.raises(ZeroDivisionError):
        apply_operation(Operation.DIVIDE, 1.0, 0.0)


def test_overflow_then_digit_starts_fresh(calc):
    # 1e200 squared overflows to inf
    calc.press_all(parse_keys("1" + "0" * 200 + "×="))
    assert calc.display == "inf"
    run(calc, "+/-")
    assert calc.display == "-inf"
    assert run(calc, "5") == "5"


def test_state_dict_restores_pending_operation(calc):
    run(calc, "12×3")
    d = calc.state.to_dict()
    assert d == {"display": "3", "operand": 12.0, "operator": "multiply", "typing": True}
    restored = CalcState.from_dict(d)
    assert restored == calc.state
    state, display = handle(restored, Key.EQUALS)
    assert display == "36"
