"""Tests for arithmetic parsing, evaluation and formatting."""

import pytest

from quicklaunch.errors import DivisionByZero, DomainError, ParseFailure
from quicklaunch.interpreters.dispatcher import GrammarDispatcher
from quicklaunch.interpreters.expression import (
    BinaryOp,
    CalculatorInterpreter,
    Number,
    UnaryOp,
    calculate,
    parse,
)
from quicklaunch.interpreters.formatting import format_number
from quicklaunch.models.search import ActionType, ResultType


def test_precedence_of_multiplication_over_addition():
    assert calculate("2+3*4") == 14


def test_parentheses_override_precedence():
    assert calculate("(1 + 2) * 3") == 9


def test_power_is_right_associative():
    """2^3^2 is 2^(3^2)."""
    assert calculate("2^3^2") == 512


def test_negative_exponent():
    assert calculate("2^-3") == 0.125


def test_leading_minus_binds_to_power_base():
    """-2^2 evaluates to 4 because the sign belongs to the base."""
    assert calculate("-2^2") == 4


def test_modulo_keeps_dividend_sign():
    assert calculate("10 % 3") == 1
    assert calculate("-7 % 3") == -1


def test_whitespace_is_ignored():
    assert calculate("  1 +\t2 ") == 3


def test_parse_builds_ast():
    assert parse("1+2") == BinaryOp("+", Number(1.0), Number(2.0))
    assert parse("-3") == UnaryOp("-", Number(3.0))


@pytest.mark.parametrize("text", ["1/0", "5 % 0", "0^-1"])
def test_division_by_zero(text):
    with pytest.raises(DivisionByZero):
        calculate(text)


@pytest.mark.parametrize("text", ["(-8)^(1/3)", "10^400"])
def test_domain_errors(text):
    with pytest.raises(DomainError):
        calculate(text)


@pytest.mark.parametrize("text", ["", "(1+2", "1+", "1.2.3", "2*)", "()", "."])
def test_malformed_input_raises_parse_failure(text):
    with pytest.raises(ParseFailure):
        calculate(text)


def test_format_number_strips_trailing_zeros():
    assert format_number(1024.0) == "1024"
    assert format_number(0.125) == "0.125"
    assert format_number(2.5) == "2.5"
    assert format_number(1 / 3) == "0.333"
    assert format_number(0.1 + 0.2) == "0.3"


def test_format_number_keeps_tiny_values_visible():
    assert format_number(0.0001) == "0.0001"


def test_calculator_accepts_only_arithmetic_characters():
    calc = CalculatorInterpreter()
    assert calc.accepts("2 + 2")
    assert calc.accepts("(3)^2 % 4")
    assert not calc.accepts("2 + x")
    assert not calc.accepts("()")
    assert not calc.accepts("hello")


@pytest.mark.asyncio
async def test_calculator_result():
    results = await CalculatorInterpreter().interpret("2^10")

    assert len(results) == 1
    result = results[0]
    assert result.title == "1024"
    assert result.subtitle == "2^10"
    assert result.result_type == ResultType.CALCULATOR
    assert result.payload.action == ActionType.COPY_TEXT
    assert result.payload.target == "1024"
    assert result.group_label == ""


def test_overflowing_literal_is_a_domain_error():
    with pytest.raises(DomainError):
        calculate("9" * 400)


@pytest.mark.asyncio
async def test_overflowing_literal_yields_no_result():
    classification = await GrammarDispatcher([CalculatorInterpreter()]).classify("9" * 400 + "+1")

    assert classification.interpreter == "calculator"
    assert classification.results == ()
