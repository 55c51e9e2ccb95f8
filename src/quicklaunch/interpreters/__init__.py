"""Interpreters for typed grammars (text tools, colors, conversions, arithmetic)."""

from .base import Interpreter
from .color import ColorInterpreter, ColorValue, parse_color
from .currency import CurrencyConverter, format_currency
from .dispatcher import Classification, GrammarDispatcher
from .expression import CalculatorInterpreter, calculate, evaluate, parse
from .text_tools import TextToolInterpreter
from .units import ConversionInterpreter, convert_units

__all__ = [
    "Interpreter",
    "GrammarDispatcher",
    "Classification",
    "TextToolInterpreter",
    "ColorInterpreter",
    "ColorValue",
    "parse_color",
    "ConversionInterpreter",
    "convert_units",
    "CurrencyConverter",
    "format_currency",
    "CalculatorInterpreter",
    "parse",
    "evaluate",
    "calculate",
]
