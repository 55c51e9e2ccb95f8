"""Unit conversion tables and the "<amount> <unit> to <unit>" grammar."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..errors import DomainError, ParseFailure
from ..models.search import ActionType, Payload, ResultType, SearchResult
from .base import UNLABELED, Interpreter
from .formatting import format_number, is_finite

logger = logging.getLogger(__name__)

CONVERSION_RE = re.compile(
    r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))\s*([^\s\d.+-]\S*)\s+(?:to|in)\s+(\S+)\s*$",
    re.IGNORECASE,
)

LENGTH = "length"
WEIGHT = "weight"
AREA = "area"
VOLUME = "volume"
SPEED = "speed"
TEMPERATURE = "temperature"


@dataclass(frozen=True)
class Unit:
    category: str
    factor: float  # multiplier to the category's base unit


def _table(category: str, entries: dict[tuple[str, ...], float]) -> dict[str, Unit]:
    table: dict[str, Unit] = {}
    for aliases, factor in entries.items():
        for alias in aliases:
            table[alias] = Unit(category, factor)
    return table


UNITS: dict[str, Unit] = {}
# Base: meter
UNITS.update(_table(LENGTH, {
    ("m", "meter", "meters", "metre", "metres"): 1.0,
    ("km", "kilometer", "kilometers", "kilometre", "kilometres"): 1000.0,
    ("cm", "centimeter", "centimeters"): 0.01,
    ("mm", "millimeter", "millimeters"): 0.001,
    ("mi", "mile", "miles"): 1609.344,
    ("yd", "yard", "yards"): 0.9144,
    ("ft", "foot", "feet"): 0.3048,
    ("in", "inch", "inches"): 0.0254,
    ("nm", "nmi"): 1852.0,
}))
# Base: kilogram
UNITS.update(_table(WEIGHT, {
    ("kg", "kilogram", "kilograms", "kilo", "kilos"): 1.0,
    ("g", "gram", "grams"): 0.001,
    ("mg", "milligram", "milligrams"): 0.000001,
    ("t", "ton", "tons", "tonne", "tonnes"): 1000.0,
    ("lb", "lbs", "pound", "pounds"): 0.45359237,
    ("oz", "ounce", "ounces"): 0.028349523125,
    ("st", "stone"): 6.35029318,
    ("jin",): 0.5,
    ("liang",): 0.05,
}))
# Base: square meter
UNITS.update(_table(AREA, {
    ("m2", "m²", "sqm"): 1.0,
    ("km2", "km²", "sqkm"): 1_000_000.0,
    ("cm2", "cm²"): 0.0001,
    ("ha", "hectare", "hectares"): 10_000.0,
    ("acre", "acres", "ac"): 4046.8564224,
    ("ft2", "ft²", "sqft"): 0.09290304,
    ("in2", "in²", "sqin"): 0.00064516,
    ("mi2", "mi²", "sqmi"): 2_589_988.110336,
}))
# Base: liter
UNITS.update(_table(VOLUME, {
    ("l", "liter", "liters", "litre", "litres"): 1.0,
    ("ml", "milliliter", "milliliters", "millilitre", "millilitres"): 0.001,
    ("m3", "m³"): 1000.0,
    ("gal", "gallon", "gallons"): 3.785411784,
    ("qt", "quart", "quarts"): 0.946352946,
    ("pt", "pint", "pints"): 0.473176473,
    ("cup", "cups"): 0.2365882365,
    ("floz",): 0.0295735295625,
    ("tbsp",): 0.01478676478125,
    ("tsp",): 0.00492892159375,
}))
# Base: meters per second
UNITS.update(_table(SPEED, {
    ("m/s", "mps"): 1.0,
    ("km/h", "kmh", "kph"): 1000.0 / 3600.0,
    ("mph",): 0.44704,
    ("kn", "knot", "knots"): 1852.0 / 3600.0,
    ("ft/s", "fps"): 0.3048,
}))

TEMPERATURE_UNITS: dict[str, str] = {
    "c": "C", "°c": "C", "celsius": "C",
    "f": "F", "°f": "F", "fahrenheit": "F",
    "k": "K", "kelvin": "K",
}


@dataclass(frozen=True)
class ConversionPhrase:
    amount: float
    amount_text: str
    source: str
    target: str


def parse_phrase(text: str) -> ConversionPhrase:
    """Split "<amount> <unit> to <unit>" into its parts.

    Raises:
        ParseFailure: If the text does not have the conversion shape
    """
    match = CONVERSION_RE.match(text)
    if not match:
        raise ParseFailure(f"not a conversion phrase: {text!r}")
    amount_text, source, target = match.groups()
    amount = float(amount_text)
    if not is_finite(amount):
        raise DomainError(f"amount too large: {amount_text[:20]}...")
    return ConversionPhrase(amount, amount_text, source, target)


def lookup_unit(token: str) -> Optional[Unit]:
    token = token.lower()
    if token in TEMPERATURE_UNITS:
        return Unit(TEMPERATURE, 1.0)
    return UNITS.get(token)


def _to_celsius(value: float, scale: str) -> float:
    if scale == "F":
        return (value - 32.0) * 5.0 / 9.0
    if scale == "K":
        return value - 273.15
    return value


def _from_celsius(value: float, scale: str) -> float:
    if scale == "F":
        return value * 9.0 / 5.0 + 32.0
    if scale == "K":
        return value + 273.15
    return value


def convert_temperature(value: float, source: str, target: str) -> float:
    src = TEMPERATURE_UNITS[source.lower()]
    dst = TEMPERATURE_UNITS[target.lower()]
    celsius = _to_celsius(value, src)
    if celsius < -273.15 - 1e-9:
        raise DomainError("temperature below absolute zero")
    return _from_celsius(celsius, dst)


def convert_units(value: float, source: str, target: str) -> float:
    """Convert between two units of the same category.

    Raises:
        ParseFailure: If either unit is unknown or the categories differ
        DomainError: For temperatures below absolute zero
    """
    src = lookup_unit(source)
    dst = lookup_unit(target)
    if src is None or dst is None:
        raise ParseFailure(f"unknown unit in {source!r} -> {target!r}")
    if src.category != dst.category:
        raise ParseFailure(f"cannot convert {src.category} to {dst.category}")
    if src.category == TEMPERATURE:
        return convert_temperature(value, source, target)
    return value * src.factor / dst.factor


def is_same_category(source: str, target: str) -> bool:
    src = lookup_unit(source)
    dst = lookup_unit(target)
    return src is not None and dst is not None and src.category == dst.category


def unit_conversion_result(phrase: ConversionPhrase) -> SearchResult:
    value = convert_units(phrase.amount, phrase.source, phrase.target)
    if not is_finite(value):
        raise DomainError("conversion result is not finite")
    formatted = format_number(value)
    if lookup_unit(phrase.source).category == TEMPERATURE:
        subtitle = f"{phrase.amount_text} {phrase.source} = {formatted} {phrase.target}"
    else:
        forward = format_number(convert_units(1.0, phrase.source, phrase.target))
        backward = format_number(convert_units(1.0, phrase.target, phrase.source))
        subtitle = (
            f"1 {phrase.source} ≈ {forward} {phrase.target} | "
            f"1 {phrase.target} ≈ {backward} {phrase.source}"
        )
    return SearchResult(
        title=f"{formatted} {phrase.target}",
        subtitle=subtitle,
        group_label=UNLABELED,
        result_type=ResultType.UNIT_CONVERSION,
        payload=Payload(action=ActionType.COPY_TEXT, target=formatted),
        score=1.0,
    )


class ConversionInterpreter(Interpreter):
    """Handles unit phrases and, when given a currency converter, currency phrases."""

    name = "conversion"

    def __init__(self, currency=None):
        self.currency = currency

    def accepts(self, text: str) -> bool:
        return bool(CONVERSION_RE.match(text))

    async def interpret(self, text: str) -> list[SearchResult]:
        phrase = parse_phrase(text)
        if is_same_category(phrase.source, phrase.target):
            return [unit_conversion_result(phrase)]
        if self.currency is not None and self.currency.handles(phrase.source, phrase.target):
            return [await self.currency.convert(phrase)]
        logger.debug(f"No conversion for {phrase.source!r} -> {phrase.target!r}")
        return []
