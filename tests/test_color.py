"""Tests for color notation conversion."""

import pytest

from quicklaunch.errors import ParseFailure
from quicklaunch.interpreters.color import (
    ColorInterpreter,
    ColorValue,
    hsl_to_rgb,
    parse_color,
    rgb_to_hsl,
)
from quicklaunch.models.search import ResultType


def test_hex_to_rgb_and_hsl():
    color = parse_color("#E67E22")

    assert (color.red, color.green, color.blue) == (230, 126, 34)
    assert color.rgb == "rgb(230, 126, 34)"
    assert color.hsl == "hsl(28, 80%, 52%)"


def test_short_hex_expands():
    color = parse_color("#fff")
    assert color.hex == "#FFFFFF"
    assert color.hsl == "hsl(0, 0%, 100%)"


@pytest.mark.parametrize("text", ["rgb(230, 126, 34)", "RGB(230,126,34)", "230, 126, 34"])
def test_rgb_forms(text):
    assert parse_color(text).hex == "#E67E22"


def test_hsl_to_rgb_within_one_per_channel():
    color = parse_color("hsl(28, 80%, 52%)")
    for got, want in zip((color.red, color.green, color.blue), (230, 126, 34)):
        assert abs(got - want) <= 1


@pytest.mark.parametrize(
    "rgb",
    [(0, 0, 0), (255, 255, 255), (230, 126, 34), (12, 200, 99), (1, 2, 3), (128, 0, 255)],
)
def test_rgb_hsl_round_trip(rgb):
    back = hsl_to_rgb(*rgb_to_hsl(*rgb))
    for got, want in zip(back, rgb):
        assert abs(got - want) <= 1


@pytest.mark.parametrize("text", ["rgb(300, 0, 0)", "256,0,0", "hsl(400, 50%, 50%)", "hsl(10, 150%, 50%)"])
def test_out_of_range_components(text):
    with pytest.raises(ParseFailure):
        parse_color(text)


def test_accepts_shapes_even_when_out_of_range():
    interpreter = ColorInterpreter()
    assert interpreter.accepts("rgb(300, 0, 0)")
    assert interpreter.accepts("#abc")
    assert not interpreter.accepts("#abcd")
    assert not interpreter.accepts("red")


@pytest.mark.asyncio
async def test_color_result():
    results = await ColorInterpreter().interpret("#e67e22")

    assert len(results) == 1
    assert results[0].title == "#E67E22"
    assert results[0].subtitle == "rgb(230, 126, 34) · hsl(28, 80%, 52%)"
    assert results[0].result_type == ResultType.COLOR_CONVERSION
    assert results[0].payload.target == "#E67E22"


def test_color_value_hex_is_uppercase():
    assert ColorValue(10, 171, 255).hex == "#0AABFF"
