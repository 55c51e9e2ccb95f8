"""Color notation conversion between hex, RGB and HSL."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..errors import ParseFailure
from ..models.search import ActionType, Payload, ResultType, SearchResult
from .base import UNLABELED, Interpreter

HEX_RE = re.compile(r"^#([0-9a-f]{6}|[0-9a-f]{3})$", re.IGNORECASE)
RGB_FUNC_RE = re.compile(r"^rgb\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)$", re.IGNORECASE)
RGB_BARE_RE = re.compile(r"^(\d+)\s*,\s*(\d+)\s*,\s*(\d+)$")
HSL_RE = re.compile(
    r"^hsl\s*\(\s*(\d+(?:\.\d+)?)\s*,\s*(\d+(?:\.\d+)?)%?\s*,\s*(\d+(?:\.\d+)?)%?\s*\)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ColorValue:
    red: int
    green: int
    blue: int

    @property
    def hex(self) -> str:
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"

    @property
    def rgb(self) -> str:
        return f"rgb({self.red}, {self.green}, {self.blue})"

    @property
    def hsl(self) -> str:
        h, s, l = rgb_to_hsl(self.red, self.green, self.blue)
        return f"hsl({round(h) % 360}, {round(s)}%, {round(l)}%)"


def rgb_to_hsl(red: int, green: int, blue: int) -> tuple[float, float, float]:
    """Return (hue degrees, saturation %, lightness %) as floats."""
    r, g, b = red / 255.0, green / 255.0, blue / 255.0
    high = max(r, g, b)
    low = min(r, g, b)
    lightness = (high + low) / 2.0

    if high == low:
        return 0.0, 0.0, lightness * 100.0

    delta = high - low
    if lightness > 0.5:
        saturation = delta / (2.0 - high - low)
    else:
        saturation = delta / (high + low)

    if high == r:
        hue = (g - b) / delta + (6.0 if g < b else 0.0)
    elif high == g:
        hue = (b - r) / delta + 2.0
    else:
        hue = (r - g) / delta + 4.0

    return hue * 60.0, saturation * 100.0, lightness * 100.0


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(hue: float, saturation: float, lightness: float) -> tuple[int, int, int]:
    h = (hue % 360) / 360.0
    s = saturation / 100.0
    l = lightness / 100.0

    if s == 0:
        channel = round(l * 255)
        return channel, channel, channel

    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q
    return (
        round(_hue_to_channel(p, q, h + 1 / 3) * 255),
        round(_hue_to_channel(p, q, h) * 255),
        round(_hue_to_channel(p, q, h - 1 / 3) * 255),
    )


def _channels(values: tuple[str, ...]) -> tuple[int, int, int]:
    red, green, blue = (int(v) for v in values)
    for channel in (red, green, blue):
        if not 0 <= channel <= 255:
            raise ParseFailure(f"RGB channel out of range: {channel}")
    return red, green, blue


def parse_color(text: str) -> ColorValue:
    """Parse any supported notation into a canonical RGB color.

    Raises:
        ParseFailure: If the notation is unknown or a component is out of range
    """
    text = text.strip()

    match = HEX_RE.match(text)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return ColorValue(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    match = RGB_FUNC_RE.match(text) or RGB_BARE_RE.match(text)
    if match:
        return ColorValue(*_channels(match.groups()))

    match = HSL_RE.match(text)
    if match:
        hue, saturation, lightness = (float(v) for v in match.groups())
        if hue > 360 or saturation > 100 or lightness > 100:
            raise ParseFailure(f"HSL component out of range: {text!r}")
        return ColorValue(*hsl_to_rgb(hue, saturation, lightness))

    raise ParseFailure(f"not a color: {text!r}")


class ColorInterpreter(Interpreter):
    name = "color"

    def accepts(self, text: str) -> bool:
        text = text.strip()
        return any(p.match(text) for p in (HEX_RE, RGB_FUNC_RE, RGB_BARE_RE, HSL_RE))

    async def interpret(self, text: str) -> list[SearchResult]:
        color = parse_color(text)
        return [
            SearchResult(
                title=color.hex,
                subtitle=f"{color.rgb} · {color.hsl}",
                group_label=UNLABELED,
                result_type=ResultType.COLOR_CONVERSION,
                payload=Payload(action=ActionType.COPY_TEXT, target=color.hex),
                score=1.0,
            )
        ]
