"""
Color functions: hex parsing, WCAG luminance/contrast and palette derivation.
"""

import re
from dataclasses import dataclass, fields
from typing import NamedTuple

HEX_PATTERN = re.compile(r"^#?([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")

DEFAULT_PRIMARY_COLOR = "#0078D4"
DEFAULT_SECONDARY_COLOR = "#106EBE"

BACKGROUND_LIGHT = "#f3f2f1"
BACKGROUND_DARK = "#201f1e"
TEXT_LIGHT = "#323130"
TEXT_DARK = "#ffffff"

MIN_CONTRAST_RATIO = 4.5


class InvalidColorFormat(ValueError):
    """Raised when a string is not a 6-digit hex color."""


class Color(NamedTuple):
    red: int
    green: int
    blue: int


@dataclass(frozen=True)
class Palette:
    primary: str
    secondary: str
    primary_dark: str
    primary_light: str
    accent: str
    background: str
    background_dark: str
    text: str
    text_dark: str

    def rgb(self, name: str) -> Color:
        return parse_hex(getattr(self, name))

    def to_dict(self) -> dict[str, str]:
        """Palette entries keyed the way the branding UI names them."""
        return {_camel_case(f.name): getattr(self, f.name) for f in fields(self)}


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def parse_hex(value: str) -> Color:
    if not isinstance(value, str):
        raise InvalidColorFormat(f"Expected a hex string, got {type(value).__name__}")
    match = HEX_PATTERN.match(value)
    if not match:
        raise InvalidColorFormat(f"Invalid hex color: {value!r}")
    return Color(*(int(group, 16) for group in match.groups()))


def to_hex(color: Color) -> str:
    return "#{:02x}{:02x}{:02x}".format(*color)


def normalize_hex(value: str) -> str:
    """Validate a hex color and return it with a leading '#', keeping its case."""
    parse_hex(value)
    return value if value.startswith("#") else f"#{value}"


def relative_luminance(color: Color) -> float:
    """WCAG relative luminance of an sRGB color."""

    def linearize(channel: int) -> float:
        normalized = channel / 255
        if normalized <= 0.03928:
            return normalized / 12.92
        return ((normalized + 0.055) / 1.055) ** 2.4

    red, green, blue = (linearize(channel) for channel in color)
    return red * 0.2126 + green * 0.7152 + blue * 0.0722


def contrast_ratio(first: Color, second: Color) -> float:
    lum_first = relative_luminance(first)
    lum_second = relative_luminance(second)
    brightest = max(lum_first, lum_second)
    darkest = min(lum_first, lum_second)
    return (brightest + 0.05) / (darkest + 0.05)


def adjust_brightness(color: Color, delta: int) -> Color:
    return Color(*(max(0, min(255, channel + delta)) for channel in color))


def derive_palette(primary_color: str, secondary_color: str) -> Palette:
    """Derive the nine-entry branding palette from two seed colors."""
    primary_hex = normalize_hex(primary_color)
    secondary_hex = normalize_hex(secondary_color)
    primary = parse_hex(primary_hex)
    secondary = parse_hex(secondary_hex)

    primary_dark = adjust_brightness(primary, -30)
    # Darker hover shade when the primary is hard to read on the light background.
    if contrast_ratio(primary, parse_hex(BACKGROUND_LIGHT)) < MIN_CONTRAST_RATIO:
        primary_dark = adjust_brightness(primary, -60)

    return Palette(
        primary=primary_hex,
        secondary=secondary_hex,
        primary_dark=to_hex(primary_dark),
        primary_light=to_hex(adjust_brightness(primary, 30)),
        accent=to_hex(adjust_brightness(secondary, 20)),
        background=BACKGROUND_LIGHT,
        background_dark=BACKGROUND_DARK,
        text=TEXT_LIGHT,
        text_dark=TEXT_DARK,
    )
