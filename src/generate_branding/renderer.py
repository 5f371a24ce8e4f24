"""
Image rendering: gradient banners and backgrounds with procedural patterns.
"""

import logging
from io import BytesIO
from typing import Literal, NamedTuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

try:
    from .colors import BACKGROUND_LIGHT, Palette, contrast_ratio, parse_hex
except ImportError:
    from colors import BACKGROUND_LIGHT, Palette, contrast_ratio, parse_hex

logger = logging.getLogger()

Theme = Literal["light", "dark"]
AssetKind = Literal["banner", "background"]

DOT_SPACING = 50
DOT_RADIUS = 20
DOT_OPACITY = 0.1

LINE_SPACING = 100
LINE_SLANT = 50
LINE_OPACITY = 0.05

LOGO_MARGIN = 40
LOGO_OPACITY = 0.9

MAX_DIMENSION = 8192

# (position, palette entry, alpha byte)
BANNER_STOPS = {
    "light": [(0.0, "primary", 0xFF), (0.5, "secondary", 0xFF), (1.0, "primary_light", 0xFF)],
    "dark": [(0.0, "primary_dark", 0xFF), (0.5, "primary", 0xFF), (1.0, "secondary", 0xFF)],
}

BACKGROUND_STOPS = {
    "light": [(0.0, "background", 0xFF), (0.7, "primary_light", 0x20), (1.0, "primary", 0x10)],
    "dark": [(0.0, "background_dark", 0xFF), (0.7, "primary", 0x30), (1.0, "primary_dark", 0x20)],
}


class RenderFailure(RuntimeError):
    """Raised when a drawing surface cannot be allocated or encoded."""


class RenderSpec(NamedTuple):
    name: str
    kind: AssetKind
    width: int
    height: int
    theme: Theme


REQUIRED_RENDERS = (
    RenderSpec("BannerImageLight.png", "banner", 1920, 280, "light"),
    RenderSpec("BannerImageDark.png", "banner", 1920, 280, "dark"),
    RenderSpec("BackgroundImageDesktopLight.png", "background", 1920, 1080, "light"),
    RenderSpec("BackgroundImageDesktopDark.png", "background", 1920, 1080, "dark"),
    RenderSpec("BackgroundImageMobileLight.png", "background", 768, 1024, "light"),
    RenderSpec("BackgroundImageMobileDark.png", "background", 768, 1024, "dark"),
)


def render(
    kind: str,
    width: int,
    height: int,
    theme: str,
    palette: Palette,
    logo: Image.Image | None = None,
) -> bytes:
    """Render one branding image and return it as PNG bytes."""
    if theme not in ("light", "dark"):
        raise RenderFailure(f"Unknown theme: {theme}")

    if kind == "banner":
        surface = _render_banner(width, height, theme, palette, logo)
    elif kind == "background":
        surface = _render_background(width, height, theme, palette)
    else:
        raise RenderFailure(f"Unknown asset kind: {kind}")

    logger.info("Rendered %s %sx%s (%s)", kind, width, height, theme)
    return _encode_png(surface)


def _new_surface(width: int, height: int) -> Image.Image:
    """Allocate a fully transparent surface sized exactly to the request."""
    if not isinstance(width, int) or not isinstance(height, int):
        raise RenderFailure(f"Surface size must be integers, got {width!r}x{height!r}")
    if not (0 < width <= MAX_DIMENSION and 0 < height <= MAX_DIMENSION):
        raise RenderFailure(f"Invalid surface size {width}x{height}")
    try:
        return Image.new("RGBA", (width, height), (0, 0, 0, 0))
    except (MemoryError, ValueError) as exc:
        raise RenderFailure(f"Could not allocate {width}x{height} surface: {exc}") from exc


def _render_banner(
    width: int, height: int, theme: str, palette: Palette, logo: Image.Image | None
) -> Image.Image:
    surface = _new_surface(width, height)

    positions = (np.arange(width, dtype=np.float64) + 0.5) / width
    offsets = np.broadcast_to(positions, (height, width))
    surface.alpha_composite(_gradient(offsets, _resolve_stops(BANNER_STOPS[theme], palette)))

    dot_color = (255, 255, 255) if theme == "light" else (0, 0, 0)
    overlay = Image.new("RGBA", surface.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    fill = (*dot_color, _alpha_byte(DOT_OPACITY))
    for x in range(0, width, DOT_SPACING):
        for y in range(0, height, DOT_SPACING):
            draw.ellipse(
                (x - DOT_RADIUS, y - DOT_RADIUS, x + DOT_RADIUS, y + DOT_RADIUS),
                fill=fill,
            )
    surface.alpha_composite(overlay)

    if logo is not None:
        _place_logo(surface, logo)

    return surface


def _render_background(width: int, height: int, theme: str, palette: Palette) -> Image.Image:
    surface = _new_surface(width, height)

    xs = np.arange(width, dtype=np.float64) + 0.5 - width / 2
    ys = np.arange(height, dtype=np.float64) + 0.5 - height / 2
    distances = np.hypot(xs[np.newaxis, :], ys[:, np.newaxis]) / max(width, height)
    surface.alpha_composite(_gradient(distances, _resolve_stops(BACKGROUND_STOPS[theme], palette)))

    line_color = palette.rgb("primary" if theme == "light" else "primary_light")
    overlay = Image.new("RGBA", surface.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    fill = (*line_color, _alpha_byte(LINE_OPACITY))
    for x in range(0, width, LINE_SPACING):
        draw.line([(x, 0), (x + LINE_SLANT, height)], fill=fill, width=1)
    for y in range(0, height, LINE_SPACING):
        draw.line([(0, y), (width, y + LINE_SLANT)], fill=fill, width=1)
    surface.alpha_composite(overlay)

    return surface


def _place_logo(surface: Image.Image, logo: Image.Image) -> None:
    """Right-align the logo, vertically centred, at reduced opacity."""
    width, height = surface.size
    size = int(min(width * 0.2, height * 0.6))
    if size <= 0:
        return

    mark = logo.convert("RGBA").resize((size, size), Image.Resampling.LANCZOS)
    alpha = mark.getchannel("A").point(lambda value: round(value * LOGO_OPACITY))
    mark.putalpha(alpha)

    left = max(0, width - size - LOGO_MARGIN)
    top = (height - size) // 2
    surface.alpha_composite(mark, dest=(left, top))


def _resolve_stops(stops, palette: Palette) -> list[tuple[float, tuple[int, int, int, int]]]:
    return [(position, (*palette.rgb(name), alpha)) for position, name, alpha in stops]


def _gradient(offsets: np.ndarray, stops) -> Image.Image:
    """Interpolate RGBA stops over an array of gradient offsets.

    Offsets are clamped to [0, 1]. Interpolation happens on premultiplied
    colors, so a fading stop does not drag its neighbours towards black.
    """
    offsets = np.clip(offsets, 0.0, 1.0)
    positions = np.array([position for position, _ in stops])
    colors = np.array([color for _, color in stops], dtype=np.float64)
    alphas = colors[:, 3] / 255.0
    premultiplied = colors[:, :3] * alphas[:, np.newaxis]

    alpha = np.interp(offsets, positions, alphas)
    channels = [np.interp(offsets, positions, premultiplied[:, idx]) for idx in range(3)]

    safe_alpha = np.where(alpha > 0, alpha, 1.0)
    rgba = np.stack(
        [channel / safe_alpha for channel in channels] + [alpha * 255.0], axis=-1
    )
    pixels = np.clip(np.rint(rgba), 0, 255).astype(np.uint8)
    return Image.fromarray(np.ascontiguousarray(pixels))


def _alpha_byte(opacity: float) -> int:
    return int(round(opacity * 255))


def _encode_png(surface: Image.Image) -> bytes:
    buffer = BytesIO()
    try:
        surface.save(buffer, format="PNG", optimize=True)
    except (OSError, ValueError) as exc:
        raise RenderFailure(f"PNG encoding failed: {exc}") from exc
    return buffer.getvalue()


def render_swatch_sheet(palette: Palette) -> Image.Image:
    """Draw one swatch per palette entry, labelled with hex and contrast."""
    entries = list(palette.to_dict().items())
    swatch_width = 160
    swatch_height = 200
    label_height = 60
    width = swatch_width * len(entries)
    height = swatch_height + label_height

    img = Image.new("RGB", (width, height), color=(255, 255, 255))
    draw = ImageDraw.Draw(img)
    font = ImageFont.load_default()
    background = parse_hex(BACKGROUND_LIGHT)

    for idx, (name, hex_value) in enumerate(entries):
        color = parse_hex(hex_value)
        x0 = idx * swatch_width
        draw.rectangle([x0, 0, x0 + swatch_width, swatch_height], fill=color)
        draw.rectangle([x0, 0, x0 + swatch_width, swatch_height], outline=(0, 0, 0))

        ratio = contrast_ratio(color, background)
        draw.text((x0 + 8, swatch_height + 6), name, fill=(0, 0, 0), font=font)
        draw.text((x0 + 8, swatch_height + 22), hex_value, fill=(0, 0, 0), font=font)
        draw.text((x0 + 8, swatch_height + 38), f"{ratio:.2f}:1", fill=(80, 80, 80), font=font)

    return img
