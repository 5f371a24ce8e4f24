"""
Generate a palette preview sheet for a pair of brand seed colors.

Usage: python scripts/preview_palette.py [PRIMARY] [SECONDARY]

Outputs:
- palette_preview.png: one swatch per palette entry with contrast vs. background
- palette.json: the derived palette values
"""

import json
import sys
from pathlib import Path

from generate_branding.colors import (
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_SECONDARY_COLOR,
    derive_palette,
)
from generate_branding.renderer import render_swatch_sheet

OUTPUT_DIR = Path(__file__).resolve().parent


def main() -> None:
    args = sys.argv[1:]
    primary = args[0] if len(args) > 0 else DEFAULT_PRIMARY_COLOR
    secondary = args[1] if len(args) > 1 else DEFAULT_SECONDARY_COLOR

    palette = derive_palette(primary, secondary)

    img = render_swatch_sheet(palette)
    img.save(OUTPUT_DIR / "palette_preview.png")

    palette_path = OUTPUT_DIR / "palette.json"
    with palette_path.open("w", encoding="utf-8") as fp:
        json.dump({"palette": palette.to_dict()}, fp, indent=2)

    print(f"Wrote {OUTPUT_DIR / 'palette_preview.png'}")
    print(f"Wrote {palette_path}")


if __name__ == "__main__":
    main()
