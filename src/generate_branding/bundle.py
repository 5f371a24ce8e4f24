"""
Asset generation run and ZIP packaging of the branding bundle.
"""

import logging
import zipfile
from dataclasses import dataclass
from datetime import datetime
from io import BytesIO

try:
    from .colors import Palette, derive_palette
    from .logo import Logo
    from .renderer import REQUIRED_RENDERS, render
    from .script import LOGO_FILENAME, SCRIPT_FILENAME, emit_script
except ImportError:
    from colors import Palette, derive_palette
    from logo import Logo
    from renderer import REQUIRED_RENDERS, render
    from script import LOGO_FILENAME, SCRIPT_FILENAME, emit_script

logger = logging.getLogger()

README_FILENAME = "README.txt"

README_TEXT = """Microsoft 365 Branding Package

This package contains all the necessary files to apply your custom branding to Microsoft 365.

Files included:
- BannerImageLight.png & BannerImageDark.png: Banner images for light and dark themes
- BackgroundImageDesktopLight.png & BackgroundImageDesktopDark.png: Desktop background images
- BackgroundImageMobileLight.png & BackgroundImageMobileDark.png: Mobile background images
- SquareLogo.png: Your company logo
- ApplyBranding.ps1: PowerShell script to apply the branding

Instructions:
1. Extract all files to a folder
2. Open PowerShell as Administrator
3. Navigate to the folder containing the files
4. Run: .\\ApplyBranding.ps1
5. Follow the prompts to authenticate

Note: You need appropriate Microsoft 365 admin permissions to apply branding.
"""

# Fixed entry date so identical asset sets zip to identical bytes.
ZIP_DATE_TIME = (1980, 1, 1, 0, 0, 0)


@dataclass(frozen=True)
class GeneratedAssetSet:
    palette: Palette
    images: dict[str, bytes]
    logo: Logo | None
    script: str


def generate_assets(
    primary_color: str,
    secondary_color: str,
    logo: Logo | None,
    timestamp: datetime,
) -> GeneratedAssetSet:
    """Derive the palette once, render all images and emit the script.

    Raises InvalidColorFormat for bad seeds and RenderFailure if any image
    fails; no partial asset set is returned.
    """
    palette = derive_palette(primary_color, secondary_color)
    logger.info("Derived palette: %s", palette.to_dict())

    logo_image = logo.image if logo is not None else None
    images: dict[str, bytes] = {}
    for spec in REQUIRED_RENDERS:
        images[spec.name] = render(
            spec.kind, spec.width, spec.height, spec.theme, palette, logo_image
        )

    script = emit_script(palette, timestamp)
    return GeneratedAssetSet(palette=palette, images=images, logo=logo, script=script)


def build_bundle(assets: GeneratedAssetSet) -> bytes:
    """Package an asset set as a ZIP archive."""
    entries: list[tuple[str, bytes]] = list(assets.images.items())
    if assets.logo is not None:
        entries.append((LOGO_FILENAME, assets.logo.png_bytes))
    else:
        logger.warning("No logo in asset set, %s omitted from bundle", LOGO_FILENAME)
    entries.append((SCRIPT_FILENAME, assets.script.encode("utf-8")))
    entries.append((README_FILENAME, README_TEXT.encode("utf-8")))

    buffer = BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, payload in entries:
            info = zipfile.ZipInfo(name, date_time=ZIP_DATE_TIME)
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = 0o644 << 16
            zf.writestr(info, payload)

    logger.info("Bundle created: %s entries (%s KB)", len(entries), buffer.tell() // 1024)
    return buffer.getvalue()
