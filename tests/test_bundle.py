import zipfile
from datetime import datetime, UTC
from io import BytesIO

import pytest
from PIL import Image

from generate_branding import bundle, renderer
from generate_branding.colors import InvalidColorFormat
from generate_branding.logo import decode_logo
from generate_branding.renderer import RenderFailure

TIMESTAMP = datetime(2026, 10, 19, 8, 30, 0, tzinfo=UTC)


@pytest.fixture(scope="module")
def logo():
    buffer = BytesIO()
    Image.new("RGBA", (64, 64), (255, 255, 255, 200)).save(buffer, format="PNG")
    return decode_logo(buffer.getvalue())


@pytest.fixture(scope="module")
def assets(logo):
    return bundle.generate_assets("#0078D4", "#106EBE", logo, TIMESTAMP)


def test_generate_assets_renders_all_images(assets):
    assert list(assets.images) == [spec.name for spec in renderer.REQUIRED_RENDERS]
    for spec in renderer.REQUIRED_RENDERS:
        img = Image.open(BytesIO(assets.images[spec.name]))
        assert img.size == (spec.width, spec.height)


def test_generate_assets_carries_palette_and_script(assets):
    assert assets.palette.primary == "#0078D4"
    assert "background-color: #0078D4" in assets.script
    assert "2026-10-19T08:30:00.000Z" in assets.script


def test_generate_assets_is_idempotent(assets, logo):
    again = bundle.generate_assets("#0078D4", "#106EBE", logo, TIMESTAMP)

    assert again.images == assets.images
    assert again.script == assets.script
    assert bundle.build_bundle(again) == bundle.build_bundle(assets)


def test_generate_assets_without_logo_still_renders():
    result = bundle.generate_assets("#FFFF00", "#106EBE", None, TIMESTAMP)

    assert result.logo is None
    assert len(result.images) == 6
    assert result.palette.primary_dark == "#c3c300"


def test_generate_assets_rejects_bad_seed():
    with pytest.raises(InvalidColorFormat):
        bundle.generate_assets("#12345", "#106EBE", None, TIMESTAMP)


def test_generate_assets_propagates_render_failure(monkeypatch):
    def failing_render(*args, **kwargs):
        raise RenderFailure("surface lost")

    monkeypatch.setattr(bundle, "render", failing_render)

    with pytest.raises(RenderFailure):
        bundle.generate_assets("#0078D4", "#106EBE", None, TIMESTAMP)


def test_build_bundle_contains_full_package(assets, logo):
    archive = zipfile.ZipFile(BytesIO(bundle.build_bundle(assets)))

    assert archive.namelist() == [
        "BannerImageLight.png",
        "BannerImageDark.png",
        "BackgroundImageDesktopLight.png",
        "BackgroundImageDesktopDark.png",
        "BackgroundImageMobileLight.png",
        "BackgroundImageMobileDark.png",
        "SquareLogo.png",
        "ApplyBranding.ps1",
        "README.txt",
    ]
    assert archive.read("SquareLogo.png") == logo.png_bytes
    assert archive.read("ApplyBranding.ps1").decode("utf-8") == assets.script
    assert archive.read("README.txt").decode("utf-8") == bundle.README_TEXT
    assert "Run: .\\ApplyBranding.ps1" in bundle.README_TEXT


def test_build_bundle_omits_logo_when_absent(assets):
    without_logo = bundle.GeneratedAssetSet(
        palette=assets.palette, images=assets.images, logo=None, script=assets.script
    )

    names = zipfile.ZipFile(BytesIO(bundle.build_bundle(without_logo))).namelist()

    assert "SquareLogo.png" not in names
    assert "ApplyBranding.ps1" in names
