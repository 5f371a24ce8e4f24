import base64
import io
import json
import os

import boto3
from moto import mock_aws
from PIL import Image

from generate_branding.renderer import RenderFailure

LOGO_KEY = "logos/20261019083000-test.png"


def _setup(monkeypatch):
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
    os.environ["BUCKET_NAME"] = "branding-test"

    s3 = boto3.client("s3", region_name="us-east-1")
    s3.create_bucket(Bucket=os.environ["BUCKET_NAME"])

    from generate_branding import app as branding_app

    monkeypatch.setattr(branding_app, "s3", s3)
    monkeypatch.setattr(branding_app, "BUCKET_NAME", os.environ["BUCKET_NAME"])
    return s3, branding_app


def _event(**body):
    return {"body": json.dumps(body)}


def _bundle_keys(s3):
    objects = s3.list_objects_v2(Bucket=os.environ["BUCKET_NAME"]).get("Contents", [])
    return [obj["Key"] for obj in objects if obj["Key"].startswith("bundles/")]


@mock_aws
def test_generate_branding_rejects_invalid_color(monkeypatch):
    s3, branding_app = _setup(monkeypatch)

    response = branding_app.handler(
        _event(primary_color="#12345G", logo_key=LOGO_KEY), {}
    )

    assert response["statusCode"] == 400
    assert "Invalid hex color" in json.loads(response["body"])["error"]


@mock_aws
def test_generate_branding_rejects_malformed_body(monkeypatch):
    s3, branding_app = _setup(monkeypatch)

    assert branding_app.handler({"body": "{not json"}, {})["statusCode"] == 400
    assert branding_app.handler({"body": "[1, 2]"}, {})["statusCode"] == 400


@mock_aws
def test_generate_branding_requires_logo_under_prefix(monkeypatch):
    s3, branding_app = _setup(monkeypatch)

    assert branding_app.handler(_event(), {})["statusCode"] == 400
    assert branding_app.handler(_event(logo_key="bundles/x.zip"), {})["statusCode"] == 400


@mock_aws
def test_generate_branding_missing_logo_returns_404(monkeypatch):
    s3, branding_app = _setup(monkeypatch)

    response = branding_app.handler(_event(logo_key=LOGO_KEY), {})

    assert response["statusCode"] == 404


@mock_aws
def test_generate_branding_rejects_undecodable_logo(monkeypatch):
    s3, branding_app = _setup(monkeypatch)
    s3.put_object(Bucket=os.environ["BUCKET_NAME"], Key=LOGO_KEY, Body=b"not-an-image")

    response = branding_app.handler(_event(logo_key=LOGO_KEY), {})

    assert response["statusCode"] == 400
    assert _bundle_keys(s3) == []


@mock_aws
def test_generate_branding_rejects_oversized_logo(monkeypatch):
    s3, branding_app = _setup(monkeypatch)
    monkeypatch.setattr(branding_app, "MAX_LOGO_SIZE", 10)
    s3.put_object(Bucket=os.environ["BUCKET_NAME"], Key=LOGO_KEY, Body=b"x" * 20)

    response = branding_app.handler(_event(logo_key=LOGO_KEY), {})

    assert response["statusCode"] == 400


@mock_aws
def test_generate_branding_render_failure_publishes_nothing(monkeypatch):
    s3, branding_app = _setup(monkeypatch)

    class StubLogo:
        image = None
        png_bytes = b""

    def failing_generate(*args, **kwargs):
        raise RenderFailure("surface lost")

    s3.put_object(Bucket=os.environ["BUCKET_NAME"], Key=LOGO_KEY, Body=b"png")
    monkeypatch.setattr(branding_app, "decode_logo", lambda raw: StubLogo())
    monkeypatch.setattr(branding_app, "generate_assets", failing_generate)

    response = branding_app.handler(_event(logo_key=LOGO_KEY), {})

    assert response["statusCode"] == 500
    assert _bundle_keys(s3) == []


@mock_aws
def test_generate_branding_rejects_logo_with_huge_dimensions(monkeypatch):
    s3, branding_app = _setup(monkeypatch)
    from generate_branding import logo as logo_module

    monkeypatch.setattr(logo_module, "MAX_LOGO_PIXELS", 16 * 16)
    buffer = io.BytesIO()
    Image.new("RGBA", (64, 64), (255, 0, 0, 255)).save(buffer, format="PNG")
    s3.put_object(Bucket=os.environ["BUCKET_NAME"], Key=LOGO_KEY, Body=buffer.getvalue())

    response = branding_app.handler(_event(logo_key=LOGO_KEY), {})

    assert response["statusCode"] == 400
    assert _bundle_keys(s3) == []


@mock_aws
def test_generate_branding_rejects_non_string_body(monkeypatch):
    s3, branding_app = _setup(monkeypatch)

    assert branding_app.handler({"body": 42}, {})["statusCode"] == 400
    assert branding_app.handler(
        {"body": "not base64!", "isBase64Encoded": True}, {}
    )["statusCode"] == 400


@mock_aws
def test_generate_branding_decodes_base64_body(monkeypatch):
    s3, branding_app = _setup(monkeypatch)
    payload = json.dumps({"primary_color": "#12345G", "logo_key": LOGO_KEY})
    event = {
        "body": base64.b64encode(payload.encode("utf-8")).decode("ascii"),
        "isBase64Encoded": True,
    }

    response = branding_app.handler(event, {})

    # Body was decoded and parsed: the color validation ran.
    assert response["statusCode"] == 400
    assert "Invalid hex color" in json.loads(response["body"])["error"]
