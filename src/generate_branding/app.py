"""
Generate Branding Lambda Handler

Called by the branding configurator page once the logo is uploaded.
1. Validates the two seed colors
2. Downloads the uploaded logo from logos/
3. Decodes the logo
4. Derives the palette, renders six images, emits the PowerShell script
5. Uploads the ZIP bundle to bundles/
6. Returns a presigned download URL and the palette
"""

import os
import base64
import json
import logging
import uuid
from datetime import datetime, UTC

import boto3
from botocore.exceptions import ClientError

try:
    from .bundle import build_bundle, generate_assets
    from .colors import (
        DEFAULT_PRIMARY_COLOR,
        DEFAULT_SECONDARY_COLOR,
        InvalidColorFormat,
        normalize_hex,
    )
    from .logo import LogoDecodeFailure, decode_logo
    from .renderer import RenderFailure
except ImportError:
    from bundle import build_bundle, generate_assets
    from colors import (
        DEFAULT_PRIMARY_COLOR,
        DEFAULT_SECONDARY_COLOR,
        InvalidColorFormat,
        normalize_hex,
    )
    from logo import LogoDecodeFailure, decode_logo
    from renderer import RenderFailure

logger = logging.getLogger()
logger.setLevel(os.environ.get("LOG_LEVEL", "INFO"))

s3 = boto3.client("s3")

BUCKET_NAME = os.environ["BUCKET_NAME"]

LOGO_PREFIX = "logos/"
BUNDLE_PREFIX = "bundles/"
MAX_LOGO_SIZE = 5 * 1024 * 1024
BUNDLE_URL_EXPIRY = 3600


def handler(event, context):
    """Main Lambda handler."""
    try:
        body = _parse_body(event)
    except (TypeError, ValueError) as exc:
        logger.warning("Invalid request body: %s", exc)
        return _response(400, {"error": "Request body must be a JSON object"})

    primary_color = body.get("primary_color") or DEFAULT_PRIMARY_COLOR
    secondary_color = body.get("secondary_color") or DEFAULT_SECONDARY_COLOR
    logo_key = body.get("logo_key")

    try:
        primary_color = normalize_hex(primary_color)
        secondary_color = normalize_hex(secondary_color)
    except InvalidColorFormat as exc:
        logger.warning("Rejected color input: %s", exc)
        return _response(400, {"error": str(exc)})

    if not isinstance(logo_key, str) or not logo_key.startswith(LOGO_PREFIX):
        logger.warning("Missing or invalid logo key: %s", logo_key)
        return _response(400, {"error": "logo_key must reference an uploaded logo"})

    try:
        response = s3.get_object(Bucket=BUCKET_NAME, Key=logo_key)
    except ClientError as exc:
        logger.warning("Logo not found s3://%s/%s: %s", BUCKET_NAME, logo_key, exc)
        return _response(404, {"error": "Logo not found"})
    logo_bytes = response["Body"].read()

    if len(logo_bytes) > MAX_LOGO_SIZE:
        logger.warning("Logo too large (%s bytes), rejecting", len(logo_bytes))
        return _response(400, {"error": "Logo exceeds maximum size"})

    try:
        logo = decode_logo(logo_bytes)
    except LogoDecodeFailure as exc:
        logger.warning("Logo decode failed for %s: %s", logo_key, exc)
        return _response(400, {"error": "Logo is not a decodable image"})

    timestamp = datetime.now(UTC)
    try:
        assets = generate_assets(primary_color, secondary_color, logo, timestamp)
    except RenderFailure as exc:
        logger.error("Asset generation failed: %s", exc)
        return _response(500, {"error": "Asset generation failed"})

    bundle_id = str(uuid.uuid4())
    bundle_key = f"{BUNDLE_PREFIX}{timestamp.strftime('%Y/%m/%d')}/{bundle_id}.zip"

    s3.put_object(
        Bucket=BUCKET_NAME,
        Key=bundle_key,
        Body=build_bundle(assets),
        ContentType="application/zip",
    )
    logger.info("Saved bundle: %s", bundle_key)

    bundle_url = s3.generate_presigned_url(
        "get_object",
        Params={"Bucket": BUCKET_NAME, "Key": bundle_key},
        ExpiresIn=BUNDLE_URL_EXPIRY,
    )

    return _response(
        200,
        {
            "bundle_id": bundle_id,
            "bundle_key": bundle_key,
            "bundle_url": bundle_url,
            "palette": assets.palette.to_dict(),
        },
    )


def _parse_body(event) -> dict:
    raw = (event or {}).get("body")
    if raw is None:
        return {}
    if isinstance(raw, dict):
        return raw
    if event.get("isBase64Encoded"):
        raw = base64.b64decode(raw, validate=True)
    body = json.loads(raw)
    if not isinstance(body, dict):
        raise ValueError("Body is not an object")
    return body


def _response(status_code: int, body: dict) -> dict:
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json",
            "Access-Control-Allow-Origin": "*",
        },
        "body": json.dumps(body),
    }
