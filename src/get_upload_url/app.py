"""
Get Upload URL Lambda Handler

Returns a presigned S3 URL for uploading a brand logo to logos/.
Called by the branding configurator page before generation.
"""

import os
import json
import logging
import uuid
from datetime import datetime, UTC

import boto3
from botocore.config import Config

logger = logging.getLogger()
logger.setLevel(os.environ.get("LOG_LEVEL", "INFO"))

AWS_REGION = os.environ.get("AWS_REGION") or os.environ.get(
    "AWS_DEFAULT_REGION", "eu-west-1"
)
S3_CONFIG = Config(signature_version="s3v4", s3={"addressing_style": "virtual"})

s3 = boto3.client(
    "s3",
    region_name=AWS_REGION,
    endpoint_url=f"https://s3.{AWS_REGION}.amazonaws.com",
    config=S3_CONFIG,
)
BUCKET_NAME = os.environ["BUCKET_NAME"]

UPLOAD_URL_EXPIRY = 300

# Transparent PNG is expected; other formats are converted during generation.
LOGO_CONTENT_TYPES = {
    "image/png": ".png",
    "image/webp": ".webp",
    "image/jpeg": ".jpg",
    "image/heic": ".heic",
}


def handler(event, context):
    """Generate presigned URL for logo upload."""
    params = (event or {}).get("queryStringParameters") or {}
    content_type = (params.get("content_type") or "image/png").lower()

    extension = LOGO_CONTENT_TYPES.get(content_type)
    if extension is None:
        logger.warning("Unsupported logo content type: %s", content_type)
        return _response(400, {"error": f"Unsupported content type: {content_type}"})

    logo_id = str(uuid.uuid4())
    timestamp = datetime.now(UTC).strftime("%Y%m%d%H%M%S")
    key = f"logos/{timestamp}-{logo_id}{extension}"

    presigned_url = s3.generate_presigned_url(
        "put_object",
        Params={
            "Bucket": BUCKET_NAME,
            "Key": key,
            "ContentType": content_type,
        },
        ExpiresIn=UPLOAD_URL_EXPIRY,
    )
    logger.info("Issued logo upload URL for %s", key)

    return _response(200, {"upload_url": presigned_url, "logo_key": key})


def _response(status_code: int, body: dict) -> dict:
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json",
            "Access-Control-Allow-Origin": "*",
        },
        "body": json.dumps(body),
    }
