"""
Object storage (S3-compatible)
Public uploads resolve to a direct bucket URL; private ones to a short-lived signed URL
"""

import logging
import re
import time
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import (
    AWS_ACCESS_KEY_ID,
    AWS_BUCKET_NAME,
    AWS_FOLDER_PREFIX,
    AWS_REGION,
    AWS_SECRET_ACCESS_KEY,
    S3_ENDPOINT_URL,
)

logger = logging.getLogger(__name__)

# Presigned URL expiration time (1 hour)
PRESIGNED_URL_EXPIRATION = 3600

ALLOWED_IMAGE_TYPES = ["image/png", "image/jpeg", "image/jpg", "image/webp", "image/gif"]
MAX_IMAGE_SIZE = 10 * 1024 * 1024
# Gallery photos and avatars
MAX_PHOTO_SIZE = 5 * 1024 * 1024
MAX_ATTACHMENT_SIZE = 10 * 1024 * 1024


def get_s3_client():
    """Create and return an S3 client."""
    return boto3.client(
        "s3",
        endpoint_url=S3_ENDPOINT_URL or None,
        region_name=AWS_REGION,
        aws_access_key_id=AWS_ACCESS_KEY_ID,
        aws_secret_access_key=AWS_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
    )


def sanitize_filename(filename: str) -> str:
    return re.sub(r"[^a-zA-Z0-9.-]", "_", filename or "archivo")


def build_key(filename: str, is_public: bool, timestamp_ms: Optional[int] = None) -> str:
    timestamp_ms = timestamp_ms or int(time.time() * 1000)
    folder = "public/uploads" if is_public else "uploads"
    return f"{AWS_FOLDER_PREFIX}{folder}/{timestamp_ms}-{sanitize_filename(filename)}"


def upload_file(content: bytes, filename: str, content_type: Optional[str] = None, is_public: bool = False) -> str:
    """Store bytes and return the object key"""
    key = build_key(filename, is_public)
    extra = {"ContentType": content_type} if content_type else {}
    get_s3_client().put_object(Bucket=AWS_BUCKET_NAME, Key=key, Body=content, **extra)
    logger.info(f"✅ Uploaded {len(content)} bytes to {key}")
    return key


def public_url(key: str) -> str:
    return f"https://{AWS_BUCKET_NAME}.s3.{AWS_REGION}.amazonaws.com/{key}"


def generate_presigned_url(key: str, expiration: int = PRESIGNED_URL_EXPIRATION) -> str:
    """Generate a presigned GET URL for a private object."""
    try:
        url = get_s3_client().generate_presigned_url(
            "get_object",
            Params={"Bucket": AWS_BUCKET_NAME, "Key": key},
            ExpiresIn=expiration,
        )
        logger.info(f"✅ Generated presigned URL for key: {key}")
        return url
    except Exception as e:
        logger.error(f"❌ Failed to generate presigned URL for key {key}: {e}")
        raise


def object_url(key: str, is_public: bool) -> str:
    return public_url(key) if is_public else generate_presigned_url(key)


def delete_file(key: str) -> bool:
    """Remove an object; returns False instead of raising when storage refuses"""
    try:
        get_s3_client().delete_object(Bucket=AWS_BUCKET_NAME, Key=key)
        logger.info(f"🗑️ Deleted {key}")
        return True
    except (BotoCoreError, ClientError) as e:
        logger.error(f"❌ Failed to delete {key}: {e}")
        return False
