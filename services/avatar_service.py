# services/avatar_service.py

import base64
import re
from datetime import datetime
from pathlib import Path as PathLib
from typing import Optional

from botocore.exceptions import ClientError, NoCredentialsError

from core.config import settings
from core.errors import AvatarRejectedError
from core.logging_config import logger
from core.s3_client import get_s3, presigned_get_url


# -----------------------------------------------------
# Filename sanitizer
# -----------------------------------------------------
def safe_filename(filename: str) -> str:
    return re.sub(r"[^A-Za-z0-9._-]", "_", filename)


# -----------------------------------------------------
# Size / type limits
# -----------------------------------------------------
def validate_avatar(filename: str, size: int) -> None:
    """
    Reject files that break the configured limits.
    Raises AvatarRejectedError; nothing is staged in that case.
    """
    if size <= 0:
        raise AvatarRejectedError("Avatar file is empty")

    if size > settings.AVATAR_MAX_BYTES:
        limit_mb = settings.AVATAR_MAX_BYTES / (1024 * 1024)
        raise AvatarRejectedError(f"Avatar must be smaller than {limit_mb:g}MB")

    ext = PathLib(filename or "").suffix.lower()
    if ext not in settings.AVATAR_ALLOWED_EXTENSIONS:
        allowed = ", ".join(settings.AVATAR_ALLOWED_EXTENSIONS)
        raise AvatarRejectedError(f"Unsupported avatar type '{ext or filename}'. Allowed: {allowed}")


def build_preview(data: bytes, content_type: Optional[str]) -> str:
    """Inline data URL shown while the real upload runs."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type or 'application/octet-stream'};base64,{encoded}"


# -----------------------------------------------------
# Storage
# -----------------------------------------------------
def avatar_key(owner: str, filename: str) -> str:
    timestamp = datetime.utcnow().strftime("%Y%m%d%H%M%S")
    return f"avatars/{owner}/{timestamp}-{safe_filename(filename)}"


def upload_avatar(owner: str, filename: str, data: bytes, content_type: Optional[str]) -> str:
    """
    Store the avatar in S3 and return a presigned URL for it.
    Any storage failure propagates to the caller.
    """
    s3, bucket, _region = get_s3()
    key = avatar_key(owner, filename)

    try:
        s3.put_object(
            Bucket=bucket,
            Key=key,
            Body=data,
            ContentType=content_type or "application/octet-stream",
        )
    except (ClientError, NoCredentialsError) as e:
        logger.error(f"Avatar upload to s3://{bucket}/{key} failed: {e}")
        raise

    logger.info(f"Uploaded avatar s3://{bucket}/{key} ({len(data)} bytes)")
    return presigned_get_url(s3, bucket, key, settings.AVATAR_URL_EXPIRY_SECONDS)
