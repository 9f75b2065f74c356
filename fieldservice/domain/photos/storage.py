"""Object storage for job photos (Cloudflare R2, S3 API)"""

import logging

import boto3
from botocore.config import Config

from ...config import R2_ACCESS_KEY_ID, R2_ACCOUNT_ID, R2_BUCKET_NAME, R2_SECRET_ACCESS_KEY

logger = logging.getLogger(__name__)

# Presigned URL expiration time (1 hour)
PRESIGNED_URL_EXPIRATION = 3600

# Allowed image types for uploads
ALLOWED_IMAGE_TYPES = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/heic": "heic",
    "image/heif": "heif",
    "image/avif": "avif",
}


def get_r2_client():
    """Create and return an R2 client."""
    return boto3.client(
        "s3",
        endpoint_url=f"https://{R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=R2_ACCESS_KEY_ID,
        aws_secret_access_key=R2_SECRET_ACCESS_KEY,
        config=Config(signature_version="s3v4"),
    )


class PhotoStorage:
    """Private bucket holding photo objects; callers only ever see presigned URLs"""

    def __init__(self, client=None, bucket: str = R2_BUCKET_NAME):
        self.client = client or get_r2_client()
        self.bucket = bucket

    def put(self, key: str, body: bytes, content_type: str) -> None:
        self.client.put_object(Bucket=self.bucket, Key=key, Body=body, ContentType=content_type)
        logger.info(f"📤 Stored object {key} ({len(body)} bytes)")

    def delete(self, key: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=key)
        logger.info(f"🗑️ Deleted object {key}")

    def presigned_url(self, key: str, expiration: int = PRESIGNED_URL_EXPIRATION) -> str:
        """Generate a presigned URL for accessing a private object in R2."""
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={
                    "Bucket": self.bucket,
                    "Key": key,
                    "ResponseContentDisposition": "inline",
                },
                ExpiresIn=expiration,
            )
        except Exception as e:
            logger.error(f"❌ Failed to generate presigned URL for key {key}: {e}")
            raise


def get_photo_storage() -> PhotoStorage:
    """Dependency returning the configured photo storage"""
    return PhotoStorage()
