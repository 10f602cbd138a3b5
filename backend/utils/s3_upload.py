import boto3
from botocore.exceptions import BotoCoreError, ClientError
import uuid
import os
import logging

from utils.errors import ServiceError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
}
MAX_IMAGE_SIZE = 10 * 1024 * 1024


def get_s3_client():
    """Builds the S3 client; routers take it as a dependency so tests can swap it."""
    aws_region = os.getenv('AWS_DEFAULT_REGION', 'ap-southeast-1')
    return boto3.client('s3', region_name=aws_region)


def upload_rooster_image(s3_client, file_content: bytes, content_type: str) -> dict:
    """Upload a rooster photo to S3 and return its public URL and key.

    Raises ServiceError(SERVER_MISCONFIGURED) when no bucket is configured and
    ServiceError(IMAGE_UPLOAD_FAILED) when S3 rejects the upload.
    """
    bucket_name = os.getenv('S3_BUCKET_NAME')
    aws_region = os.getenv('AWS_DEFAULT_REGION', 'ap-southeast-1')

    if not bucket_name:
        logger.error("S3_BUCKET_NAME is not set.")
        raise ServiceError("SERVER_MISCONFIGURED", "Image upload is not configured correctly.")

    extension = ALLOWED_IMAGE_TYPES.get(content_type, "bin")
    s3_key = f"roosters/{uuid.uuid4().hex}.{extension}"

    logger.info(f"Uploading {len(file_content)} bytes to s3://{bucket_name}/{s3_key}")
    try:
        s3_client.put_object(
            Bucket=bucket_name,
            Key=s3_key,
            Body=file_content,
            ContentType=content_type,
        )
    except (ClientError, BotoCoreError) as e:
        logger.exception(f"S3 upload failed for key {s3_key}: {e}")
        raise ServiceError("IMAGE_UPLOAD_FAILED", "Failed to upload image.") from e

    url = f"https://{bucket_name}.s3.{aws_region}.amazonaws.com/{s3_key}"
    return {"url": url, "key": s3_key}
