"""S3-compatible media storage for Around.

Uploads post images, marks them public-read and hands back the URL that is
stored with the post.
"""

import logging
from typing import BinaryIO, Optional
from urllib.parse import quote

import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from around.config import Settings
from around.core.errors import BlobStorageError

logger = logging.getLogger(__name__)


def build_client(settings: Settings):
    """Create the boto3 S3 client described by ``settings``.

    Empty endpoint/credentials fall back to boto3's defaults (AWS endpoint,
    default credential chain). Retries are disabled.
    """
    kwargs = {
        "region_name": settings.S3_REGION,
        "config": BotoConfig(
            signature_version="s3v4",
            retries={"mode": "standard", "total_max_attempts": 1},
        ),
    }
    if settings.S3_ENDPOINT:
        kwargs["endpoint_url"] = settings.S3_ENDPOINT
    if settings.S3_ACCESS_KEY:
        kwargs["aws_access_key_id"] = settings.S3_ACCESS_KEY
        kwargs["aws_secret_access_key"] = settings.S3_SECRET_KEY
    return boto3.client("s3", **kwargs)


class BlobStorage:
    """Thin client around boto3 S3 for public media uploads."""

    def __init__(self, settings: Settings, client=None) -> None:
        self.public_base_url = settings.PUBLIC_BASE_URL
        self._client = client or build_client(settings)

    def upload(
        self,
        stream: BinaryIO,
        bucket: str,
        object_name: str,
        content_type: Optional[str] = None,
    ) -> str:
        """Store ``stream`` as ``bucket/object_name`` and make it public-read.

        Args:
            stream: Readable binary file object; it is consumed entirely.
            bucket: Target bucket, which must already exist.
            object_name: Object key; the post id is used so that each post
                maps to at most one object.
            content_type: MIME type recorded on the object.

        Returns:
            The public URL of the stored object.

        Raises:
            BlobStorageError: any step failed. An object written before the
                failing step is left in place.
        """
        extra = {"ContentType": content_type} if content_type else {}
        try:
            self._client.head_bucket(Bucket=bucket)
            self._client.put_object(Bucket=bucket, Key=object_name, Body=stream, **extra)
            self._client.put_object_acl(Bucket=bucket, Key=object_name, ACL="public-read")
            attrs = self._client.head_object(Bucket=bucket, Key=object_name)
        except (BotoCoreError, ClientError) as e:
            raise BlobStorageError(f"Upload of {bucket}/{object_name} failed: {e}") from e

        url = self.object_url(bucket, object_name, attrs.get("VersionId"))
        logger.info("Image is saved to storage: %s", url)
        return url

    def object_url(self, bucket: str, object_name: str, version_id: Optional[str] = None) -> str:
        key = quote(object_name)
        if self.public_base_url:
            url = f"{self.public_base_url}/{key}"
        else:
            endpoint = self._client.meta.endpoint_url.rstrip("/")
            url = f"{endpoint}/{bucket}/{key}"
        if version_id and version_id != "null":
            url += f"?versionId={quote(version_id)}"
        return url
