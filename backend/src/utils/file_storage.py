"""
Object storage for clinical image attachments.

Uploads go to DigitalOcean Spaces through its S3 compatible API when
credentials are configured, otherwise to the local filesystem so the API
remains usable in development.
"""

import logging
import os
import re
import uuid
from typing import Any, Optional

import boto3  # type: ignore

from core.config import (
    API_BASE_URL,
    LOCAL_UPLOAD_DIR,
    SPACES_BUCKET,
    SPACES_CDN_ENDPOINT,
    SPACES_ENDPOINT,
    SPACES_KEY,
    SPACES_REGION,
    SPACES_SECRET,
)

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def build_object_key(folder: str, filename: str) -> str:
    """Key for a new object: `<folder>/<uuid>-<sanitized filename>`."""
    safe_name = _UNSAFE_FILENAME_CHARS.sub("_", os.path.basename(filename or "")).strip("._") or "archivo"
    return f"{folder.strip('/')}/{uuid.uuid4()}-{safe_name}"


class ObjectStorage:
    """Gateway to the object store. `upload_file` returns the public URL."""

    def __init__(
        self,
        bucket: str = SPACES_BUCKET,
        access_key: str = SPACES_KEY,
        secret_key: str = SPACES_SECRET,
        region: str = SPACES_REGION,
        endpoint_url: Optional[str] = SPACES_ENDPOINT,
        cdn_endpoint: str = SPACES_CDN_ENDPOINT,
        local_dir: str = LOCAL_UPLOAD_DIR,
    ):
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        self.cdn_endpoint = cdn_endpoint
        self.local_dir = local_dir
        self.s3_client: Any = None
        if bucket and access_key and secret_key:
            self.s3_client = boto3.client(  # type: ignore
                "s3",
                region_name=region,
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
            )

    @property
    def uses_remote_storage(self) -> bool:
        return self.s3_client is not None

    def upload_file(self, content: bytes, filename: str, content_type: str, folder: str) -> str:
        """
        Store `content` under `folder` and return its public URL.

        Raises whatever the underlying client raises; callers decide how a
        failed upload affects the request.
        """
        key = build_object_key(folder, filename)
        if self.uses_remote_storage:
            return self._upload_remote(key, content, content_type)
        return self._save_local(key, content)

    def _upload_remote(self, key: str, content: bytes, content_type: str) -> str:
        self.s3_client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=content,
            ContentType=content_type or "application/octet-stream",
            ACL="public-read",
        )
        logger.info(f"Uploaded {key} to bucket {self.bucket}")
        return self.public_url(key)

    def _save_local(self, key: str, content: bytes) -> str:
        file_path = os.path.join(self.local_dir, *key.split("/"))
        os.makedirs(os.path.dirname(file_path), exist_ok=True)
        with open(file_path, "wb") as out_file:
            out_file.write(content)
        logger.info(f"Saved {key} to local storage")
        return f"{API_BASE_URL}/static/{key}"

    def public_url(self, key: str) -> str:
        """Public URL for an object stored in the bucket."""
        if self.cdn_endpoint:
            host = self.cdn_endpoint.rstrip("/")
            if not host.startswith(("http://", "https://")):
                host = f"https://{host}"
            return f"{host}/{key}"
        return f"https://{self.bucket}.{self.region}.digitaloceanspaces.com/{key}"


def get_object_storage() -> ObjectStorage:
    """FastAPI dependency returning the configured object storage."""
    return ObjectStorage()
