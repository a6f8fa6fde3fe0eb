"""Cloudflare R2 file storage for published sites."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

import aioboto3
from botocore.exceptions import ClientError

from backend.config import settings
from engine.compiler.site import html_file_path
from engine.compiler.types import SiteFile

logger = logging.getLogger(__name__)

# Retryable S3 error codes
_RETRYABLE_CODES = {"RequestTimeout", "ServiceUnavailable", "ThrottlingException", "Throttling", "SlowDown"}

_CONTENT_TYPES = {
    "html": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "json": "application/json",
    "xml": "application/xml",
    "txt": "text/plain",
}


def site_key(website_id: str, path: str) -> str:
    """Bucket key for one file of a published site."""
    segments = [s for s in path.split("/") if s not in ("", ".", "..")]
    relative = "/".join(segments)
    if not segments or "." not in segments[-1]:
        relative = html_file_path("/" + relative)
    return f"{website_id}/{relative}"


def content_type_for(key: str) -> str:
    ext = key.rsplit(".", 1)[-1].lower() if "." in key else ""
    return _CONTENT_TYPES.get(ext, "application/octet-stream")


class R2Service:
    """Cloudflare R2 storage service using S3-compatible API."""

    def __init__(self) -> None:
        """Initialize R2 service with credentials from settings."""
        self.session = aioboto3.Session()
        self.endpoint = settings.R2_ENDPOINT
        self.access_key = settings.R2_ACCESS_KEY
        self.secret_key = settings.R2_SECRET_KEY
        self.bucket = settings.R2_PUBLISHED_BUCKET

    def _require_credentials(self) -> None:
        if not (self.endpoint and self.access_key and self.secret_key):
            raise RuntimeError("R2_ENDPOINT, R2_ACCESS_KEY and R2_SECRET_KEY are required to publish")

    def _client(self):
        return self.session.client(
            "s3",
            endpoint_url=self.endpoint,
            aws_access_key_id=self.access_key,
            aws_secret_access_key=self.secret_key,
        )

    async def _put(self, s3, key: str, body: bytes, content_type: str, max_retries: int) -> None:
        last_error: Exception | None = None

        for attempt in range(max_retries + 1):
            try:
                await s3.put_object(
                    Bucket=self.bucket,
                    Key=key,
                    Body=body,
                    ContentType=f"{content_type}; charset=utf-8",
                    # Public read for published sites
                    ACL="public-read",
                )
                return
            except ClientError as e:
                error_code = e.response.get("Error", {}).get("Code", "")
                if error_code in _RETRYABLE_CODES and attempt < max_retries:
                    wait_time = 2**attempt
                    logger.warning(
                        "R2 upload error for %s (attempt %d), retrying in %ds: %s", key, attempt + 1, wait_time, e
                    )
                    await asyncio.sleep(wait_time)
                    last_error = e
                else:
                    raise
            except OSError as e:
                # Network errors, timeouts, etc.
                if attempt < max_retries:
                    wait_time = 2**attempt
                    logger.warning(
                        "R2 upload error for %s (attempt %d), retrying in %ds: %s", key, attempt + 1, wait_time, e
                    )
                    await asyncio.sleep(wait_time)
                    last_error = e
                else:
                    raise

        raise last_error  # type: ignore[misc]

    async def upload_site_files(
        self, website_id: str, files: Mapping[str, SiteFile], max_retries: int = 1
    ) -> list[str]:
        """
        Upload every file of a compiled site under `{website_id}/`.

        Args:
            website_id: Website ID, used as the key prefix
            files: path → SiteFile, as returned by site_files()
            max_retries: Number of retries on transient failures (default 1)

        Returns:
            The R2 keys written, in upload order
        """
        self._require_credentials()
        keys: list[str] = []

        async with self._client() as s3:
            for path, site_file in files.items():
                key = f"{website_id}/{path}"
                await self._put(s3, key, site_file.content.encode("utf-8"), site_file.content_type, max_retries)
                keys.append(key)

        logger.info("Uploaded %d files for website %s to %s", len(keys), website_id, self.bucket)
        return keys

    async def get_published_file(self, website_id: str, path: str) -> tuple[bytes, str] | None:
        """
        Fetch one published file.

        Args:
            website_id: Website ID
            path: Request path below the site root ("" or "about" map to index.html)

        Returns:
            (body, content type) if found, None if not found
        """
        self._require_credentials()
        key = site_key(website_id, path)

        async with self._client() as s3:
            try:
                response = await s3.get_object(Bucket=self.bucket, Key=key)
                body = await response["Body"].read()
            except ClientError as e:
                if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                    return None
                raise
        return body, content_type_for(key)


# Singleton instance
r2_service = R2Service()
