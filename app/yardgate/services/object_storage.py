from __future__ import annotations

import logging
from urllib.parse import urlparse

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.yardgate.core.config import settings
from app.yardgate.core.error_catalog import StorageFaultError

logger = logging.getLogger(__name__)

_STORAGE_ERRORS = (ClientError, BotoCoreError)


def _s3_error_message(exc: Exception) -> str:
    response = getattr(exc, "response", {}) or {}
    return (response.get("Error") or {}).get("Message") or str(exc)


class ObjectStorageService:
    """S3-compatible object store used to promote and discard uploads."""

    def __init__(self) -> None:
        self._access_key = settings.S3_ACCESS_KEY
        self._secret_key = settings.S3_SECRET_KEY
        self._bucket = settings.S3_BUCKET
        self._region = settings.S3_REGION
        self._endpoint = settings.S3_ENDPOINT
        self._public_base_url = settings.S3_PUBLIC_BASE_URL
        self._client = None

    @property
    def client(self):
        if self._client is None:
            self._validate_settings()
            self._client = self._build_s3_client()
        return self._client

    def copy_object(self, source_key: str, dest_key: str) -> None:
        try:
            self.client.copy_object(
                Bucket=self._bucket,
                CopySource={"Bucket": self._bucket, "Key": source_key},
                Key=dest_key,
            )
        except _STORAGE_ERRORS as exc:
            logger.exception(
                "storage_copy_error",
                extra={"source_key": source_key, "dest_key": dest_key, "exception_type": type(exc).__name__},
            )
            raise StorageFaultError(
                f"storage copy failed: {_s3_error_message(exc)}", operation="copy", key=source_key
            ) from exc

    def delete_object(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self._bucket, Key=key)
        except _STORAGE_ERRORS as exc:
            logger.exception(
                "storage_delete_error",
                extra={"key": key, "exception_type": type(exc).__name__},
            )
            raise StorageFaultError(
                f"storage delete failed: {_s3_error_message(exc)}", operation="delete", key=key
            ) from exc

    def delete_objects(self, keys: list[str]) -> tuple[list[str], list[str]]:
        deleted: list[str] = []
        failed: list[str] = []
        for key in keys:
            try:
                self.delete_object(key)
            except StorageFaultError:
                failed.append(key)
                continue
            deleted.append(key)
        return deleted, failed

    def public_url(self, key: str) -> str:
        if self._public_base_url:
            return f"{self._public_base_url.rstrip('/')}/{key}"
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"

    def _validate_settings(self) -> None:
        required = {"S3_BUCKET": self._bucket, "S3_REGION": self._region}
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise StorageFaultError(
                f"missing object storage configuration: {', '.join(missing)}",
                operation="configure",
            )

    def _normalized_endpoint_url(self) -> str | None:
        endpoint = (self._endpoint or "").strip()
        if not endpoint:
            return None
        parsed = urlparse(endpoint)
        if parsed.scheme:
            return f"{parsed.scheme}://{parsed.netloc}{parsed.path}".rstrip("/")
        return f"https://{endpoint.lstrip('/')}".rstrip("/")

    def _build_s3_client(self):
        credentials = {}
        if self._access_key and self._secret_key:
            credentials = {"aws_access_key_id": self._access_key, "aws_secret_access_key": self._secret_key}
        return boto3.client(
            "s3",
            region_name=self._region,
            endpoint_url=self._normalized_endpoint_url(),
            config=Config(signature_version="s3v4"),
            **credentials,
        )
