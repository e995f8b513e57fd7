"""
Blob storage abstraction for Firebase Storage, S3-compatible buckets and
in-memory testing.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

import boto3
import firebase_admin
from botocore.config import Config
from firebase_admin import storage

# SigV4 presigned URLs are valid for at most seven days.
S3_MAX_PRESIGN_SECONDS = 7 * 24 * 3600


class StorageClient(Protocol):
    """Defines the operations the API needs from object storage."""

    def upload_bytes(self, path: str, data: bytes, content_type: str) -> None:
        ...

    def signed_url(self, path: str, expires_at: datetime) -> str:
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    base_url: str = "https://example.test/storage"
    stored_objects: dict = field(default_factory=dict)

    def upload_bytes(self, path: str, data: bytes, content_type: str) -> None:
        self.stored_objects[path] = (data, content_type)

    def signed_url(self, path: str, expires_at: datetime) -> str:
        if path not in self.stored_objects:
            raise FileNotFoundError(path)
        return f"{self.base_url}/{path}?expires={int(expires_at.timestamp())}"


@dataclass
class FirebaseStorageClient:
    """Firebase Storage (Google Cloud Storage) bucket via `firebase_admin`."""

    app: firebase_admin.App
    bucket_name: str | None = None

    def __post_init__(self):
        self._bucket = storage.bucket(name=self.bucket_name, app=self.app)

    def upload_bytes(self, path: str, data: bytes, content_type: str) -> None:
        blob = self._bucket.blob(path)
        blob.upload_from_string(data, content_type=content_type)

    def signed_url(self, path: str, expires_at: datetime) -> str:
        # V4 signatures are capped at seven days; V2 honours long fixed expiries.
        return self._bucket.blob(path).generate_signed_url(
            version="v2",
            expiration=expires_at,
            method="GET",
        )


@dataclass
class S3StorageClient:
    """
    S3-compatible storage client.
    """

    bucket: str
    region: str
    endpoint: str
    access_key_id: str
    secret_access_key: str

    def __post_init__(self):
        config = Config(
            s3={"addressing_style": "virtual"},
            signature_version="s3v4",
        )
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=config,
        )

    def upload_bytes(self, path: str, data: bytes, content_type: str) -> None:
        self._client.put_object(
            Bucket=self.bucket,
            Key=path,
            Body=data,
            ContentType=content_type,
        )

    def signed_url(self, path: str, expires_at: datetime) -> str:
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        remaining = int((expires_at - datetime.now(timezone.utc)).total_seconds())
        return self._client.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": self.bucket, "Key": path},
            ExpiresIn=max(1, min(remaining, S3_MAX_PRESIGN_SECONDS)),
        )


def store_upload(
    storage_client: StorageClient,
    filename: str,
    data: bytes,
    content_type: str | None,
    folder: str,
    expires_at: datetime,
) -> tuple[str, str]:
    """
    Upload a file under `folder` with a timestamp-prefixed name.

    Returns the stored file name and a signed read URL for it.
    """
    file_name = f"{int(time.time() * 1000)}_{filename}"
    path = f"{folder}/{file_name}" if folder else file_name
    storage_client.upload_bytes(
        path, data, content_type or "application/octet-stream"
    )
    return file_name, storage_client.signed_url(path, expires_at)
