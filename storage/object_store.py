"""
Object storage access for queue jobs.

Queue messages only name an object ("objectName"); the bytes live in the
platform's MinIO bucket. MinIO speaks the S3 API, so boto3 with a custom
endpoint_url and s3v4 signatures is all we need.

The worker only depends on the ObjectStore protocol (`get(name) -> bytes`),
so tests can hand it a dict-backed fake.
"""

import logging
from typing import Protocol

import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from config.settings import Settings

logger = logging.getLogger(__name__)

_MISSING_KEY_CODES = {"NoSuchKey", "404", "NotFound"}


class StorageError(Exception):
    """Object storage could not serve the request."""


class ObjectNotFoundError(StorageError):
    """The named object does not exist in the bucket."""


class ObjectStore(Protocol):
    def get(self, object_name: str) -> bytes:
        ...

    def put(self, object_name: str, data: bytes, content_type: str = ...) -> None:
        ...


class S3ObjectStore:

    def __init__(self, endpoint_url: str, access_key: str, secret_key: str, bucket: str):
        self._bucket = bucket
        session = boto3.session.Session()
        self._client = session.client(
            service_name="s3",
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            endpoint_url=endpoint_url,
            config=BotoConfig(signature_version="s3v4"),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ObjectStore":
        return cls(
            endpoint_url=settings.minio_endpoint_url,
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            bucket=settings.MINIO_BUCKET_NAME,
        )

    def get(self, object_name: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=object_name)
            return response["Body"].read()
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in _MISSING_KEY_CODES:
                raise ObjectNotFoundError(f"File not found: {object_name}") from e
            raise StorageError(f"Failed to fetch {object_name}: {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"Failed to fetch {object_name}: {e}") from e

    def put(self, object_name: str, data: bytes, content_type: str = "application/octet-stream") -> None:
        try:
            self._client.put_object(
                Bucket=self._bucket, Key=object_name, Body=data, ContentType=content_type
            )
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Failed to upload {object_name}: {e}") from e
        logger.info(f"Uploaded {object_name} ({len(data)} bytes) to bucket '{self._bucket}'")
