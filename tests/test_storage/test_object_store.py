"""Tests for S3ObjectStore, with botocore's Stubber standing in for MinIO."""

from io import BytesIO

import pytest
from botocore.response import StreamingBody
from botocore.stub import ANY, Stubber

from storage.object_store import ObjectNotFoundError, S3ObjectStore, StorageError


@pytest.fixture
def store():
    return S3ObjectStore(
        endpoint_url="http://minio.test:9000",
        access_key="minioadmin",
        secret_key="minioadmin",
        bucket="synapse",
    )


def test_get_returns_object_bytes(store):
    payload = b"\xff\xd8\xff image bytes"
    with Stubber(store._client) as stub:
        stub.add_response(
            "get_object",
            {"Body": StreamingBody(BytesIO(payload), len(payload))},
            {"Bucket": "synapse", "Key": "uploads/photo.jpg"},
        )
        assert store.get("uploads/photo.jpg") == payload


def test_missing_key_is_not_found(store):
    with Stubber(store._client) as stub:
        stub.add_client_error("get_object", service_error_code="NoSuchKey", http_status_code=404)
        with pytest.raises(ObjectNotFoundError, match="File not found: uploads/gone.jpg"):
            store.get("uploads/gone.jpg")


def test_other_client_errors_are_storage_errors(store):
    with Stubber(store._client) as stub:
        stub.add_client_error("get_object", service_error_code="AccessDenied", http_status_code=403)
        with pytest.raises(StorageError) as excinfo:
            store.get("uploads/secret.jpg")
    assert not isinstance(excinfo.value, ObjectNotFoundError)


def test_from_settings(test_settings):
    settings = test_settings.model_copy(update={"MINIO_BUCKET_NAME": "thumbs"})
    store = S3ObjectStore.from_settings(settings)
    assert store._bucket == "thumbs"


def test_put_uploads_with_content_type(store):
    with Stubber(store._client) as stub:
        stub.add_response(
            "put_object",
            {"ETag": '"abc"'},
            {"Bucket": "synapse", "Key": "uploads/sample.jpg", "Body": ANY, "ContentType": "image/jpeg"},
        )
        store.put("uploads/sample.jpg", b"jpeg", "image/jpeg")
        stub.assert_no_pending_responses()


def test_put_failure_is_storage_error(store):
    with Stubber(store._client) as stub:
        stub.add_client_error("put_object", service_error_code="NoSuchBucket", http_status_code=404)
        with pytest.raises(StorageError, match="Failed to upload uploads/sample.jpg"):
            store.put("uploads/sample.jpg", b"jpeg", "image/jpeg")
