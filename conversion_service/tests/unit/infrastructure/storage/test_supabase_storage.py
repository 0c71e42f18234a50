from unittest.mock import MagicMock, patch

import pytest
import requests

from conversion_service.infrastructure.storage.supabase_storage import StorageBackendError, SupabaseStorage

ENDPOINT = "https://project.supabase.co"


def make_response(status_code: int, payload=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if payload is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def storage():
    return SupabaseStorage(ENDPOINT + "/", "service-key", timeout=12.5)


def test_upload_posts_object_with_upsert(storage):
    with patch(
        "conversion_service.infrastructure.storage.supabase_storage.requests.post",
        return_value=make_response(200, {"Key": "editions/ed-1/pages/low/001.webp"}),
    ) as post:
        storage.upload("editions", "ed-1/pages/low/001.webp", b"webp-bytes", "image/webp")

    args, kwargs = post.call_args
    assert args[0] == f"{ENDPOINT}/storage/v1/object/editions/ed-1/pages/low/001.webp"
    assert kwargs["data"] == b"webp-bytes"
    assert kwargs["timeout"] == 12.5
    headers = kwargs["headers"]
    assert headers["Authorization"] == "Bearer service-key"
    assert headers["apikey"] == "service-key"
    assert headers["Content-Type"] == "image/webp"
    assert headers["x-upsert"] == "true"


def test_upload_without_upsert(storage):
    with patch(
        "conversion_service.infrastructure.storage.supabase_storage.requests.post",
        return_value=make_response(200, {}),
    ) as post:
        storage.upload("editions", "ed-1/manifest.json", b"{}", "application/json", upsert=False)

    assert post.call_args.kwargs["headers"]["x-upsert"] == "false"


def test_error_status_uses_service_message(storage):
    with patch(
        "conversion_service.infrastructure.storage.supabase_storage.requests.post",
        return_value=make_response(404, {"statusCode": "404", "error": "Bucket not found", "message": "Bucket not found"}),
    ):
        with pytest.raises(StorageBackendError) as exc_info:
            storage.upload("missing", "ed-1/pages/low/001.webp", b"x", "image/webp")

    assert str(exc_info.value) == "Bucket not found"
    assert exc_info.value.status_code == 404


def test_error_status_without_json_body(storage):
    with patch(
        "conversion_service.infrastructure.storage.supabase_storage.requests.post",
        return_value=make_response(502, text=""),
    ):
        with pytest.raises(StorageBackendError, match="HTTP 502"):
            storage.upload("editions", "a.webp", b"x", "image/webp")


def test_network_error_is_wrapped(storage):
    with patch(
        "conversion_service.infrastructure.storage.supabase_storage.requests.post",
        side_effect=requests.ConnectionError("connection refused"),
    ):
        with pytest.raises(StorageBackendError, match="connection refused"):
            storage.upload("editions", "a.webp", b"x", "image/webp")


def test_public_urls(storage):
    assert storage.public_base_url("editions") == f"{ENDPOINT}/storage/v1/object/public/editions"
    assert (
        storage.get_public_url("editions", "ed-1/pages/low/001.webp")
        == f"{ENDPOINT}/storage/v1/object/public/editions/ed-1/pages/low/001.webp"
    )


def test_public_url_quotes_unsafe_characters(storage):
    url = storage.get_public_url("editions", "ed 1/pages/low/001.webp")
    assert url.endswith("/editions/ed%201/pages/low/001.webp")
