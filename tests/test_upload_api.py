"""
Integration tests for POST /api/upload.

Bodies come from the client encoder and, as an independent encoder, from
httpx's own multipart support (TestClient files=/data=).
"""

import pytest
from fastapi.testclient import TestClient

from app.client.assets import Asset
from app.client.encoder import build_blob_request, build_image_request, encode_request
from app.main import app

UPLOAD_TIME = "2025-01-01T12:00:00.000Z"


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def _post(client: TestClient, request):
    encoded = encode_request(request)
    return client.post("/api/upload", content=encoded.body, headers={"Content-Type": encoded.content_type})


def test_upload_returns_file_metadata(client: TestClient) -> None:
    """POST with two image parts returns 200 and the exact UploadResult."""
    request = build_image_request(
        [Asset(content=b"12345", uri="photo.png"), Asset(content=b"xy", uri="dir/shot.jpeg")],
        upload_time=UPLOAD_TIME,
    )
    response = _post(client, request)
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Files uploaded successfully",
        "uploadTime": UPLOAD_TIME,
        "totalFiles": 2,
        "files": [
            {"name": "photo.png", "type": "image/png", "size": 5},
            {"name": "shot.jpeg", "type": "image/jpeg", "size": 2},
        ],
    }


def test_upload_blob_echoes_source(client: TestClient) -> None:
    response = _post(client, build_blob_request(native_binary=False, upload_time=UPLOAD_TIME))
    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "blob"
    assert data["files"][0]["name"] == "generated-file.txt"


def test_declared_total_wins(client: TestClient) -> None:
    """totalFiles='3' with two file parts echoes 3."""
    request = build_image_request([Asset(content=b"a"), Asset(content=b"b")], total_files=3)
    data = _post(client, request).json()
    assert data["totalFiles"] == 3
    assert len(data["files"]) == 2


def test_missing_or_non_numeric_total_uses_decoded_count(client: TestClient) -> None:
    files = {"file0": ("a.png", b"a", "image/png"), "file1": ("b.png", b"b", "image/png")}
    without_total = client.post("/api/upload", files=files)
    assert without_total.status_code == 200
    assert without_total.json()["totalFiles"] == 2
    assert "uploadTime" not in without_total.json()

    non_numeric = client.post("/api/upload", files=files, data={"totalFiles": "several"})
    assert non_numeric.json()["totalFiles"] == 2


def test_non_file_parts_are_not_listed(client: TestClient) -> None:
    response = client.post(
        "/api/upload",
        files={"avatar": ("me.png", b"x", "image/png"), "generatedFile": ("g.txt", b"hey", "text/plain")},
        data={"source": "web"},
    )
    data = response.json()
    assert data["files"] == [{"name": "g.txt", "type": "text/plain", "size": 3}]
    assert data["source"] == "web"


@pytest.mark.parametrize(
    "content_type, body",
    [
        ("multipart/form-data", b"--x\r\nContent-Disposition: form-data; name=\"a\"\r\n\r\n1\r\n--x--\r\n"),
        ("multipart/form-data; boundary=x", b"definitely not multipart"),
        ("multipart/form-data; boundary=x", b"--x\r\nContent-Disposition: form-data; name=\"file0\"; filename=\"a\"\r\n\r\nabc"),
        ("application/json", b"{}"),
    ],
    ids=["missing-boundary", "garbage", "truncated", "not-multipart"],
)
def test_malformed_body_returns_500(client: TestClient, content_type: str, body: bytes) -> None:
    """Decode failures return 500, success=false, an error string, and no files."""
    response = client.post("/api/upload", content=body, headers={"Content-Type": content_type})
    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert data["message"] == "Upload failed"
    assert data["error"]
    assert "files" not in data
    assert "totalFiles" not in data


def test_decoding_same_body_twice_is_byte_identical(client: TestClient) -> None:
    encoded = encode_request(build_image_request([Asset(content=b"abc", uri="p.gif")], upload_time=UPLOAD_TIME))
    headers = {"Content-Type": encoded.content_type}
    first = client.post("/api/upload", content=encoded.body, headers=headers)
    second = client.post("/api/upload", content=encoded.body, headers=headers)
    assert first.content == second.content


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}
