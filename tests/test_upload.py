import pytest

from app.config import settings
from app.services.storage_service import storage_service


@pytest.fixture
def bucket(monkeypatch):
    monkeypatch.setattr(settings, "S3_BUCKET_NAME", "oms-uploads")
    monkeypatch.setattr(settings, "AWS_REGION", "us-east-1")
    return "oms-uploads"


@pytest.fixture
def stored(monkeypatch):
    calls = []

    async def fake_upload(key, content, content_type=None):
        calls.append((key, content, content_type))
        return storage_service.public_url(key)

    monkeypatch.setattr(storage_service, "upload_bytes", fake_upload)
    return calls


def test_public_url_format(bucket):
    assert storage_service.public_url("logos/org_1") == \
        "https://oms-uploads.s3.us-east-1.amazonaws.com/logos/org_1"


def test_upload_returns_url(client, login, bucket, stored):
    login("officer_1")
    r = client.post(
        "/api/upload",
        files={"file": ("poster.png", b"png-bytes", "image/png")},
        data={"key": "events/1700000000000-poster.png", "bucket": bucket},
    )
    assert r.status_code == 200
    assert r.json() == {
        "url": "https://oms-uploads.s3.us-east-1.amazonaws.com/events/1700000000000-poster.png"}
    assert stored == [("events/1700000000000-poster.png", b"png-bytes", "image/png")]


def test_missing_key(client, login, bucket, stored):
    login("officer_1")
    r = client.post("/api/upload", files={"file": ("a.png", b"x", "image/png")})
    assert r.status_code == 400
    assert r.json() == {"message": "Missing file or key"}
    assert stored == []


def test_missing_file(client, login, bucket, stored):
    login("officer_1")
    r = client.post("/api/upload", data={"key": "events/a.png"})
    assert r.status_code == 400
    assert "message" in r.json()


def test_foreign_bucket(client, login, bucket, stored):
    login("officer_1")
    r = client.post(
        "/api/upload",
        files={"file": ("a.png", b"x", "image/png")},
        data={"key": "events/a.png", "bucket": "someone-elses-bucket"},
    )
    assert r.status_code == 400
    assert stored == []


def test_too_large(client, login, bucket, stored, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE_MB", 0)
    login("officer_1")
    r = client.post(
        "/api/upload",
        files={"file": ("a.png", b"x", "image/png")},
        data={"key": "events/a.png"},
    )
    assert r.status_code == 413
    assert stored == []


def test_storage_failure_returns_message(client, login, bucket, monkeypatch):
    async def broken_upload(key, content, content_type=None):
        raise RuntimeError("S3 unavailable")

    monkeypatch.setattr(storage_service, "upload_bytes", broken_upload)
    login("officer_1")
    r = client.post(
        "/api/upload",
        files={"file": ("a.png", b"x", "image/png")},
        data={"key": "events/a.png"},
    )
    assert r.status_code == 500
    assert r.json() == {"message": "Upload failed"}


def test_upload_requires_login(client, bucket, stored):
    r = client.post(
        "/api/upload",
        files={"file": ("a.png", b"x", "image/png")},
        data={"key": "events/a.png"},
    )
    assert r.status_code in (401, 403)


def test_upload_keeps_organization_logo_key(client, login, bucket, stored):
    login("officer_1")
    r = client.post(
        "/api/upload",
        files={"file": ("logo.png", b"logo", "image/png")},
        data={"key": "organization-logos/1700000000000-logo.png"},
    )
    assert r.status_code == 200
    assert r.json()["url"].endswith("/organization-logos/1700000000000-logo.png")
    assert stored[0][0] == "organization-logos/1700000000000-logo.png"
