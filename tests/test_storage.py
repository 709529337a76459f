from pathlib import Path
from urllib.parse import urlparse

from taskflow.core.config import settings

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def test_upload_avatar_returns_public_url(client, auth_headers):
    me = client.get("/api/v1/auth/me", headers=auth_headers).json()

    response = client.post(
        "/api/v1/storage/avatar",
        files={"file": ("me.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    body = response.json()

    assert body["path"].startswith(f"avatars/{me['id']}-")
    assert body["path"].endswith(".png")
    assert body["public_url"] == f"http://testserver/storage/v1/object/public/profile-images/{body['path']}"
    assert (Path(settings.STORAGE_DIR) / "profile-images" / body["path"]).read_bytes() == PNG_BYTES

    served = client.get(urlparse(body["public_url"]).path)
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_rejects_non_image(client, auth_headers):
    response = client.post(
        "/api/v1/storage/avatar",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_rejects_oversized_file(client, auth_headers, monkeypatch):
    monkeypatch.setattr(settings, "MAX_AVATAR_BYTES", 16)
    response = client.post(
        "/api/v1/storage/avatar",
        files={"file": ("big.png", PNG_BYTES, "image/png")},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "File size must be less than 5MB."


def test_requires_authentication(client):
    response = client.post("/api/v1/storage/avatar", files={"file": ("me.png", PNG_BYTES, "image/png")})
    assert response.status_code == 401


def test_extension_follows_content_type_not_filename(client, auth_headers):
    response = client.post(
        "/api/v1/storage/avatar",
        files={"file": ("x.html", b"<script>alert(1)</script>", "image/png")},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    body = response.json()
    assert body["path"].endswith(".png")

    served = client.get(urlparse(body["public_url"]).path)
    assert served.headers["content-type"] == "image/png"
