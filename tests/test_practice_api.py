"""Practice settings and logo storage."""

import io
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from bson import ObjectId
from PIL import Image

from wellness.features.files.service import FileService, normalise_image
from wellness.features.auth.models import UserRole
from wellness.features.practice.service import DEFAULT_PRACTICE, PracticeService
from wellness.shared.exceptions import BadRequestException

from tests.conftest import API


def png_bytes(size=(64, 32), mode="RGBA"):
    output = io.BytesIO()
    Image.new(mode, size, (10, 20, 30, 128) if mode == "RGBA" else (10, 20, 30)).save(output, format="PNG")
    return output.getvalue()


def stored_practice(**overrides):
    now = datetime(2025, 1, 1)
    practice = SimpleNamespace(id=ObjectId(), created_at=now, updated_at=now, tax_id=None, npi=None, logo_url=None,
                               save=AsyncMock(), **DEFAULT_PRACTICE)
    practice.update_timestamp = lambda: None
    for key, value in overrides.items():
        setattr(practice, key, value)
    return practice


@pytest.fixture
def practice():
    practice = stored_practice()
    with patch.object(PracticeService, "get_practice", AsyncMock(return_value=practice)):
        yield practice


@pytest.fixture
def bucket():
    """GCS client double; returns the bucket every blob call goes through."""
    client = MagicMock()
    with patch.object(FileService, "get_client", return_value=client):
        yield client.bucket.return_value


# ============== Settings ==============

def test_any_signed_in_user_can_read_settings(client, staff, practice):
    response = client.get(f"{API}/practice")

    assert response.status_code == 200
    assert response.json()["value"]["name"] == "Healthcare Wellness Center"


def test_staff_cannot_update_settings(client, staff):
    with patch.object(PracticeService, "update_practice", AsyncMock()) as update_practice:
        response = client.put(f"{API}/practice", json={"name": "X"})

    assert response.status_code == 403
    update_practice.assert_not_called()


def test_update_requires_every_contact_field(client, provider, practice):
    response = client.put(f"{API}/practice", json={"name": "New Name"})

    assert response.status_code == 400
    practice.save.assert_not_awaited()


def test_provider_updates_settings(client, provider, practice):
    payload = {**DEFAULT_PRACTICE, "name": "Riverside Wellness", "npi": "1234567890"}

    response = client.put(f"{API}/practice", json=payload)

    assert response.status_code == 200
    assert response.json()["value"]["name"] == "Riverside Wellness"
    assert practice.npi == "1234567890"
    practice.save.assert_awaited_once()


# ============== Logo ==============

@pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.PROVIDER])
def test_logo_upload_stores_signed_url_and_drops_old_logo(client, login_as, role, bucket):
    login_as(role)
    old_url = "https://storage.googleapis.com/bucket/practice-logos/old.jpg?X-Goog-Signature=abc"
    new_url = "https://storage.googleapis.com/bucket/practice-logos/new.jpg?X-Goog-Signature=def"
    bucket.blob.return_value.generate_signed_url.return_value = new_url
    practice = stored_practice(logo_url=old_url)

    with patch.object(PracticeService, "get_practice", AsyncMock(return_value=practice)):
        response = client.post(f"{API}/practice/logo", files={"file": ("logo.png", png_bytes(), "image/png")})

    assert response.status_code == 200
    assert response.json()["value"] == {"logo_url": new_url}
    assert practice.logo_url == new_url
    bucket.blob.assert_any_call("practice-logos/old.jpg")
    bucket.blob.return_value.delete.assert_called_once()
    uploaded = bucket.blob.return_value.upload_from_string.call_args
    assert uploaded.kwargs["content_type"] == "image/jpeg"


def test_staff_cannot_upload_logo(client, staff):
    response = client.post(f"{API}/practice/logo", files={"file": ("logo.png", png_bytes(), "image/png")})
    assert response.status_code == 403


@pytest.mark.parametrize("filename,content,content_type,message", [
    ("logo.gif", b"GIF89a", "image/gif", "Invalid file type"),
    ("logo.png", b"\x89PNG" + b"0" * (2 * 1024 * 1024), "image/png", "2MB"),
    ("logo.png", b"not really a png", "image/png", "Invalid image file"),
])
def test_logo_upload_rejects_bad_files(client, admin, practice, bucket, filename, content, content_type, message):
    response = client.post(f"{API}/practice/logo", files={"file": (filename, content, content_type)})

    assert response.status_code == 400
    assert message in response.json()["error"]["message"]
    bucket.blob.assert_not_called()
    practice.save.assert_not_awaited()


def test_delete_logo_without_logo_is_not_found(client, admin, practice):
    response = client.delete(f"{API}/practice/logo")

    assert response.status_code == 404
    assert response.json()["error"]["message"] == "No logo found"


def test_delete_logo_clears_url(client, provider, bucket):
    practice = stored_practice(logo_url="https://storage.googleapis.com/bucket/practice-logos/a.jpg")
    with patch.object(PracticeService, "get_practice", AsyncMock(return_value=practice)):
        response = client.delete(f"{API}/practice/logo")

    assert response.status_code == 200
    assert practice.logo_url is None
    bucket.blob.assert_called_once_with("practice-logos/a.jpg")


# ============== Storage helpers ==============

@pytest.mark.parametrize("url,path", [
    ("https://storage.googleapis.com/bucket/practice-logos/a.jpg", "practice-logos/a.jpg"),
    ("https://storage.googleapis.com/bucket/practice-logos/a.jpg?X-Goog-Expires=604800", "practice-logos/a.jpg"),
    ("https://storage.googleapis.com/bucket", None),
    ("https://cdn.example.com/logo.jpg", None),
    ("", None),
    (None, None),
])
def test_extract_blob_path_from_url(url, path):
    assert FileService.extract_blob_path_from_url(url) == path


def test_images_are_flattened_and_shrunk_to_jpeg():
    result = Image.open(io.BytesIO(normalise_image(png_bytes(size=(2048, 1024)), max_size=512)))

    assert result.format == "JPEG"
    assert result.mode == "RGB"
    assert result.size == (512, 256)


def test_small_images_keep_their_size():
    result = Image.open(io.BytesIO(normalise_image(png_bytes(size=(100, 50), mode="RGB"), max_size=512)))
    assert result.size == (100, 50)


def test_unreadable_image_is_rejected():
    with pytest.raises(BadRequestException):
        normalise_image(b"definitely not an image", max_size=512)
