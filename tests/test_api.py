"""End-to-end tests for ``GET /api/level``.

The FastAPI ``TestClient`` drives the app from ``main.py`` against a
temporary asset directory built by the ``asset_dir`` fixture, so no test
touches the network or the bundled assets.
"""

import base64
import io
import os

import pytest
from fastapi.testclient import TestClient
from PIL import Image  # type: ignore

from library.level import CANVAS_HEIGHT, CANVAS_WIDTH, icon_rect, logo_rect
from tests.conftest import BLUE, GREEN, RED


@pytest.fixture
def client(asset_dir):
    from main import app

    return TestClient(app)


def _close(pixel, expected, tol=2):
    return all(abs(a - b) <= tol for a, b in zip(pixel, expected))


def _centre(rect):
    return (rect.x + rect.width // 2, rect.y + rect.height // 2)


def test_renders_level_thumbnail(client, background_path):
    resp = client.get("/api/level", params={"thumbnail": str(background_path), "difficulty": "3"})
    assert resp.status_code == 200, resp.text
    assert resp.headers["content-type"] == "image/png"
    img = Image.open(io.BytesIO(resp.content))
    assert img.format == "PNG"
    assert img.size == (CANVAS_WIDTH, CANVAS_HEIGHT)
    img = img.convert("RGBA")
    assert _close(img.getpixel((CANVAS_WIDTH // 2, CANVAS_HEIGHT // 2)), GREEN)
    assert _close(img.getpixel(_centre(icon_rect())), RED)
    assert _close(img.getpixel(_centre(logo_rect())), BLUE)
    # just outside the icon and the logo the background shows through
    assert _close(img.getpixel((10, CANVAS_HEIGHT - 10)), GREEN)
    assert _close(img.getpixel((CANVAS_WIDTH - 10, 10)), GREEN)


def test_small_icon_is_scaled_to_badge_size(client, background_path):
    resp = client.get("/api/level", params={"thumbnail": str(background_path), "difficulty": "1.0"})
    assert resp.status_code == 200, resp.text
    img = Image.open(io.BytesIO(resp.content)).convert("RGBA")
    rect = icon_rect()
    assert _close(img.getpixel((rect.x + 5, rect.y + 5)), RED)
    assert _close(img.getpixel((rect.x + rect.width - 5, rect.y + rect.height - 5)), RED)


def test_background_from_data_url(client):
    buf = io.BytesIO()
    Image.new("RGB", (800, 1600), (0, 255, 0)).save(buf, format="PNG")
    data_url = "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode()
    resp = client.get("/api/level", params={"thumbnail": data_url, "difficulty": 3})
    assert resp.status_code == 200, resp.text


def test_unknown_difficulty_is_400(client, background_path):
    resp = client.get("/api/level", params={"thumbnail": str(background_path), "difficulty": "999"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Unknown difficulty"}


def test_missing_thumbnail_is_500(client):
    resp = client.get("/api/level", params={"difficulty": "3"})
    assert resp.status_code == 500
    payload = resp.json()
    assert payload["name"] == "ValidationError"
    assert [e["loc"] for e in payload["errors"]] == [["thumbnail"]]
    assert payload["errors"][0]["type"] == "missing"


def test_non_numeric_difficulty_is_500(client, background_path):
    resp = client.get("/api/level", params={"thumbnail": str(background_path), "difficulty": "hard"})
    assert resp.status_code == 500
    payload = resp.json()
    assert payload["name"] == "ValidationError"
    assert payload["errors"][0]["loc"] == ["difficulty"]


def test_missing_both_parameters_is_500(client):
    resp = client.get("/api/level")
    assert resp.status_code == 500
    locs = sorted(e["loc"][0] for e in resp.json()["errors"])
    assert locs == ["difficulty", "thumbnail"]


def test_unloadable_background_is_500(client, tmp_path):
    resp = client.get("/api/level", params={"thumbnail": str(tmp_path / "gone.png"), "difficulty": "3"})
    assert resp.status_code == 500
    payload = resp.json()
    assert payload["name"] == "ImageLoadError"
    assert "gone.png" in payload["message"]


def test_missing_logo_is_500(client, asset_dir, background_path):
    os.remove(asset_dir / "icon.png")
    resp = client.get("/api/level", params={"thumbnail": str(background_path), "difficulty": "3"})
    assert resp.status_code == 500
    assert resp.json()["name"] == "FileNotFoundError"


def test_unencodable_canvas_is_500(client, background_path, monkeypatch):
    def failing_save(self, fp, format=None, **params):
        raise OSError("disk full")

    monkeypatch.setattr(Image.Image, "save", failing_save)
    resp = client.get("/api/level", params={"thumbnail": str(background_path), "difficulty": "3"})
    assert resp.status_code == 500
    payload = resp.json()
    assert payload["name"] == "EncodingError"
    assert "disk full" in payload["message"]


def test_infinite_difficulty_is_unknown(client, background_path):
    resp = client.get("/api/level", params={"thumbnail": str(background_path), "difficulty": "inf"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Unknown difficulty"}


def test_nan_difficulty_is_500(client, background_path):
    resp = client.get("/api/level", params={"thumbnail": str(background_path), "difficulty": "nan"})
    assert resp.status_code == 500
    payload = resp.json()
    assert payload["name"] == "ValidationError"
    assert payload["errors"][0]["loc"] == ["difficulty"]


def test_cors_allows_any_origin(client, background_path):
    resp = client.get(
        "/api/level",
        params={"thumbnail": str(background_path), "difficulty": "3"},
        headers={"Origin": "https://levels.example.com"},
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"
