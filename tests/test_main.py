"""Endpoint tests for the application."""
import io
import json
import subprocess
import sys
from pathlib import Path

import pytest
import requests
from unittest.mock import AsyncMock, MagicMock, patch
from fastapi.testclient import TestClient
from PIL import Image

from app.main import app
from app.core.config import settings
from app.core.dependencies import get_remake_sessions, get_style_analyzer, get_thumbnail_downloader

VIDEO_ID = "dQw4w9WgXcQ"


def jpeg_bytes(size=(480, 360), color=(30, 120, 200)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def client():
    """Test client fixture."""
    return TestClient(app)


@pytest.fixture
def offline_downloader():
    """Shared downloader with network access replaced."""
    downloader = get_thumbnail_downloader()
    hq_url = f"https://img.youtube.com/vi/{VIDEO_ID}/hqdefault.jpg"
    with patch.object(downloader, "fetch_bytes", AsyncMock(return_value=(jpeg_bytes(), "image/jpeg"))), \
         patch.object(downloader, "resolve_display_url", AsyncMock(return_value=hq_url)):
        yield downloader


@pytest.fixture
def unconfigured_analyzer():
    """Shared analyzer without a vision client."""
    analyzer = get_style_analyzer()
    with patch.object(analyzer, "client", None):
        yield analyzer


def test_root_endpoint(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "YouTube Thumbnail Studio is running"

def test_health_endpoint(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["dependencies"]["openai"] in ("healthy", "not_configured", "disabled")
    assert "uptime_seconds" in data["metrics"]

def test_supported_formats_endpoint(client):
    """Test supported formats endpoint."""
    response = client.get("/supported-formats", headers={"Accept-Language": "en"})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert [f["name"] for f in data["data"]["url_formats"]] == ["watch", "embed", "v", "short_link", "shorts"]
    assert data["data"]["quality_tiers"][0]["label"] == "Maximum quality"
    assert data["data"]["limitations"]["canvas_width"] == 1280


class TestExtractEndpoint:
    """Test identifier extraction."""

    def test_short_link(self, client):
        response = client.post("/extract", json={"url": f"https://youtu.be/{VIDEO_ID}"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"]["video_id"] == VIDEO_ID

        thumbnails = data["data"]["thumbnails"]
        assert [t["tier"] for t in thumbnails] == ["maxres", "sd", "hq", "mq"]
        assert thumbnails[0]["url"] == f"https://img.youtube.com/vi/{VIDEO_ID}/maxresdefault.jpg"
        assert "request_id" in data["metadata"]

    def test_invalid_url(self, client):
        response = client.post("/extract", json={"url": "not a url"}, headers={"Accept-Language": "en"})

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == "INVALID_URL_FORMAT"
        assert data["error"]["message"] == "This is not a valid YouTube URL format. Please check it again."

    def test_empty_url(self, client):
        response = client.post("/extract", json={"url": "   "}, headers={"Accept-Language": "ko-KR,ko;q=0.9"})

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "MISSING_INPUT"
        assert data["error"]["message"] == "유튜브 영상 URL을 입력해주세요."

    def test_missing_url_field(self, client):
        response = client.post("/extract", json={})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "MISSING_INPUT"

    def test_language_field_overrides_header(self, client):
        response = client.post(
            "/extract",
            json={"url": f"https://www.youtube.com/shorts/{VIDEO_ID}", "language": "en"},
            headers={"Accept-Language": "ko"}
        )

        assert response.json()["data"]["thumbnails"][0]["label"] == "Maximum quality"


class TestThumbnailEndpoints:
    """Test download and display endpoints."""

    def test_download_attachment(self, client):
        mock_response = MagicMock()
        mock_response.content = b"\xff\xd8jpeg"
        mock_response.headers = {"content-type": "image/jpeg"}
        mock_response.__enter__.return_value = mock_response

        with patch("app.services.thumbnail_downloader.requests.get", return_value=mock_response):
            response = client.get(f"/thumbnails/{VIDEO_ID}/hq/download")

        assert response.status_code == 200
        assert response.content == b"\xff\xd8jpeg"
        assert response.headers["content-disposition"] == f'attachment; filename="youtube_thumbnail_{VIDEO_ID}_hq.jpg"'

    def test_download_fallback_redirect(self, client):
        with patch(
            "app.services.thumbnail_downloader.requests.get",
            side_effect=requests.ConnectionError("blocked")
        ):
            response = client.get(f"/thumbnails/{VIDEO_ID}/maxres/download", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == f"https://img.youtube.com/vi/{VIDEO_ID}/maxresdefault.jpg"

    def test_display_falls_back_to_hq(self, client):
        probe = MagicMock(ok=False)
        probe.__enter__.return_value = probe

        with patch("app.services.thumbnail_downloader.requests.head", return_value=probe):
            response = client.get(f"/thumbnails/{VIDEO_ID}/maxres/display", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == f"https://img.youtube.com/vi/{VIDEO_ID}/hqdefault.jpg"

    def test_invalid_identifier(self, client):
        response = client.get("/thumbnails/short/hq/download")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_URL_FORMAT"

    def test_unknown_tier(self, client):
        response = client.get(f"/thumbnails/{VIDEO_ID}/ultra/download")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestAnalyzeThumbnailEndpoint:
    """Test the style analysis endpoint."""

    def test_missing_thumbnail_url(self, client):
        response = client.post("/analyze-thumbnail", json={}, headers={"Accept-Language": "en"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "A thumbnail URL is required."}

    def test_default_style_without_key(self, client, unconfigured_analyzer):
        response = client.post("/analyze-thumbnail", json={
            "thumbnailUrl": f"https://img.youtube.com/vi/{VIDEO_ID}/maxresdefault.jpg",
            "schema_version": "percent"
        })

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "schema_version": "percent",
            "text_color": "#FFFFFF",
            "stroke_color": "#000000",
            "x_percent": 50.0,
            "y_percent": 85.0,
            "font_size_percent": 12.0,
            "font_weight": "bold",
            "alignment": "center"
        }

    def test_zone_schema_default(self, client, unconfigured_analyzer):
        response = client.post("/analyze-thumbnail", json={
            "thumbnailUrl": "https://example.com/thumb.jpg",
            "schema_version": "zone"
        })

        data = response.json()
        assert data["schema_version"] == "zone"
        assert data["text_position"] == "bottom-center"


class TestRemakeEndpoint:
    """Test thumbnail generation."""

    def test_failed_analysis_still_renders(self, client, offline_downloader):
        """A failed style analysis yields the default style and a full-size PNG."""
        response = client.post("/remake", data={
            "video_id": VIDEO_ID,
            "caption": "My thumbnail title",
            "style": json.dumps({"success": False})
        })

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["content-disposition"] == f'attachment; filename="custom_thumbnail_{VIDEO_ID}.png"'

        image = Image.open(io.BytesIO(response.content))
        assert image.size == (1280, 720)

    def test_with_user_image_and_analysis(self, client, offline_downloader, unconfigured_analyzer):
        user_image = io.BytesIO()
        Image.new("RGBA", (400, 800), (255, 255, 0, 255)).save(user_image, format="PNG")

        response = client.post(
            "/remake",
            data={"video_id": VIDEO_ID, "caption": "Hello"},
            files={"user_image": ("me.png", user_image.getvalue(), "image/png")}
        )

        assert response.status_code == 200
        offline_downloader.resolve_display_url.assert_awaited()

    def test_last_remake_download(self, client, offline_downloader):
        video_id = "abcdefghijk"
        assert client.get(f"/remake/{video_id}").status_code == 404

        client.post("/remake", data={"video_id": video_id, "caption": "Again", "style": "{}"})
        response = client.get(f"/remake/{video_id}")

        assert response.status_code == 200
        assert Image.open(io.BytesIO(response.content)).size == (1280, 720)

    def test_broken_user_image(self, client, offline_downloader):
        response = client.post(
            "/remake",
            data={"video_id": VIDEO_ID, "caption": "Hello", "style": "{}"},
            files={"user_image": ("me.png", b"not an image", "image/png")}
        )

        assert response.status_code == 422
        data = response.json()
        assert data["error"]["code"] == "GENERATION_FAILED"
        assert data["error"]["details"]["step"] == "load_user_image"

    def test_upload_too_large(self, client, offline_downloader):
        with patch.object(settings, "max_upload_bytes", 10):
            response = client.post(
                "/remake",
                data={"video_id": VIDEO_ID, "style": "{}"},
                files={"user_image": ("me.png", b"x" * 100, "image/png")},
                headers={"Accept-Language": "en"}
            )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "The uploaded image is too large."

    def test_invalid_video_id(self, client):
        response = client.post("/remake", data={"video_id": "bad id", "style": "{}"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_URL_FORMAT"

    def test_missing_video_id(self, client):
        response = client.post("/remake", data={"caption": "Hello"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_oldest_remake_evicted(self, client, offline_downloader):
        """Only the most recent generations are kept in memory."""
        sessions = get_remake_sessions()
        sessions.clear()

        with patch.object(sessions, "max_items", 1):
            client.post("/remake", data={"video_id": "AAAAAAAAAAA", "caption": "One", "style": "{}"})
            client.post("/remake", data={"video_id": "BBBBBBBBBBB", "caption": "Two", "style": "{}"})

            assert client.get("/remake/AAAAAAAAAAA").status_code == 404
            assert client.get("/remake/BBBBBBBBBBB").status_code == 200


def test_app_imports_in_fresh_interpreter():
    """The application module imports without any other module loaded first."""
    result = subprocess.run(
        [sys.executable, "-c", "import app.main"],
        cwd=Path(__file__).resolve().parent.parent,
        capture_output=True,
        text=True
    )

    assert result.returncode == 0, result.stderr
