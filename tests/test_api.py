"""
API contract tests for the FastAPI service.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from notecard.config import Settings
from notecard.extractor import MetadataExtractor, get_metadata_extractor
from notecard.main import MetadataRequest, app
from notecard.models.metadata import (
    ContentType,
    ExtractionRequest,
    ExtractionResult,
    ExtractionStatus,
    NormalizedMetadata,
)

METADATA = NormalizedMetadata(
    type=ContentType.MUSIC,
    title="Flickermood",
    author="Forss",
    thumbnail_url="https://i.scdn.co/image/cover",
    duration="3:33",
    extra_metadata={"platform": "spotify"},
)


@pytest.fixture
def extractor():
    mock = MagicMock()
    mock.extract = AsyncMock(return_value=ExtractionResult(
        status=ExtractionStatus.SUCCESS,
        metadata=METADATA,
    ))
    return mock


@pytest.fixture
def client(extractor):
    app.dependency_overrides[get_metadata_extractor] = lambda: extractor
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestExtractMetadataEndpoint:
    """Test cases for POST /extract-metadata."""

    def test_success(self, client, extractor):
        response = client.post("/extract-metadata", json={"url": "https://open.spotify.com/track/abc"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] == {
            "type": "music",
            "title": "Flickermood",
            "author": "Forss",
            "thumbnailUrl": "https://i.scdn.co/image/cover",
            "duration": "3:33",
            "description": None,
            "metadata": {"platform": "spotify"},
        }
        extractor.extract.assert_awaited_once_with(
            ExtractionRequest(url="https://open.spotify.com/track/abc", want_screenshot=False)
        )

    def test_generate_screenshot_flag(self, client, extractor):
        client.post("/extract-metadata", json={
            "url": "https://blog.example.com/post",
            "generateScreenshot": True,
        })

        request = extractor.extract.call_args.args[0]
        assert request.want_screenshot is True

    @pytest.mark.parametrize("payload", [{}, {"url": ""}, {"url": 42}, {"url": None}])
    def test_url_required(self, client, extractor, payload):
        response = client.post("/extract-metadata", json=payload)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "URL is required"}
        extractor.extract.assert_not_called()

    def test_non_boolean_screenshot_flag(self, client, extractor):
        response = client.post("/extract-metadata", json={
            "url": "https://example.com",
            "generateScreenshot": "maybe",
        })

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "generateScreenshot" in body["error"]
        assert "detail" not in body
        extractor.extract.assert_not_called()

    def test_body_not_json(self, client, extractor):
        response = client.post(
            "/extract-metadata",
            content="not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid request body"}
        extractor.extract.assert_not_called()

    def test_request_model_accepts_field_names(self):
        request = MetadataRequest(url="https://example.com", generate_screenshot=True)

        assert request.generate_screenshot is True

    def test_invalid_url(self, client, extractor):
        extractor.extract.return_value = ExtractionResult(
            status=ExtractionStatus.INVALID_URL,
            error_message="Invalid URL format",
        )

        response = client.post("/extract-metadata", json={"url": "not a url"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid URL format"}

    def test_invalid_url_rejected_before_fetch(self, fetcher):
        app.dependency_overrides[get_metadata_extractor] = lambda: MetadataExtractor(
            settings=Settings(), fetcher=fetcher
        )
        try:
            response = TestClient(app).post("/extract-metadata", json={"url": "htp:/broken"})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid URL format"
        fetcher.fetch_text.assert_not_called()
        fetcher.fetch_json.assert_not_called()

    def test_extraction_failure(self, client, extractor):
        extractor.extract.return_value = ExtractionResult(
            status=ExtractionStatus.FAILED,
            error_message="Failed to extract video metadata: HTTP 500 fetching https://youtu.be/x",
        )

        response = client.post("/extract-metadata", json={"url": "https://youtu.be/x"})

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert "data" not in body
        assert body["error"].startswith("Failed to extract video metadata")


class TestHealthEndpoint:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
