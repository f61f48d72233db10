"""
Unit tests for the screenshot service client.
Uses httpx.MockTransport in place of the real service.
"""

import json

import httpx
import pytest

from notecard.screenshot import ScreenshotClient, ScreenshotResult

SERVICE_URL = "http://screenshots.internal/generate-screenshot"
PAGE_URL = "https://blog.example.com/post"


def client_with(handler) -> ScreenshotClient:
    return ScreenshotClient(SERVICE_URL, timeout=45.0, transport=httpx.MockTransport(handler))


class TestScreenshotClient:
    """Test cases for ScreenshotClient."""

    @pytest.mark.asyncio
    async def test_success(self):
        seen = {}

        def handler(request):
            seen['body'] = json.loads(request.content)
            seen['method'] = request.method
            return httpx.Response(200, json={
                "success": True,
                "screenshotPath": "https://bucket.s3.amazonaws.com/screenshots/a.png",
            })

        result = await client_with(handler).generate_screenshot(PAGE_URL)

        assert result == ScreenshotResult(ok=True, image_ref="https://bucket.s3.amazonaws.com/screenshots/a.png")
        assert seen == {'body': {"url": PAGE_URL}, 'method': "POST"}

    @pytest.mark.asyncio
    async def test_not_configured(self):
        result = await ScreenshotClient(None).generate_screenshot(PAGE_URL)

        assert not result.ok
        assert "not configured" in result.error

    @pytest.mark.asyncio
    async def test_server_error(self):
        result = await client_with(lambda request: httpx.Response(500)).generate_screenshot(PAGE_URL)

        assert not result.ok
        assert "HTTP 500" in result.error

    @pytest.mark.asyncio
    async def test_service_reports_failure(self):
        def handler(request):
            return httpx.Response(200, json={"success": False, "error": "S3 bucket name not configured"})

        result = await client_with(handler).generate_screenshot(PAGE_URL)

        assert result == ScreenshotResult(ok=False, error="S3 bucket name not configured")

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        result = await client_with(handler).generate_screenshot(PAGE_URL)

        assert not result.ok
        assert "timed out" in result.error

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = await client_with(handler).generate_screenshot(PAGE_URL)

        assert not result.ok
        assert "request failed" in result.error

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        httpx.Response(200, text="<html>oops</html>"),
        httpx.Response(200, json=["unexpected"]),
        httpx.Response(200, json={"success": True}),
    ])
    async def test_malformed_response(self, response):
        result = await client_with(lambda request: response).generate_screenshot(PAGE_URL)

        assert not result.ok
        assert result.image_ref is None
