"""Client for the external screenshot service."""

from dataclasses import dataclass
from typing import Optional

import httpx
import structlog

from notecard.exceptions import ScreenshotFailure

logger = structlog.get_logger()


@dataclass(frozen=True)
class ScreenshotResult:
    """Outcome of a screenshot request."""
    ok: bool
    image_ref: Optional[str] = None
    error: Optional[str] = None


class ScreenshotClient:
    """
    Requests page thumbnails from the screenshot service.

    The service renders the page and answers
    `{"success": bool, "screenshotPath": str?, "error": str?}`.
    Failures are reported in the result, never raised.
    """

    def __init__(
        self,
        service_url: Optional[str],
        timeout: float = 45.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.service_url = service_url
        self.timeout = timeout
        self.transport = transport

    async def _request(self, url: str) -> str:
        if not self.service_url:
            raise ScreenshotFailure("Screenshot service not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.service_url, json={"url": url})
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise ScreenshotFailure(f"Screenshot service timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise ScreenshotFailure(f"Screenshot service returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ScreenshotFailure(f"Screenshot service request failed: {e}") from e
        except ValueError as e:
            raise ScreenshotFailure("Screenshot service returned invalid JSON") from e

        if not isinstance(data, dict):
            raise ScreenshotFailure("Screenshot service returned an unexpected response")

        if not data.get("success"):
            raise ScreenshotFailure(data.get("error") or "Screenshot generation failed")

        image_ref = data.get("screenshotPath")
        if not image_ref or not isinstance(image_ref, str):
            raise ScreenshotFailure("Screenshot service returned no image")

        return image_ref

    async def generate_screenshot(self, url: str) -> ScreenshotResult:
        """
        Generate a thumbnail for a page.

        Args:
            url: Page to render

        Returns:
            ScreenshotResult with image_ref on success, error otherwise
        """
        logger.info("screenshot_requested", url=url)

        try:
            image_ref = await self._request(url)
        except ScreenshotFailure as e:
            logger.warning("screenshot_failed", url=url, error=str(e))
            return ScreenshotResult(ok=False, error=str(e))

        logger.info("screenshot_generated", url=url, image_ref=image_ref)
        return ScreenshotResult(ok=True, image_ref=image_ref)
