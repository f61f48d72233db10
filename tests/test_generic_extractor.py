"""
Unit tests for the generic extractor.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from notecard.extractors.generic import GenericExtractor, content_type_for
from notecard.models.metadata import ContentType
from notecard.screenshot import ScreenshotClient, ScreenshotResult

from helpers import html_page, meta

ARTICLE_URL = "https://blog.example.com/post"
BARE_PAGE = html_page("<title>Plain article</title>")


@pytest.fixture
def screenshot_client():
    client = MagicMock(spec=ScreenshotClient)
    client.generate_screenshot = AsyncMock(
        return_value=ScreenshotResult(ok=True, image_ref="https://cdn.example.com/shot.png")
    )
    return client


class TestContentType:

    def test_article_and_audio(self):
        assert content_type_for(ARTICLE_URL) == ContentType.ARTICLE
        assert content_type_for("https://soundcloud.com/forss/flickermood") == ContentType.AUDIO_STREAM
        assert content_type_for("https://m.soundcloud.com/forss") == ContentType.AUDIO_STREAM


class TestGenericExtractor:
    """Test cases for GenericExtractor."""

    @pytest.mark.asyncio
    async def test_open_graph(self, fetcher):
        fetcher.fetch_text.return_value = html_page(
            meta("property", "og:title", "An article")
            + meta("property", "article:author", "Jane Doe")
            + meta("property", "og:image", "https://example.com/og.png")
            + meta("name", "description", "Short summary")
        )
        extractor = GenericExtractor(fetcher)

        raw = await extractor.extract(ARTICLE_URL)

        assert raw.type == "article"
        assert raw.title == "An article"
        assert raw.author == "Jane Doe"
        assert raw.thumbnail_url == "https://example.com/og.png"
        assert raw.description == "Short summary"
        assert raw.extra == {'has_original_thumbnail': True, 'thumbnail_source': 'page'}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tag, expected", [
        (meta("name", "twitter:image", "https://img/tw-name.png"), "https://img/tw-name.png"),
        (meta("property", "twitter:image", "https://img/tw-prop.png"), "https://img/tw-prop.png"),
        (meta("name", "image", "https://img/image.png"), "https://img/image.png"),
        ('<link rel="image_src" href="https://img/src.png">', "https://img/src.png"),
    ])
    async def test_thumbnail_chain(self, fetcher, tag, expected):
        fetcher.fetch_text.return_value = html_page(tag)
        extractor = GenericExtractor(fetcher)

        raw = await extractor.extract(ARTICLE_URL)

        assert raw.thumbnail_url == expected

    @pytest.mark.asyncio
    async def test_description_truncated(self, fetcher):
        fetcher.fetch_text.return_value = html_page(meta("property", "og:description", "w" * 300))
        extractor = GenericExtractor(fetcher, description_max_length=200)

        raw = await extractor.extract(ARTICLE_URL)

        assert raw.description == "w" * 200 + "..."

    @pytest.mark.asyncio
    async def test_no_thumbnail_without_opt_in(self, fetcher, screenshot_client):
        fetcher.fetch_text.return_value = BARE_PAGE
        extractor = GenericExtractor(fetcher, screenshot_client=screenshot_client)

        raw = await extractor.extract(ARTICLE_URL, want_screenshot=False)

        assert raw.title == "Plain article"
        assert raw.thumbnail_url is None
        assert raw.extra['has_original_thumbnail'] is False
        screenshot_client.generate_screenshot.assert_not_called()

    @pytest.mark.asyncio
    async def test_screenshot_on_opt_in(self, fetcher, screenshot_client):
        fetcher.fetch_text.return_value = BARE_PAGE
        extractor = GenericExtractor(fetcher, screenshot_client=screenshot_client)

        raw = await extractor.extract(ARTICLE_URL, want_screenshot=True)

        assert raw.thumbnail_url == "https://cdn.example.com/shot.png"
        assert raw.extra['thumbnail_source'] == "screenshot"
        screenshot_client.generate_screenshot.assert_awaited_once_with(ARTICLE_URL)

    @pytest.mark.asyncio
    async def test_screenshot_skipped_when_page_has_image(self, fetcher, screenshot_client):
        fetcher.fetch_text.return_value = html_page(meta("property", "og:image", "https://img/og.png"))
        extractor = GenericExtractor(fetcher, screenshot_client=screenshot_client)

        await extractor.extract(ARTICLE_URL, want_screenshot=True)

        screenshot_client.generate_screenshot.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_screenshot_for_audio_stream(self, fetcher, screenshot_client):
        fetcher.fetch_text.return_value = BARE_PAGE
        extractor = GenericExtractor(fetcher, screenshot_client=screenshot_client)

        raw = await extractor.extract("https://soundcloud.com/forss/flickermood", want_screenshot=True)

        assert raw.type == "audio_stream"
        screenshot_client.generate_screenshot.assert_not_called()

    @pytest.mark.asyncio
    async def test_screenshot_failure_result(self, fetcher, screenshot_client):
        screenshot_client.generate_screenshot.return_value = ScreenshotResult(ok=False, error="HTTP 500")
        fetcher.fetch_text.return_value = BARE_PAGE
        extractor = GenericExtractor(fetcher, screenshot_client=screenshot_client)

        raw = await extractor.extract(ARTICLE_URL, want_screenshot=True)

        assert raw.thumbnail_url is None
        assert raw.extra['thumbnail_source'] is None

    @pytest.mark.asyncio
    async def test_screenshot_exception(self, fetcher, screenshot_client):
        screenshot_client.generate_screenshot.side_effect = RuntimeError("browser crashed")
        fetcher.fetch_text.return_value = BARE_PAGE
        extractor = GenericExtractor(fetcher, screenshot_client=screenshot_client)

        raw = await extractor.extract(ARTICLE_URL, want_screenshot=True)

        assert raw.thumbnail_url is None
