"""
Base class and fallback chain shared by the per-category extractors.
"""

from typing import Any, Awaitable, Callable, Optional, Sequence, Tuple

import structlog
from bs4 import BeautifulSoup

from notecard.exceptions import ExtractorError
from notecard.models.metadata import Category, RawMetadata
from notecard.utils.fetcher import HtmlFetcher
from notecard.utils.parser import load_document, meta_content, page_title

logger = structlog.get_logger()

Attempt = Tuple[str, Callable[[], Awaitable[Any]]]

OG_TITLE = 'meta[property="og:title"]'
OG_IMAGE = 'meta[property="og:image"]'
OG_DESCRIPTION = 'meta[property="og:description"]'
META_AUTHOR = 'meta[name="author"]'
META_DESCRIPTION = 'meta[name="description"]'


async def first_successful(attempts: Sequence[Attempt], url: str = "") -> Any:
    """
    Run attempts in order and return the first usable result.

    An attempt is usable when it returns something other than None without
    raising. Attempts run strictly one after another.

    Args:
        attempts: (name, zero-argument coroutine function) pairs
        url: URL being extracted, for log context

    Returns:
        Result of the first usable attempt

    Raises:
        The last attempt's exception when every attempt failed, or
        ExtractorError when they all returned nothing.
    """
    last_error: Optional[BaseException] = None

    for name, attempt in attempts:
        try:
            result = await attempt()
        except Exception as e:
            logger.info("extraction_attempt_failed", attempt=name, url=url, error=str(e))
            last_error = e
            continue

        if result is not None:
            logger.debug("extraction_attempt_succeeded", attempt=name, url=url)
            return result

        logger.info("extraction_attempt_empty", attempt=name, url=url)

    if last_error is not None:
        raise last_error
    raise ExtractorError("No source produced usable metadata")


class BaseExtractor:
    """
    One extraction strategy for one URL category.

    Subclasses implement `extract`; optional fields they cannot find are
    left as None, only a failure of every source raises.
    """

    category: Category = Category.GENERIC

    def __init__(self, fetcher: HtmlFetcher):
        self.fetcher = fetcher

    async def fetch_document(self, url: str) -> BeautifulSoup:
        """Fetch a page and parse it."""
        html = await self.fetcher.fetch_text(url)
        return load_document(html)

    def open_graph(self, doc: BeautifulSoup, content_type: str) -> RawMetadata:
        """Generic Open Graph fields every extractor can fall back to."""
        return RawMetadata(
            type=content_type,
            title=meta_content(doc, [OG_TITLE]) or page_title(doc),
            author=meta_content(doc, [META_AUTHOR]),
            thumbnail_url=meta_content(doc, [OG_IMAGE]),
            description=meta_content(doc, [OG_DESCRIPTION]),
        )

    async def extract(self, url: str, *, want_screenshot: bool = False) -> RawMetadata:
        """
        Extract metadata for a URL.

        Args:
            url: Validated URL
            want_screenshot: Caller opted into screenshot thumbnails

        Returns:
            Raw category-specific metadata
        """
        raise NotImplementedError
