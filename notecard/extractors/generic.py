"""
Generic Metadata Extractor
Articles and any other page without a dedicated extractor. Open Graph
first; pages without a thumbnail can be rendered by the screenshot service.
"""

from typing import Optional
from urllib.parse import urlparse

import structlog

from notecard.extractors.base import (
    META_AUTHOR,
    META_DESCRIPTION,
    OG_DESCRIPTION,
    OG_IMAGE,
    OG_TITLE,
    BaseExtractor,
)
from notecard.models.metadata import DEFAULT_TITLE, Category, ContentType, RawMetadata
from notecard.screenshot import ScreenshotClient
from notecard.utils.fetcher import HtmlFetcher
from notecard.utils.parser import meta_content, page_title, truncate

logger = structlog.get_logger()

AUDIO_STREAM_HOSTS = ('soundcloud.com',)

THUMBNAIL_SELECTORS = [
    OG_IMAGE,
    'meta[name="twitter:image"]',
    'meta[property="twitter:image"]',
    'meta[name="image"]',
    'link[rel="image_src"]',
]


def content_type_for(url: str) -> ContentType:
    host = (urlparse(url).hostname or '').lower()
    if any(host == h or host.endswith('.' + h) for h in AUDIO_STREAM_HOSTS):
        return ContentType.AUDIO_STREAM
    return ContentType.ARTICLE


class GenericExtractor(BaseExtractor):
    """Fallback for pages that match no other category."""

    category = Category.GENERIC

    def __init__(
        self,
        fetcher: HtmlFetcher,
        screenshot_client: Optional[ScreenshotClient] = None,
        description_max_length: int = 200
    ):
        super().__init__(fetcher)
        self.screenshot_client = screenshot_client
        self.description_max_length = description_max_length

    async def screenshot_thumbnail(self, url: str) -> Optional[str]:
        """Rendered thumbnail, or None when the service cannot provide one."""
        if self.screenshot_client is None:
            logger.debug("screenshot_client_missing", url=url)
            return None

        try:
            result = await self.screenshot_client.generate_screenshot(url)
        except Exception as e:
            logger.warning("screenshot_error", url=url, error=str(e))
            return None

        return result.image_ref if result.ok else None

    async def extract(self, url: str, *, want_screenshot: bool = False) -> RawMetadata:
        doc = await self.fetch_document(url)
        content_type = content_type_for(url)

        thumbnail_url = meta_content(doc, THUMBNAIL_SELECTORS)
        thumbnail_source = 'page' if thumbnail_url else None
        has_original_thumbnail = thumbnail_url is not None

        if not thumbnail_url and content_type == ContentType.ARTICLE and want_screenshot:
            thumbnail_url = await self.screenshot_thumbnail(url)
            if thumbnail_url:
                thumbnail_source = 'screenshot'

        description = meta_content(doc, [OG_DESCRIPTION, META_DESCRIPTION])

        return RawMetadata(
            type=content_type.value,
            title=meta_content(doc, [OG_TITLE]) or page_title(doc) or DEFAULT_TITLE,
            author=meta_content(doc, [META_AUTHOR, 'meta[property="article:author"]']),
            thumbnail_url=thumbnail_url,
            description=truncate(description, self.description_max_length),
            extra={
                'has_original_thumbnail': has_original_thumbnail,
                'thumbnail_source': thumbnail_source,
            }
        )
