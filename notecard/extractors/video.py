"""
YouTube Metadata Extractor
Uses the YouTube Data API v3 when a key is configured and falls back to
the watch page's Open Graph tags.
"""

import re
from typing import Any, Dict, Optional

import structlog

from notecard.exceptions import ExtractorError
from notecard.extractors.base import (
    META_AUTHOR,
    OG_DESCRIPTION,
    OG_IMAGE,
    OG_TITLE,
    BaseExtractor,
    first_successful,
)
from notecard.models.metadata import Category, ContentType, RawMetadata
from notecard.utils.fetcher import HtmlFetcher
from notecard.utils.formatters import format_clock, iso_duration_to_seconds
from notecard.utils.parser import dig, meta_content, page_title

logger = structlog.get_logger()

YOUTUBE_API_URL = "https://www.googleapis.com/youtube/v3/videos"

VIDEO_ID_PATTERNS = [
    r'(?:youtube\.com/watch\?(?:[^#]*&)?v=|youtu\.be/)([^&\n?#/]+)',
    r'youtube\.com/embed/([^&\n?#/]+)',
    r'youtube\.com/shorts/([^&\n?#/]+)',
    r'youtube\.com/v/([^&\n?#/]+)',
]

THUMBNAIL_QUALITIES = ['maxres', 'high', 'medium', 'default']


def extract_video_id(url: str) -> Optional[str]:
    """Extract video ID from YouTube URL."""
    for pattern in VIDEO_ID_PATTERNS:
        match = re.search(pattern, url)
        if match:
            return match.group(1)
    return None


class VideoExtractor(BaseExtractor):
    """YouTube video metadata with API-first, scrape-second strategy."""

    category = Category.VIDEO

    def __init__(self, fetcher: HtmlFetcher, api_key: Optional[str] = None):
        super().__init__(fetcher)
        self.api_key = api_key

        if not self.api_key:
            logger.debug("youtube_api_key_missing", fallback="scraping")

    async def fetch_from_api(self, video_id: str) -> Optional[RawMetadata]:
        """
        Get video metadata using YouTube Data API v3.

        Returns:
            RawMetadata, or None when no key is configured or the video is unknown
        """
        if not self.api_key:
            return None

        data = await self.fetcher.fetch_json(
            YOUTUBE_API_URL,
            params={
                'id': video_id,
                'key': self.api_key,
                'part': 'snippet,contentDetails',
            }
        )

        item = dig(data, 'items', 0)
        if not isinstance(item, dict):
            logger.warning("youtube_api_no_items", video_id=video_id)
            return None

        return self._parse_video_item(video_id, item)

    def _parse_video_item(self, video_id: str, item: Dict[str, Any]) -> RawMetadata:
        """Parse video data from API response."""
        snippet = item.get('snippet') or {}

        duration = None
        seconds = iso_duration_to_seconds(dig(item, 'contentDetails', 'duration'))
        if seconds is not None:
            duration = format_clock(seconds)

        thumbnails = snippet.get('thumbnails') or {}
        thumbnail_url = None
        for quality in THUMBNAIL_QUALITIES:
            thumbnail_url = dig(thumbnails, quality, 'url')
            if thumbnail_url:
                break

        return RawMetadata(
            type=ContentType.VIDEO.value,
            title=snippet.get('title'),
            author=snippet.get('channelTitle'),
            thumbnail_url=thumbnail_url,
            duration=duration,
            description=snippet.get('description'),
            extra={
                'platform': 'youtube',
                'video_id': video_id,
                'channel_id': snippet.get('channelId'),
                'published_at': snippet.get('publishedAt'),
                'extraction_method': 'api',
            }
        )

    async def scrape_page(self, url: str, video_id: str) -> RawMetadata:
        """Read Open Graph tags from the watch page."""
        doc = await self.fetch_document(url)

        return RawMetadata(
            type=ContentType.VIDEO.value,
            title=meta_content(doc, [OG_TITLE]) or page_title(doc),
            author=meta_content(doc, [META_AUTHOR, 'link[itemprop="name"]']),
            thumbnail_url=meta_content(doc, [OG_IMAGE]),
            description=meta_content(doc, [OG_DESCRIPTION]),
            extra={
                'platform': 'youtube',
                'video_id': video_id,
                'extraction_method': 'scraping',
            }
        )

    async def extract(self, url: str, *, want_screenshot: bool = False) -> RawMetadata:
        video_id = extract_video_id(url)
        if not video_id:
            raise ExtractorError("Invalid YouTube URL")

        return await first_successful([
            ('youtube_api', lambda: self.fetch_from_api(video_id)),
            ('youtube_page', lambda: self.scrape_page(url, video_id)),
        ], url=url)
