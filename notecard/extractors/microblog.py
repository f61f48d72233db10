"""
Microblog Metadata Extractor
Twitter/X, Instagram and Pinterest posts via Open Graph tags. Their APIs
require authentication, so the public page is scraped.
"""

from typing import Optional
from urllib.parse import urlparse

from notecard.extractors.base import META_AUTHOR, BaseExtractor
from notecard.models.metadata import Category, ContentType, RawMetadata
from notecard.utils.parser import meta_content

# platform -> (hosts, author selector)
PLATFORMS = {
    'twitter': (('twitter.com', 'x.com'), 'meta[name="twitter:creator"]'),
    'instagram': (('instagram.com',), 'meta[property="instapp:owner_user_name"]'),
    'pinterest': (('pinterest.com',), 'meta[property="pinterestapp:ownername"]'),
}


def detect_platform(url: str) -> Optional[str]:
    host = (urlparse(url).hostname or '').lower()
    for platform, (hosts, _) in PLATFORMS.items():
        if any(host == h or host.endswith('.' + h) for h in hosts):
            return platform
    return None


class MicroblogExtractor(BaseExtractor):
    """Social post metadata scraped from the public page."""

    category = Category.MICROBLOG

    async def extract(self, url: str, *, want_screenshot: bool = False) -> RawMetadata:
        doc = await self.fetch_document(url)
        platform = detect_platform(url)

        metadata = self.open_graph(doc, ContentType.MICROBLOG.value)

        author_selectors = [META_AUTHOR]
        if platform:
            author_selectors.insert(0, PLATFORMS[platform][1])
        metadata.author = meta_content(doc, author_selectors)

        metadata.extra = {
            'platform': platform,
            'extraction_method': 'scraping',
        }
        return metadata
