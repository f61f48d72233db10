"""
Reddit Metadata Extractor
Prefers Reddit's JSON endpoint and falls back to scraping the post page.
"""

import re
import time
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlparse, urlunparse

import structlog

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
from notecard.utils.formatters import format_relative_time
from notecard.utils.parser import dig, meta_content, page_title, parse_int, regex_extract, truncate

logger = structlog.get_logger()

PLACEHOLDER_THUMBNAILS = {'self', 'default', 'nsfw', 'spoiler'}
DELETED_AUTHOR = '[deleted]'
SELFTEXT_MAX_LENGTH = 200


def json_endpoint(url: str) -> str:
    """URL of the post's JSON representation."""
    if '.json' in url:
        return url
    parsed = urlparse(url)
    return urlunparse(parsed._replace(path=parsed.path + '.json'))


def format_author(author: Optional[str]) -> str:
    """Prefix usernames with u/; missing or deleted accounts become [deleted]."""
    if not author or author == DELETED_AUTHOR:
        return DELETED_AUTHOR
    return author if author.startswith('u/') else f"u/{author}"


def clean_thumbnail(thumbnail: Optional[str]) -> Optional[str]:
    """Drop Reddit's placeholder thumbnail values."""
    if not thumbnail or thumbnail in PLACEHOLDER_THUMBNAILS:
        return None
    return thumbnail


def post_stats(score: int, num_comments: int, subreddit: str, time_info: str = "") -> str:
    """Synthesized description such as '120 points • 7 comments in r/programming'."""
    parts = [f"{score} points", f"{num_comments} comments"]
    if time_info:
        parts.append(time_info)
    return f"{' • '.join(parts)} in {subreddit}"


class LinkPostExtractor(BaseExtractor):
    """Reddit post metadata."""

    category = Category.LINK_POST

    def __init__(self, fetcher: HtmlFetcher, clock: Callable[[], float] = time.time):
        super().__init__(fetcher)
        self.clock = clock

    async def fetch_from_json(self, url: str) -> Optional[RawMetadata]:
        """
        Read the post from the JSON listing.

        Returns:
            RawMetadata, or None when the listing lacks a post
        """
        data = await self.fetcher.fetch_json(json_endpoint(url))

        post = dig(data, 0, 'data', 'children', 0, 'data')
        if not isinstance(post, dict):
            logger.info("reddit_invalid_post_structure", url=url)
            return None

        return self._parse_post(post)

    def _parse_post(self, post: Dict[str, Any]) -> RawMetadata:
        title = (post.get('title') or 'Untitled').strip()
        subreddit = post.get('subreddit')
        score = parse_int(post.get('score')) or 0
        num_comments = parse_int(post.get('num_comments')) or 0
        selftext = post.get('selftext') or ''
        created_utc = post.get('created_utc')

        subreddit_display = f"r/{subreddit}" if subreddit else 'Unknown'

        if selftext.strip():
            description = truncate(selftext, SELFTEXT_MAX_LENGTH)
        else:
            time_info = ""
            if isinstance(created_utc, (int, float)) and not isinstance(created_utc, bool):
                time_info = format_relative_time(created_utc, self.clock())
            description = post_stats(score, num_comments, subreddit_display, time_info)

        return RawMetadata(
            type=ContentType.LINK_POST.value,
            title=title,
            author=format_author(post.get('author')),
            thumbnail_url=clean_thumbnail(post.get('thumbnail')),
            description=description,
            extra={
                'platform': 'reddit',
                'subreddit': subreddit,
                'score': score,
                'num_comments': num_comments,
                'is_nsfw': bool(post.get('over_18', False)),
                'post_type': 'text' if post.get('is_self') else 'link',
                'created_utc': created_utc,
                'permalink': post.get('permalink'),
                'url': post.get('url'),
                'extraction_method': 'json',
            }
        )

    async def scrape_page(self, url: str) -> RawMetadata:
        """Fallback: Open Graph tags plus whatever the URL and description reveal."""
        doc = await self.fetch_document(url)

        title = meta_content(doc, [OG_TITLE]) or page_title(doc) or 'Reddit Post'
        description = meta_content(doc, [OG_DESCRIPTION]) or ''
        thumbnail_url = clean_thumbnail(meta_content(doc, [OG_IMAGE]))
        author = meta_content(doc, [META_AUTHOR])

        subreddit = regex_extract(urlparse(url).path, r'/r/([^/]+)') or ''

        # Web titles often read "Post title : subreddit"
        if subreddit and ' : ' in title:
            title = title.split(' : ')[0].strip()

        score = parse_int(regex_extract(description, r'(\d+)\s+point', flags=re.IGNORECASE)) or 0
        num_comments = parse_int(regex_extract(description, r'(\d+)\s+comment', flags=re.IGNORECASE)) or 0

        if author and not author.startswith('u/'):
            author = f"u/{author}"

        if 'Posted in the' in description:
            description = description.split('Posted in the')[0].strip()

        if subreddit and len(description) < 50:
            if score > 0 or num_comments > 0:
                subreddit_info = post_stats(score, num_comments, f"r/{subreddit}")
            else:
                subreddit_info = f"Posted in r/{subreddit}"
            description = f"{description} • {subreddit_info}" if description else subreddit_info

        return RawMetadata(
            type=ContentType.LINK_POST.value,
            title=title or 'Reddit Post',
            author=author,
            thumbnail_url=thumbnail_url,
            description=description or 'A post from Reddit',
            extra={
                'platform': 'reddit',
                'subreddit': subreddit or None,
                'score': score,
                'num_comments': num_comments,
                'is_nsfw': False,
                'post_type': 'unknown',
                'extraction_method': 'scraping',
            }
        )

    async def extract(self, url: str, *, want_screenshot: bool = False) -> RawMetadata:
        return await first_successful([
            ('reddit_json', lambda: self.fetch_from_json(url)),
            ('reddit_page', lambda: self.scrape_page(url)),
        ], url=url)
