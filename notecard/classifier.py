"""
URL validation and category classification.
"""

from typing import Optional, Sequence, Tuple
from urllib.parse import urlparse

import validators

from notecard.models.metadata import Category

# Checked in order, first match wins
CATEGORY_DOMAINS: Sequence[Tuple[Category, Tuple[str, ...]]] = [
    (Category.VIDEO, ('youtube.com', 'youtu.be')),
    (Category.LINK_POST, ('reddit.com', 'redd.it')),
    (Category.MICROBLOG, ('twitter.com', 'x.com', 'instagram.com', 'pinterest.com')),
    (Category.MUSIC, ('spotify.com',)),
    (Category.MOVIE, ('imdb.com', 'themoviedb.org', 'letterboxd.com')),
    (Category.BOOK, ('goodreads.com', 'books.google.com')),
]

AMAZON_DOMAIN = 'amazon.com'
AMAZON_PRODUCT_MARKERS = ('/dp/', '/product/')


def host_matches(host: str, domain: str) -> bool:
    """True when host is the domain itself or one of its subdomains."""
    return host == domain or host.endswith('.' + domain)


def validate_url(url: Optional[str]) -> bool:
    """
    Check that a URL is well formed and uses http or https.

    Args:
        url: URL to validate

    Returns:
        True if valid, False otherwise
    """
    if not url or not isinstance(url, str):
        return False

    if not validators.url(url):
        return False

    return urlparse(url).scheme in ('http', 'https')


def classify_url(url: str) -> Category:
    """
    Decide which extractor handles a URL.

    Args:
        url: Validated URL

    Returns:
        Category, GENERIC when no domain list matches
    """
    parsed = urlparse(url)
    host = (parsed.hostname or '').lower()

    for category, domains in CATEGORY_DOMAINS:
        if any(host_matches(host, domain) for domain in domains):
            return category

    if host_matches(host, AMAZON_DOMAIN) and any(m in parsed.path for m in AMAZON_PRODUCT_MARKERS):
        return Category.BOOK

    return Category.GENERIC
