"""
Book Metadata Extractor
Per-site selector profiles for Goodreads, Google Books and Amazon, with
Open Graph tags as the generic fallback.
"""

import re
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple
from urllib.parse import urlparse

import structlog
from bs4 import BeautifulSoup

from notecard.extractors.base import META_AUTHOR, OG_DESCRIPTION, OG_IMAGE, OG_TITLE, BaseExtractor
from notecard.models.metadata import Category, ContentType, RawMetadata
from notecard.utils.parser import clean_text, meta_content, page_title, regex_extract, select_attr, select_text

logger = structlog.get_logger()

DEFAULT_BOOK_TITLE = "Untitled Book"
PAGES_PATTERN = r'(\d+)\s*pages?'
YEAR_PATTERN = r'(\d{4})'


@dataclass(frozen=True)
class BookProfile:
    """CSS selectors for one book site."""
    site: str
    hosts: Tuple[str, ...] = ()
    title: Sequence[str] = ()
    author: Sequence[str] = ()
    rating: Sequence[str] = ()
    # (selector, regex) pairs tried after the plain rating selectors
    rating_patterns: Sequence[Tuple[str, str]] = ()
    cover: Sequence[str] = ()
    description: Sequence[str] = ()
    pages: Sequence[str] = ()
    published: Sequence[str] = ()
    metadata_table: bool = False
    path_markers: Tuple[str, ...] = ()


GOODREADS = BookProfile(
    site='goodreads',
    hosts=('goodreads.com',),
    title=['h1[data-testid="bookTitle"]', '.BookPageTitle h1', 'h1'],
    author=['[data-testid="name"]', '.BookPageTitle .ContributorLink__name', '.authorName span'],
    rating=['[data-testid="RatingStatistics__rating"]', '.BookPageTitle .RatingStatistics__rating', '.average'],
    cover=['[data-testid="coverImage"]', '.BookPage__leftColumn img', '.bookCover img'],
    description=['[data-testid="description"]', '.BookPageTitle .DetailsLayoutRightParagraph', '#description span'],
    pages=['[data-testid="pagesFormat"]', '.BookPageTitle .FeaturedDetails', '.pages'],
    published=['.BookPageTitle .FeaturedDetails', '.details .row'],
)

GOOGLE_BOOKS = BookProfile(
    site='google_books',
    hosts=('books.google.com',),
    title=['.bookinfo h1'],
    author=['.bookinfo .authors a'],
    cover=['#coverImage', '.cover img'],
    description=['#synopsistext', '.description'],
    metadata_table=True,
)

AMAZON = BookProfile(
    site='amazon',
    hosts=('amazon.com',),
    title=['#productTitle', '.product-title'],
    author=['.author .contributorNameID', '.author a', '#bylineInfo .author a'],
    rating=['.reviewCountTextLinkedHistogram .arp-rating-out-of-text'],
    rating_patterns=[('.a-icon-alt', r'(\d+\.?\d*) out of')],
    cover=['#landingImage', '.bookCover img'],
    description=['#feature-bullets ul', '.productDescriptionWrapper'],
    pages=['.detail-bullet-list', '#detailBullets'],
    published=['.detail-bullet-list', '#detailBullets'],
    path_markers=('/dp/', '/product/'),
)

BOOK_PROFILES = [GOODREADS, GOOGLE_BOOKS, AMAZON]


def profile_for(url: str) -> Optional[BookProfile]:
    parsed = urlparse(url)
    host = (parsed.hostname or '').lower()
    for profile in BOOK_PROFILES:
        if not any(host == h or host.endswith('.' + h) for h in profile.hosts):
            continue
        if profile.path_markers and not any(m in parsed.path for m in profile.path_markers):
            continue
        return profile
    return None


def metadata_rows(doc: BeautifulSoup) -> Dict[str, str]:
    """Label/value pairs of the Google Books "About this book" table."""
    rows = {}
    for row in doc.select('#metadata_content_table tr'):
        label = row.select_one('.metadata_label')
        value = row.select_one('.metadata_value')
        label_text = clean_text(label.get_text(' ')) if label else None
        value_text = clean_text(value.get_text(' ')) if value else None
        if label_text and value_text:
            rows.setdefault(label_text, value_text)
    return rows


def row_value(rows: Dict[str, str], label: str) -> Optional[str]:
    for key, value in rows.items():
        if label in key:
            return value
    return None


class BookExtractor(BaseExtractor):
    """Book pages from catalogs and marketplaces."""

    category = Category.BOOK

    def _scrape_profile(self, doc: BeautifulSoup, profile: BookProfile) -> dict:
        title = select_text(doc, profile.title)
        author = select_text(doc, profile.author)

        rating = select_text(doc, profile.rating)
        for selector, pattern in profile.rating_patterns:
            if rating:
                break
            rating = regex_extract(select_text(doc, [selector]), pattern)

        pages = regex_extract(select_text(doc, profile.pages), PAGES_PATTERN, flags=re.IGNORECASE)
        published_year = regex_extract(select_text(doc, profile.published), YEAR_PATTERN)

        if profile.metadata_table:
            rows = metadata_rows(doc)
            title = row_value(rows, 'Title') or title
            author = row_value(rows, 'Author') or author
            pages = regex_extract(row_value(rows, 'Pages'), r'(\d+)') or pages
            published_year = regex_extract(row_value(rows, 'Published'), YEAR_PATTERN) or published_year

        return {
            'title': title,
            'author': author,
            'rating': rating,
            'cover': select_attr(doc, profile.cover, 'src'),
            'description': select_text(doc, profile.description),
            'pages': pages,
            'published_year': published_year,
        }

    def _scrape_generic(self, doc: BeautifulSoup) -> dict:
        return {
            'title': meta_content(doc, [OG_TITLE]) or page_title(doc),
            'author': meta_content(doc, [META_AUTHOR, 'meta[property="book:author"]']),
            'rating': None,
            'cover': meta_content(doc, [OG_IMAGE]),
            'description': meta_content(doc, [OG_DESCRIPTION]),
            'pages': None,
            'published_year': None,
        }

    async def extract(self, url: str, *, want_screenshot: bool = False) -> RawMetadata:
        doc = await self.fetch_document(url)
        profile = profile_for(url)

        if profile:
            fields = self._scrape_profile(doc, profile)
            generic = self._scrape_generic(doc)
            for key in ('title', 'author', 'cover', 'description'):
                fields[key] = fields[key] or generic[key]
        else:
            fields = self._scrape_generic(doc)

        author = fields['author']
        pages = fields['pages']

        logger.debug("book_fields_extracted", url=url, site=profile.site if profile else 'generic')

        return RawMetadata(
            type=ContentType.BOOK.value,
            title=fields['title'] or DEFAULT_BOOK_TITLE,
            author=f"by {author}" if author else None,
            thumbnail_url=fields['cover'],
            duration=f"{pages} pages" if pages else None,
            description=fields['description'],
            extra={
                'pages': pages,
                'published_year': fields['published_year'],
                'rating': fields['rating'],
                'raw_author': author,
                'site': profile.site if profile else 'generic',
            }
        )
