"""
Movie Metadata Extractor
Per-site selector profiles for IMDb, TMDb and Letterboxd, with Open Graph
tags as the generic fallback.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
from urllib.parse import urlparse

import structlog
from bs4 import BeautifulSoup

from notecard.extractors.base import OG_DESCRIPTION, OG_IMAGE, OG_TITLE, BaseExtractor
from notecard.models.metadata import Category, ContentType, RawMetadata
from notecard.utils.formatters import format_runtime, parse_runtime_minutes
from notecard.utils.parser import meta_content, page_title, regex_extract, select_attr, select_text

logger = structlog.get_logger()

DEFAULT_MOVIE_TITLE = "Untitled Movie"
TMDB_IMAGE_BASE = "https://image.tmdb.org/t/p/w500"
TITLE_YEAR_PATTERN = r'\((\d{4})\)'


@dataclass(frozen=True)
class MovieProfile:
    """CSS selectors for one film site."""
    site: str
    hosts: Tuple[str, ...] = ()
    title: Sequence[str] = ()
    director: Sequence[str] = ()
    year: Sequence[str] = ()
    year_pattern: str = r'(\d{4})'
    rating: Sequence[str] = ()
    rating_attr: Sequence[Tuple[str, str]] = ()
    poster: Sequence[str] = ()
    plot: Sequence[str] = ()
    runtime: Sequence[str] = ()
    poster_base: Optional[str] = None


IMDB = MovieProfile(
    site='imdb',
    hosts=('imdb.com',),
    title=['h1[data-testid="hero__pageTitle"] span', 'h1 .titlereference-title-display-name', 'h1'],
    director=['[data-testid="title-pc-principal-credit"] a', '.credit_summary_item a'],
    year=['h1'],
    year_pattern=TITLE_YEAR_PATTERN,
    rating=['[data-testid="hero-rating-bar__aggregate-rating__score"] span', '.ratingValue strong span'],
    poster=['.ipc-media img', '.poster img'],
    plot=['[data-testid="plot-xs_to_m"] span', '.summary_text'],
    runtime=['li[data-testid="title-techspec_runtime"]', '.subtext time'],
)

TMDB = MovieProfile(
    site='tmdb',
    hosts=('themoviedb.org',),
    title=['h2 a', '.title h2'],
    director=['.people .crew .profile a h3'],
    year=['.release_date', '.facts .release'],
    rating=['.rating .value'],
    rating_attr=[('.user_score_chart', 'data-percent')],
    poster=['.poster .image_content img'],
    plot=['.overview p'],
    runtime=['.facts .runtime'],
    poster_base=TMDB_IMAGE_BASE,
)

LETTERBOXD = MovieProfile(
    site='letterboxd',
    hosts=('letterboxd.com',),
    title=['h1.headline-1', '.film-title-wrapper h1'],
    director=['.directorlist a'],
    year=['.film-title-wrapper .metadata'],
    rating=['.average-rating .display-rating'],
    poster=['.film-poster img'],
    plot=['.review .body-text', '.truncate p'],
)

MOVIE_PROFILES = [IMDB, TMDB, LETTERBOXD]


def profile_for(url: str) -> Optional[MovieProfile]:
    host = (urlparse(url).hostname or '').lower()
    for profile in MOVIE_PROFILES:
        if any(host == h or host.endswith('.' + h) for h in profile.hosts):
            return profile
    return None


def format_title(title: Optional[str], year: Optional[str]) -> Optional[str]:
    """Append " (year)" unless the title already mentions it."""
    if title and year and year not in title:
        return f"{title} ({year})"
    return title


class MovieExtractor(BaseExtractor):
    """Film pages from the major movie databases."""

    category = Category.MOVIE

    def _scrape_profile(self, doc: BeautifulSoup, profile: MovieProfile) -> dict:
        rating = select_text(doc, profile.rating)
        if not rating:
            for selector, attr in profile.rating_attr:
                rating = select_attr(doc, [selector], attr)
                if rating:
                    break

        poster = select_attr(doc, profile.poster, 'src')
        if poster and profile.poster_base and not poster.startswith('http'):
            poster = profile.poster_base + poster

        runtime = None
        minutes = parse_runtime_minutes(select_text(doc, profile.runtime))
        if minutes:
            runtime = format_runtime(minutes)

        return {
            'title': select_text(doc, profile.title),
            'director': select_text(doc, profile.director),
            'year': regex_extract(select_text(doc, profile.year), profile.year_pattern),
            'rating': rating,
            'poster': poster,
            'plot': select_text(doc, profile.plot),
            'runtime': runtime,
        }

    def _scrape_generic(self, doc: BeautifulSoup) -> dict:
        return {
            'title': meta_content(doc, [OG_TITLE]) or page_title(doc),
            'director': meta_content(doc, ['meta[name="director"]', 'meta[property="video:director"]']),
            'year': None,
            'rating': None,
            'poster': meta_content(doc, [OG_IMAGE]),
            'plot': meta_content(doc, [OG_DESCRIPTION]),
            'runtime': None,
        }

    async def extract(self, url: str, *, want_screenshot: bool = False) -> RawMetadata:
        doc = await self.fetch_document(url)
        profile = profile_for(url)

        if profile:
            fields = self._scrape_profile(doc, profile)
            # Open Graph fills fields the site selectors miss
            generic = self._scrape_generic(doc)
            for key in ('title', 'poster', 'plot'):
                fields[key] = fields[key] or generic[key]
        else:
            fields = self._scrape_generic(doc)

        year = fields['year'] or regex_extract(fields['title'], TITLE_YEAR_PATTERN)
        director = fields['director']

        logger.debug("movie_fields_extracted", url=url, site=profile.site if profile else 'generic')

        return RawMetadata(
            type=ContentType.MOVIE.value,
            title=format_title(fields['title'], year) or DEFAULT_MOVIE_TITLE,
            author=f"Directed by {director}" if director else None,
            thumbnail_url=fields['poster'],
            duration=fields['runtime'],
            description=fields['plot'],
            extra={
                'year': year,
                'rating': fields['rating'],
                'director': director,
                'site': profile.site if profile else 'generic',
            }
        )
