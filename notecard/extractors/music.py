"""
Spotify Metadata Extractor
Open Graph tags first, then page-embedded data for duration and artist.
"""

import re
from typing import Optional, Tuple

import structlog
from bs4 import BeautifulSoup

from notecard.extractors.base import (
    META_DESCRIPTION,
    OG_DESCRIPTION,
    OG_IMAGE,
    OG_TITLE,
    BaseExtractor,
)
from notecard.models.metadata import Category, ContentType, RawMetadata
from notecard.utils.formatters import format_track_length, iso_duration_to_seconds
from notecard.utils.parser import (
    json_ld_objects,
    meta_content,
    page_title,
    parse_int,
    regex_extract,
    script_containing,
)

logger = structlog.get_logger()

DURATION_META = ['meta[property="music:duration"]', 'meta[name="music:duration"]']
EMBEDDED_DATA_MARKERS = ['Spotify.Entity', '"duration_ms"']


def split_title(title: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """Split "Track - Artist" into its parts; (title, None) otherwise."""
    if title and ' - ' in title:
        parts = title.split(' - ')
        return parts[0].strip(), parts[1].strip()
    return title, None


def artist_from_description(description: Optional[str]) -> Optional[str]:
    """Artist from "Listen to X by Artist" style descriptions."""
    artist = regex_extract(description, r'(?:by|from)\s+([^·,]+)', flags=re.IGNORECASE)
    return artist.strip() if artist else None


def clean_artist(author: Optional[str]) -> Optional[str]:
    """Keep the artist from "Artist · Album · Song · Year"."""
    if not author:
        return author
    return author.split('·')[0].strip() or author


def json_ld_duration(doc: BeautifulSoup) -> Optional[str]:
    """Duration from structured data; ISO 8601 values become M:SS."""
    duration = None
    for data in json_ld_objects(doc):
        if isinstance(data, dict) and data.get('duration'):
            duration = str(data['duration'])

    if duration is None:
        return None

    seconds = iso_duration_to_seconds(duration)
    return format_track_length(seconds) if seconds is not None else duration


class MusicExtractor(BaseExtractor):
    """Spotify track, album and playlist metadata."""

    category = Category.MUSIC

    async def extract(self, url: str, *, want_screenshot: bool = False) -> RawMetadata:
        doc = await self.fetch_document(url)

        title = meta_content(doc, [OG_TITLE]) or page_title(doc)
        author = meta_content(doc, [OG_DESCRIPTION])
        description = meta_content(doc, [META_DESCRIPTION])

        title, title_artist = split_title(title)
        if title_artist:
            author = title_artist

        if not author:
            author = artist_from_description(description)

        author = clean_artist(author)

        duration = None
        duration_source = None

        seconds = parse_int(meta_content(doc, DURATION_META))
        if seconds is not None:
            duration = format_track_length(seconds)
            duration_source = 'meta'

        if not duration:
            duration = json_ld_duration(doc)
            if duration:
                duration_source = 'json_ld'

        if not duration or not author:
            script = script_containing(doc, EMBEDDED_DATA_MARKERS)
            if script:
                duration_ms = parse_int(regex_extract(script, r'"duration_ms":(\d+)'))
                if duration_ms is not None and not duration:
                    duration = format_track_length(duration_ms // 1000)
                    duration_source = 'embedded_data'

                if not author:
                    artists = regex_extract(script, r'"artists":\s*\[([^\]]+)\]')
                    author = regex_extract(artists, r'"name":"([^"]+)"')

        logger.debug("spotify_fields_extracted", url=url, duration_source=duration_source)

        return RawMetadata(
            type=ContentType.MUSIC.value,
            title=title,
            author=author,
            thumbnail_url=meta_content(doc, [OG_IMAGE]),
            duration=duration,
            description=description,
            extra={
                'platform': 'spotify',
                'duration_source': duration_source,
            }
        )
