"""
Per-category metadata extractors.
"""

from notecard.extractors.base import BaseExtractor, first_successful
from notecard.extractors.book import BookExtractor
from notecard.extractors.generic import GenericExtractor
from notecard.extractors.link_post import LinkPostExtractor
from notecard.extractors.microblog import MicroblogExtractor
from notecard.extractors.movie import MovieExtractor
from notecard.extractors.music import MusicExtractor
from notecard.extractors.video import VideoExtractor

__all__ = [
    'BaseExtractor',
    'first_successful',
    'VideoExtractor',
    'LinkPostExtractor',
    'MicroblogExtractor',
    'MusicExtractor',
    'MovieExtractor',
    'BookExtractor',
    'GenericExtractor',
]
