"""
Data models for metadata extraction.
"""

from .metadata import (
    DEFAULT_TITLE,
    Category,
    ContentType,
    ExtractionRequest,
    ExtractionResult,
    ExtractionStatus,
    NormalizedMetadata,
    RawMetadata,
)

__all__ = [
    'DEFAULT_TITLE',
    'Category',
    'ContentType',
    'ExtractionRequest',
    'ExtractionResult',
    'ExtractionStatus',
    'NormalizedMetadata',
    'RawMetadata',
]
