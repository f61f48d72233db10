"""
Metadata Extractor
Classifies a URL, runs the matching category extractor and normalizes
its output.
"""

import time
from typing import Dict, Optional

import structlog

from notecard.classifier import classify_url, validate_url
from notecard.config import Settings, get_settings
from notecard.exceptions import ExtractionFailed, InvalidUrl
from notecard.extractors import (
    BaseExtractor,
    BookExtractor,
    GenericExtractor,
    LinkPostExtractor,
    MicroblogExtractor,
    MovieExtractor,
    MusicExtractor,
    VideoExtractor,
)
from notecard.models.metadata import (
    Category,
    ExtractionRequest,
    ExtractionResult,
    ExtractionStatus,
    NormalizedMetadata,
)
from notecard.screenshot import ScreenshotClient
from notecard.utils.fetcher import HtmlFetcher

logger = structlog.get_logger()


class MetadataExtractor:
    """Entry point for URL metadata extraction."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        fetcher: Optional[HtmlFetcher] = None,
        screenshot_client: Optional[ScreenshotClient] = None
    ):
        self.settings = settings or get_settings()
        self.fetcher = fetcher or HtmlFetcher(
            user_agent=self.settings.USER_AGENT,
            request_timeout=self.settings.REQUEST_TIMEOUT
        )
        self.screenshot_client = screenshot_client or ScreenshotClient(
            service_url=self.settings.SCREENSHOT_SERVICE_URL,
            timeout=self.settings.SCREENSHOT_TIMEOUT
        )

        self.extractors: Dict[Category, BaseExtractor] = {
            Category.VIDEO: VideoExtractor(self.fetcher, api_key=self.settings.YOUTUBE_API_KEY),
            Category.LINK_POST: LinkPostExtractor(self.fetcher),
            Category.MICROBLOG: MicroblogExtractor(self.fetcher),
            Category.MUSIC: MusicExtractor(self.fetcher),
            Category.MOVIE: MovieExtractor(self.fetcher),
            Category.BOOK: BookExtractor(self.fetcher),
            Category.GENERIC: GenericExtractor(
                self.fetcher,
                screenshot_client=self.screenshot_client,
                description_max_length=self.settings.DESCRIPTION_MAX_LENGTH
            ),
        }

    async def extract(self, request: ExtractionRequest) -> ExtractionResult:
        """
        Extract normalized metadata for a URL.

        Args:
            request: URL and screenshot opt-in

        Returns:
            ExtractionResult with metadata on success, error message otherwise
        """
        start_time = time.time()
        url = request.url.strip() if isinstance(request.url, str) else request.url

        if not validate_url(url):
            error = InvalidUrl(url)
            logger.info("metadata_extraction_rejected", url=url, error=str(error))
            return ExtractionResult(
                status=ExtractionStatus.INVALID_URL,
                error_message=str(error),
                processing_time=time.time() - start_time
            )

        category = classify_url(url)
        extractor = self.extractors[category]

        logger.info("metadata_extraction_started", url=url, category=category.value)

        try:
            raw = await extractor.extract(url, want_screenshot=request.want_screenshot)
            metadata = NormalizedMetadata.from_raw(raw)
        except Exception as e:
            failure = ExtractionFailed(category, e)
            processing_time = time.time() - start_time
            logger.error(
                "metadata_extraction_failed",
                url=url,
                category=category.value,
                error=str(e),
                processing_time=f"{processing_time:.2f}s"
            )
            return ExtractionResult(
                status=ExtractionStatus.FAILED,
                error_message=str(failure),
                category=category,
                processing_time=processing_time
            )

        processing_time = time.time() - start_time
        logger.info(
            "metadata_extraction_completed",
            url=url,
            category=category.value,
            type=metadata.type.value,
            processing_time=f"{processing_time:.2f}s"
        )

        return ExtractionResult(
            status=ExtractionStatus.SUCCESS,
            metadata=metadata,
            category=category,
            processing_time=processing_time
        )


# Global extractor instance
_metadata_extractor = None


def get_metadata_extractor() -> MetadataExtractor:
    """Get global metadata extractor instance."""
    global _metadata_extractor
    if _metadata_extractor is None:
        _metadata_extractor = MetadataExtractor()
    return _metadata_extractor


# Convenience function
async def extract_metadata(url: str, want_screenshot: bool = False) -> ExtractionResult:
    """
    Convenience function to extract URL metadata.

    Args:
        url: URL to inspect
        want_screenshot: Render a thumbnail for pages without one

    Returns:
        Extraction result
    """
    extractor = get_metadata_extractor()
    return await extractor.extract(ExtractionRequest(url=url, want_screenshot=want_screenshot))
