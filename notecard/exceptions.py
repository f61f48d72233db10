"""Errors raised by the metadata extraction pipeline."""

from typing import Optional


class ExtractorError(Exception):
    """Metadata extractor specific errors."""
    pass


class InvalidUrl(ExtractorError):
    """URL is malformed or uses an unsupported scheme."""

    def __init__(self, url):
        self.url = url
        super().__init__("Invalid URL format")


class FetchFailure(ExtractorError):
    """Network error or non-success response from a source."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status = status
        if status is not None:
            message = f"HTTP {status} fetching {url}"
        else:
            message = f"Request to {url} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ScreenshotFailure(ExtractorError):
    """Screenshot service could not produce an image."""
    pass


class ExtractionFailed(ExtractorError):
    """Terminal failure for a request, after all fallbacks were exhausted."""

    def __init__(self, category, cause: BaseException):
        self.category = category
        self.cause = cause
        label = getattr(category, "value", category)
        super().__init__(f"Failed to extract {label} metadata: {cause}")
