"""
Metadata Extraction Service - FastAPI application.
"""

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from notecard import __version__
from notecard.config import settings, setup_logging
from notecard.extractor import MetadataExtractor, get_metadata_extractor
from notecard.models.metadata import ExtractionRequest, ExtractionStatus

logger = structlog.get_logger()


class MetadataRequest(BaseModel):
    """Request to extract metadata for a URL."""
    # Checked by the endpoint so a missing or non-string url gets a 400
    url: Optional[Any] = None
    generate_screenshot: bool = Field(False, alias="generateScreenshot")

    model_config = ConfigDict(populate_by_name=True)


class MetadataResponse(BaseModel):
    """Extraction response."""
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message}
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info(
        "metadata_service_starting",
        youtube_api=bool(settings.YOUTUBE_API_KEY),
        screenshot_service=bool(settings.SCREENSHOT_SERVICE_URL)
    )

    yield

    logger.info("metadata_service_stopping")


app = FastAPI(
    title="Metadata Extraction Service",
    description="Title, author, thumbnail and duration for saved URLs",
    version=__version__,
    lifespan=lifespan
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies get the same envelope as every other error."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    fields = [str(part) for part in first.get("loc", ()) if part != "body"]

    if first.get("type") == "json_invalid" or not fields:
        message = "Invalid request body"
    else:
        message = f"Invalid value for {'.'.join(fields)}"

    logger.info("request_rejected", path=request.url.path, error=message)
    return error_response(400, message)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "youtube_api": "configured" if settings.YOUTUBE_API_KEY else "scraping",
        "screenshot_service": "configured" if settings.SCREENSHOT_SERVICE_URL else "disabled"
    }


@app.post("/extract-metadata", response_model=MetadataResponse)
async def extract_metadata(
    request: MetadataRequest,
    extractor: MetadataExtractor = Depends(get_metadata_extractor)
):
    """
    Extract display metadata for a URL.

    Malformed URLs are rejected before any network call.
    """
    if not request.url or not isinstance(request.url, str):
        return error_response(400, "URL is required")

    result = await extractor.extract(
        ExtractionRequest(url=request.url, want_screenshot=request.generate_screenshot)
    )

    if result.status == ExtractionStatus.INVALID_URL:
        return error_response(400, result.error_message)

    if not result.success:
        return error_response(500, result.error_message or "Failed to extract metadata")

    return MetadataResponse(success=True, data=result.metadata.to_dict())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT)
