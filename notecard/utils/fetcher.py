"""
HTML Fetcher
Retrieves page HTML or JSON payloads with an identifying user agent.
"""

import asyncio
import json
from typing import Any, Dict, Optional

import aiohttp
import structlog
from bs4 import UnicodeDammit

from notecard.exceptions import FetchFailure

logger = structlog.get_logger()

DEFAULT_HEADERS = {
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.5',
}


def decode_body(url: str, raw: bytes, charset: Optional[str] = None) -> str:
    """
    Decode a page body.

    The Content-Type charset wins when it decodes cleanly; otherwise the
    encoding declared in the markup (<meta charset>, XML prolog) is used,
    then a detected one.

    Raises:
        FetchFailure: if no encoding produces text
    """
    known = [charset] if charset else []
    try:
        text = UnicodeDammit(raw, known_definite_encodings=known, is_html=True).unicode_markup
    except (UnicodeDecodeError, LookupError) as e:
        logger.warning("fetch_decode_failed", url=url, charset=charset, error=str(e))
        raise FetchFailure(url, reason=f"cannot decode response: {e}") from e

    if text is None:
        logger.warning("fetch_decode_failed", url=url, charset=charset)
        raise FetchFailure(url, reason="cannot decode response")
    return text


class HtmlFetcher:
    """
    Thin aiohttp wrapper used by every extractor.

    Every call opens its own session: there is no connection reuse,
    caching or retrying between calls.
    """

    def __init__(self, user_agent: str, request_timeout: Optional[float] = None):
        self.user_agent = user_agent
        self.request_timeout = request_timeout

    def build_headers(self, headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Default browser-like headers, the user agent, then caller overrides."""
        merged = dict(DEFAULT_HEADERS)
        merged['User-Agent'] = self.user_agent
        if headers:
            merged.update(headers)
        return merged

    def _session(self) -> aiohttp.ClientSession:
        if self.request_timeout:
            return aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.request_timeout)
            )
        return aiohttp.ClientSession()

    async def _get(
        self,
        url: str,
        headers: Optional[Dict[str, str]],
        params: Optional[Dict[str, str]],
        as_json: bool
    ) -> Any:
        request_headers = self.build_headers(headers)
        try:
            async with self._session() as session:
                async with session.get(url, headers=request_headers, params=params) as response:
                    if response.status < 200 or response.status >= 300:
                        logger.warning("fetch_bad_status", url=url, status=response.status)
                        raise FetchFailure(url, status=response.status)

                    raw = await response.read()
                    charset = response.charset

        except FetchFailure:
            raise
        except asyncio.TimeoutError as e:
            logger.warning("fetch_timeout", url=url)
            raise FetchFailure(url, reason="timeout") from e
        except aiohttp.ClientError as e:
            logger.warning("fetch_failed", url=url, error=str(e))
            raise FetchFailure(url, reason=str(e)) from e

        if not as_json:
            return decode_body(url, raw, charset)

        try:
            return json.loads(raw)
        except ValueError as e:
            raise FetchFailure(url, reason="response is not valid JSON") from e

    async def fetch_text(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None
    ) -> str:
        """
        Fetch a page and return its body decoded to text.

        Raises:
            FetchFailure: on network errors, a non-2xx status or an undecodable body
        """
        logger.debug("fetch_text", url=url)
        return await self._get(url, headers, params, as_json=False)

    async def fetch_json(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None
    ) -> Any:
        """
        Fetch a JSON document.

        Raises:
            FetchFailure: on network errors, a non-2xx status or an invalid body
        """
        logger.debug("fetch_json", url=url)
        json_headers = {'Accept': 'application/json'}
        if headers:
            json_headers.update(headers)
        return await self._get(url, json_headers, params, as_json=True)
