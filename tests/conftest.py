"""
Shared fixtures for extractor tests.
No test makes a real network request.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from notecard.utils.fetcher import HtmlFetcher

from helpers import html_page


@pytest.fixture
def fetcher():
    """Fetcher double; tests set fetch_text / fetch_json return values."""
    mock = MagicMock(spec=HtmlFetcher)
    mock.fetch_text = AsyncMock(return_value=html_page())
    mock.fetch_json = AsyncMock(return_value={})
    return mock
