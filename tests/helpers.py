"""
HTML and aiohttp builders shared by the test modules.
"""

from unittest.mock import AsyncMock, MagicMock


def html_page(head: str = "", body: str = "") -> str:
    """Wrap head and body markup into a minimal HTML document."""
    return f"<html><head>{head}</head><body>{body}</body></html>"


def meta(attr: str, name: str, content: str) -> str:
    return f'<meta {attr}="{name}" content="{content}">'


def mock_aiohttp_session(status: int = 200, body=b"", error: Exception = None, charset: str = None):
    """
    Build a ClientSession stand-in for `async with session.get(...)`.
    A str body is served as UTF-8 bytes.

    Returns:
        (session, response) mocks
    """
    response = MagicMock()
    response.status = status
    if isinstance(body, str):
        body = body.encode("utf-8")
    response.read = AsyncMock(return_value=body)
    response.charset = charset

    get_ctx = MagicMock()
    get_ctx.__aenter__ = AsyncMock(return_value=response)
    get_ctx.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = get_ctx
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=False)

    return session, response
