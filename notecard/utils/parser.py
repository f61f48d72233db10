"""
Field parsing helpers.
Meta-tag lookup, CSS selection, regex extraction and text cleanup over a
parsed document or a JSON payload. Every helper is total: a missing field
yields None instead of raising.
"""

import json
import math
import re
from typing import Any, Iterable, Iterator, List, Optional, Sequence

from bs4 import BeautifulSoup

ELLIPSIS = "..."


def load_document(html: str) -> BeautifulSoup:
    """Parse raw HTML into a document handle."""
    return BeautifulSoup(html or "", 'html.parser')


def clean_text(text: Optional[str]) -> Optional[str]:
    """Collapse whitespace; None for blank input."""
    if text is None:
        return None
    text = re.sub(r'\s+', ' ', str(text)).strip()
    return text or None


def page_title(doc: BeautifulSoup) -> Optional[str]:
    """Text of the <title> element."""
    if doc.title is None:
        return None
    return clean_text(doc.title.get_text())


def meta_content(doc: BeautifulSoup, selectors: Sequence[str]) -> Optional[str]:
    """
    Return the first non-empty meta value among selectors.

    Args:
        doc: Parsed document
        selectors: CSS selectors in priority order, e.g.
            'meta[property="og:image"]' or 'link[rel="image_src"]'

    Returns:
        The element's `content`, or `href` for <link> elements, or None
    """
    for selector in selectors:
        for element in doc.select(selector):
            value = clean_text(element.get('content'))
            if not value and element.name == 'link':
                value = clean_text(element.get('href'))
            if value:
                return value
    return None


def select_text(doc: BeautifulSoup, selectors: Sequence[str]) -> Optional[str]:
    """Text of the first element matched by the first selector that yields any."""
    for selector in selectors:
        element = doc.select_one(selector)
        if element is None:
            continue
        value = clean_text(element.get_text(' '))
        if value:
            return value
    return None


def select_attr(doc: BeautifulSoup, selectors: Sequence[str], attr: str) -> Optional[str]:
    """Attribute of the first element matched by the first selector that yields any."""
    for selector in selectors:
        element = doc.select_one(selector)
        if element is None:
            continue
        value = clean_text(element.get(attr))
        if value:
            return value
    return None


def regex_extract(
    text: Optional[str],
    pattern: str,
    group: int = 1,
    flags: int = 0
) -> Optional[str]:
    """Single defensive regex match; None on no match or missing text."""
    if not text:
        return None
    match = re.search(pattern, text, flags)
    if not match:
        return None
    try:
        return match.group(group)
    except IndexError:
        return None


def truncate(text: Optional[str], max_len: int, suffix: str = ELLIPSIS) -> Optional[str]:
    """
    Hard-cut text to max_len characters and append suffix.

    Text within the bound is returned unchanged, so the result is never
    longer than max_len + len(suffix).
    """
    if not text or len(text) <= max_len:
        return text
    return text[:max(max_len, 0)] + suffix


def parse_int(value: Any) -> Optional[int]:
    """Parse an integer from a number or numeric string."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    digits = regex_extract(str(value), r'-?\d+', group=0)
    return int(digits) if digits is not None else None


def dig(data: Any, *path: Any) -> Any:
    """
    Walk nested dicts/lists; None when any level is missing.

    Example:
        dig(payload, 0, 'data', 'children', 0, 'data')
    """
    current = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return None
            current = current[key]
        else:
            if not isinstance(current, dict) or key not in current:
                return None
            current = current[key]
    return current


def json_ld_objects(doc: BeautifulSoup) -> List[Any]:
    """Parsed application/ld+json blocks; invalid blocks are skipped."""
    objects = []
    for script in doc.select('script[type="application/ld+json"]'):
        try:
            objects.append(json.loads(script.string or script.get_text() or '{}'))
        except ValueError:
            continue
    return objects


def iter_scripts(doc: BeautifulSoup) -> Iterator[str]:
    """Text of every inline <script>."""
    for script in doc.find_all('script'):
        content = script.string or script.get_text()
        if content:
            yield content


def script_containing(doc: BeautifulSoup, needles: Iterable[str]) -> Optional[str]:
    """Text of the first inline script that contains any of the needles."""
    needles = list(needles)
    for content in iter_scripts(doc):
        if any(needle in content for needle in needles):
            return content
    return None
