"""Normalization of raw API bodies into result types."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any, Optional

from ..models.api import SearchResult

logger = logging.getLogger(__name__)


def _text_field(record: dict[str, Any], name: str) -> str:
    value = record.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {name!r} is not a string")
    return value


def _records_to_results(records: list[Any]) -> list[SearchResult]:
    results = []
    for record in records:
        if not isinstance(record, dict):
            raise ValueError("search record is not an object")
        results.append(
            SearchResult(
                title=_text_field(record, "title") or None,
                url=_text_field(record, "url") or None,
                content=_text_field(record, "content"),
            )
        )
    return results


def _parse_data_object(body: str) -> Optional[list[SearchResult]]:
    """Parse ``{"data": [...]}``. An empty ``data`` array counts as a miss."""
    if not body.startswith("{"):
        return None
    try:
        payload = json.loads(body)
        if not isinstance(payload, dict):
            return None
        data = payload.get("data")
        if not isinstance(data, list) or not data:
            return None
        return _records_to_results(data)
    except ValueError as e:
        logger.debug(f"Search body is not a data object: {e}")
        return None


def _parse_bare_array(body: str) -> Optional[list[SearchResult]]:
    """Parse ``[...]``. An empty array is a valid, empty result."""
    if not body.startswith("["):
        return None
    try:
        payload = json.loads(body)
        if not isinstance(payload, list):
            return None
        return _records_to_results(payload)
    except ValueError as e:
        logger.debug(f"Search body is not a JSON array: {e}")
        return None


def _parse_lines(body: str) -> list[SearchResult]:
    return [SearchResult(content=line.strip()) for line in body.split("\n") if line.strip()]


_STRUCTURED_PARSERS: tuple[Callable[[str], Optional[list[SearchResult]]], ...] = (
    _parse_data_object,
    _parse_bare_array,
)


def parse_search_results(body: str) -> list[SearchResult]:
    """
    Turn a search response body into an ordered list of results.

    Structured parsers are tried in order on the trimmed body; the first one
    that returns a list wins. When none match, every non-blank line becomes a
    content-only result, so this never raises.

    Args:
        body: Raw response text

    Returns:
        Results in body order (empty for an empty body)
    """
    trimmed = body.strip()
    for parser in _STRUCTURED_PARSERS:
        results = parser(trimmed)
        if results is not None:
            return results

    logger.debug("Falling back to line-oriented search result parsing")
    return _parse_lines(body)


def extract_title(content: str) -> Optional[str]:
    """
    Return the text of the first level-1 Markdown heading.

    Examples:
        >>> extract_title("# Test Content\\n\\nThis is a test.")
        'Test Content'
        >>> extract_title("no heading") is None
        True
    """
    for line in content.split("\n"):
        line = line.strip()
        if line.startswith("# "):
            return line[2:]
    return None
