"""Data models for jina_cli."""

from .api import (
    DEFAULT_SEARCH_LIMIT,
    ReadRequest,
    ReadResponse,
    SearchRequest,
    SearchResponse,
    SearchResult,
)
from .config import DEFAULT_READ_API_URL, DEFAULT_SEARCH_API_URL, Settings
from .envelope import Envelope, Failure, Success

__all__ = [
    "DEFAULT_READ_API_URL",
    "DEFAULT_SEARCH_API_URL",
    "DEFAULT_SEARCH_LIMIT",
    "Envelope",
    "Failure",
    "ReadRequest",
    "ReadResponse",
    "SearchRequest",
    "SearchResponse",
    "SearchResult",
    "Settings",
    "Success",
]
