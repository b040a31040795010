"""Request and response types for the reader and search APIs."""

from dataclasses import dataclass, field
from typing import Any, Optional

DEFAULT_SEARCH_LIMIT = 5


@dataclass
class ReadRequest:
    """
    Parameters for a single read (URL to LLM-friendly content) call.

    ``post`` selects the POST-with-form-body transport, needed for SPA pages
    whose route lives after a ``#``. Otherwise the URL is path-encoded into a
    GET request.
    """

    url: str
    post: bool = False
    response_format: Optional[str] = None
    headers: dict[str, str] = field(default_factory=dict)
    no_cache: bool = False
    proxy_url: Optional[str] = None
    target_selector: Optional[str] = None
    wait_for_selector: Optional[str] = None
    cookie: Optional[str] = None
    with_generated_alt: bool = False
    cache_tolerance: Optional[str] = None


@dataclass(frozen=True)
class ReadResponse:
    """Content returned by the reader API for one URL."""

    content: str
    url: str
    title: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"url": self.url}
        if self.title:
            result["title"] = self.title
        result["content"] = self.content
        return result


@dataclass
class SearchRequest:
    """Parameters for a web search call."""

    query: str
    sites: list[str] = field(default_factory=list)
    response_format: Optional[str] = None
    headers: dict[str, str] = field(default_factory=dict)
    limit: Optional[int] = None

    @property
    def effective_limit(self) -> int:
        """Result cap, falling back to DEFAULT_SEARCH_LIMIT when unset or non-positive."""
        if self.limit is None or self.limit <= 0:
            return DEFAULT_SEARCH_LIMIT
        return self.limit


@dataclass(frozen=True)
class SearchResult:
    """One search hit. Only ``content`` is guaranteed."""

    content: str
    title: Optional[str] = None
    url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.title:
            result["title"] = self.title
        if self.url:
            result["url"] = self.url
        result["content"] = self.content
        return result


@dataclass(frozen=True)
class SearchResponse:
    """Search results in API order."""

    query: str
    results: list[SearchResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "results": [result.to_dict() for result in self.results],
            "count": len(self.results),
        }
