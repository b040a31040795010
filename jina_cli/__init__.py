"""
jina_cli - Read web pages and search the web as LLM-friendly text.

Usage:
    from jina_cli import ConfigStore, JinaClient, ReadRequest

    settings = ConfigStore().load()

    with JinaClient.from_settings(settings) as client:
        response = client.read(ReadRequest(url="https://example.com"))
        print(response.title)
"""

__version__ = "1.0.0"

from .config import ConfigStore, mask_sensitive
from .errors import (
    ConfigError,
    HTTPStatusError,
    JinaError,
    RequestConstructionError,
    TransportError,
    UsageError,
)
from .formatters import JSONFormatter, MarkdownFormatter, RenderOutcome, get_formatter
from .http import JinaClient, extract_title, parse_search_results
from .models import (
    Failure,
    ReadRequest,
    ReadResponse,
    SearchRequest,
    SearchResponse,
    SearchResult,
    Settings,
    Success,
)

__all__ = [
    "__version__",
    # Client
    "JinaClient",
    "extract_title",
    "parse_search_results",
    # Config
    "ConfigStore",
    "Settings",
    "mask_sensitive",
    # Models
    "ReadRequest",
    "ReadResponse",
    "SearchRequest",
    "SearchResponse",
    "SearchResult",
    "Success",
    "Failure",
    # Output
    "JSONFormatter",
    "MarkdownFormatter",
    "RenderOutcome",
    "get_formatter",
    # Errors
    "JinaError",
    "ConfigError",
    "HTTPStatusError",
    "RequestConstructionError",
    "TransportError",
    "UsageError",
]
