"""HTTP client and response normalization for jina_cli."""

from .client import JinaClient, encode_path_segment
from .parsing import extract_title, parse_search_results

__all__ = [
    "JinaClient",
    "encode_path_segment",
    "extract_title",
    "parse_search_results",
]
