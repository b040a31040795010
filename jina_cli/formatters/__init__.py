"""Output formatters for command results."""

from pathlib import Path
from typing import Optional, TextIO, Union

from .base import BaseFormatter, RenderOutcome
from .json import JSONFormatter
from .markdown import MarkdownFormatter

__all__ = [
    "BaseFormatter",
    "JSONFormatter",
    "MarkdownFormatter",
    "RenderOutcome",
    "get_formatter",
]


def get_formatter(
    format_name: Optional[str],
    output_file: Optional[Union[str, Path]] = None,
    stream: Optional[TextIO] = None,
) -> BaseFormatter:
    """Get formatter instance by name.

    Unknown or missing names fall back to JSON so that scripts always get an
    envelope they can parse.

    Args:
        format_name: Format name ('json', 'markdown')
        output_file: Optional output file (Markdown only)
        stream: Optional stream overriding stdout

    Returns:
        Formatter instance
    """
    if (format_name or "").lower() == "markdown":
        return MarkdownFormatter(output_file=output_file, stream=stream)
    return JSONFormatter(output_file=output_file, stream=stream)
