"""JSON formatter - success/error envelope on stdout."""

import json
from pathlib import Path
from typing import Any, Optional, TextIO, Union

from ..models.envelope import Failure
from .base import BaseFormatter


def _is_empty(data: Any) -> bool:
    if data is None:
        return True
    return isinstance(data, (str, list, tuple, dict)) and len(data) == 0


class JSONFormatter(BaseFormatter):
    """JSON envelope for scripts.

    Success: ``{"success": true, "data": ...}`` (``data`` omitted when empty).
    Failure: ``{"success": false, "error": "...", "code": "..."}``.
    Keys keep insertion order, HTML characters are not escaped and
    non-ASCII text is written as-is.
    """

    def __init__(
        self,
        output_file: Optional[Union[str, Path]] = None,
        stream: Optional[TextIO] = None,
        indent: Optional[int] = 2,
    ):
        super().__init__(output_file=None, stream=stream)
        if output_file:
            self.logger.warning(f"JSON output is always written to stdout; ignoring output file {output_file}")
        self.indent = indent

    def _dump(self, document: dict[str, Any]) -> None:
        self.write(json.dumps(document, indent=self.indent, ensure_ascii=False, default=str) + "\n")

    def write_data(self, data: Any) -> None:
        document: dict[str, Any] = {"success": True}
        if not _is_empty(data):
            document["data"] = data
        self._dump(document)

    def write_error(self, failure: Failure) -> None:
        document: dict[str, Any] = {"success": False, "error": failure.message}
        if failure.code:
            document["code"] = failure.code
        self._dump(document)
