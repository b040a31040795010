"""Markdown formatter - human-readable prose output."""

from collections.abc import Mapping
from typing import Any, Optional, TextIO

from ..models.envelope import Failure
from .base import BaseFormatter

PREVIEW_LENGTH = 200


class MarkdownFormatter(BaseFormatter):
    """Markdown rendering of read and search payloads.

    A single record (mapping) becomes a titled document, a list of records
    becomes a numbered list of previews. Output goes to ``output_file`` when
    given, otherwise stdout.
    """

    _file: Optional[TextIO] = None

    def open(self) -> None:
        if self.output_file is not None and self._file is None:
            self.output_file.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.output_file, "w", encoding="utf-8")
            self.logger.debug(f"Writing markdown output to {self.output_file}")

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    @property
    def stream(self) -> TextIO:
        if self.output_file is not None:
            self.open()
            return self._file  # type: ignore[return-value]
        return super().stream

    def write_data(self, data: Any) -> None:
        if isinstance(data, Mapping):
            self._write_record(data)
        elif isinstance(data, (list, tuple)):
            self._write_records(data)
        else:
            self.write(f"{data}\n")

    def write_error(self, failure: Failure) -> None:
        self.write(f"**Error**: {failure.message}\n")

    def _write_record(self, record: Mapping[str, Any]) -> None:
        title = record.get("title")
        url = record.get("url")
        content = record.get("content")

        if isinstance(title, str):
            self.write(f"# {title}\n\n")
        if isinstance(url, str):
            self.write(f"**Source**: <{url}>\n\n")
        if isinstance(content, str):
            self.write(f"{content}\n")
        else:
            for key, value in record.items():
                self.write(f"**{key}**: {value}\n")

    def _write_records(self, records: Any) -> None:
        for position, record in enumerate(records, start=1):
            if not isinstance(record, Mapping):
                continue
            title = record.get("title")
            if not isinstance(title, str):
                continue

            self.write(f"## {position}. {title}\n")
            url = record.get("url")
            if isinstance(url, str):
                self.write(f"**URL**: <{url}>\n")
            content = record.get("content")
            if isinstance(content, str):
                if len(content) > PREVIEW_LENGTH:
                    content = content[:PREVIEW_LENGTH] + "..."
                self.write(f"{content}\n")
            self.write("\n")
