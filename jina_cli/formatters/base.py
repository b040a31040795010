"""Base formatter interface."""

import logging
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import Any, Optional, TextIO, Union

from ..models.envelope import Envelope, Failure


@dataclass(frozen=True)
class RenderOutcome:
    """Result of rendering an envelope. ``failed`` is set for Failure envelopes."""

    failed: bool = False

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0


class BaseFormatter(ABC):
    """Base class for output formatters.

    Formatters write an envelope (success payload or failure message) to
    their output. They never terminate the process: ``render`` reports a
    failure through ``RenderOutcome`` and the caller picks the exit code.

    Formatters are context managers so that any output file they own is
    closed on every exit path.
    """

    def __init__(
        self,
        output_file: Optional[Union[str, Path]] = None,
        stream: Optional[TextIO] = None,
    ):
        """Initialize formatter.

        Args:
            output_file: Optional file to write to instead of stdout
            stream: Optional stream overriding stdout (used by tests)
        """
        self.output_file = Path(output_file) if output_file else None
        self._stream = stream
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def __enter__(self) -> "BaseFormatter":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def open(self) -> None:  # noqa: B027
        """Acquire output resources. No-op for stdout-only formatters."""

    def close(self) -> None:  # noqa: B027
        """Release output resources. No-op for stdout-only formatters."""

    @property
    def stream(self) -> TextIO:
        """Destination stream, resolved at write time so stdout capture works."""
        return self._stream or sys.stdout

    def write(self, text: str) -> None:
        self.stream.write(text)

    @abstractmethod
    def write_data(self, data: Any) -> None:
        """Write a success payload.

        Args:
            data: Payload (mapping, list, or scalar)
        """
        pass

    @abstractmethod
    def write_error(self, failure: Failure) -> None:
        """Write a failure message.

        Args:
            failure: Failure envelope
        """
        pass

    def render(self, envelope: Envelope) -> RenderOutcome:
        """Write an envelope and report whether it was a failure.

        Args:
            envelope: Success or Failure

        Returns:
            RenderOutcome with ``failed`` set for Failure envelopes
        """
        if isinstance(envelope, Failure):
            self.write_error(envelope)
            self.stream.flush()
            return RenderOutcome(failed=True)

        self.write_data(envelope.data)
        self.stream.flush()
        return RenderOutcome()

    def render_error(self, error: BaseException) -> RenderOutcome:
        """Render an exception as a Failure envelope."""
        return self.render(Failure.from_exception(error))
