"""Success/failure envelope wrapped around every rendered payload."""

from dataclasses import dataclass
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Success:
    """A completed operation and its payload."""

    data: Any = None


@dataclass(frozen=True)
class Failure:
    """A failed operation. Rendering one makes the command exit non-zero."""

    message: str
    code: Optional[str] = None

    @classmethod
    def from_exception(cls, error: BaseException) -> "Failure":
        return cls(message=str(error), code=getattr(error, "code", None))


Envelope = Union[Success, Failure]
