"""Result envelope returned by every repository operation"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from ..error_handling import ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class GitError:
    """Structured failure carried by a failed GitResult."""

    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class GitResult(Generic[T]):
    """Tagged success/failure wrapper.

    Exactly one side is populated: ``success=True`` with ``data`` (which may
    legitimately be ``None`` for operations without a payload), or
    ``success=False`` with ``error``. Use :meth:`ok` and :meth:`fail` rather
    than the constructor.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[GitError] = None

    def __post_init__(self):
        if self.success and self.error is not None:
            raise ValueError("A successful GitResult cannot carry an error")
        if not self.success and self.error is None:
            raise ValueError("A failed GitResult must carry an error")
        if not self.success and self.data is not None:
            raise ValueError("A failed GitResult cannot carry data")

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "GitResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> "GitResult[T]":
        return cls(success=False, error=GitError(kind=kind, message=message))
