"""
Tagged success/error value returned by service operations.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    INVALID_INPUT = "InvalidInput"
    NOT_FOUND = "NotFound"
    DUPLICATE_NAME = "DuplicateName"
    UNAUTHORIZED = "Unauthorized"
    PLAYER_NOT_FOUND = "PlayerNotFound"
    STORAGE_ERROR = "StorageError"


@dataclass(frozen=True)
class Error:
    kind: ErrorKind
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "message": self.message}


@dataclass(frozen=True)
class Result(Generic[T]):
    """Exactly one of value / error is meaningful; check is_ok first."""
    value: T | None = None
    error: Error | None = None

    @classmethod
    def ok(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def err(cls, kind: ErrorKind, message: str) -> Result[T]:
        return cls(error=Error(kind, message))

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise ValueError carrying the error message."""
        if self.error is not None:
            raise ValueError(f"{self.error.kind.value}: {self.error.message}")
        return self.value  # type: ignore[return-value]
