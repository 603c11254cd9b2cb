from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorCode(str, Enum):
    UNKNOWN = "unknown"
    DOWNLOAD_ERROR = "download_error"
    UPLOAD_ERROR = "upload_error"
    STORE_ERROR = "store_error"
    PERMISSION_DENIED = "permission_denied"
    INVALID_FORMAT = "invalid_format"
    INVALID_ROLE = "invalid_role"


@dataclass
class Result(Generic[T]):
    """Outcome of an operation whose failure is expected and reported to the user."""

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None

    @staticmethod
    def success(value: T) -> "Result[T]":
        return Result(ok=True, value=value)

    @staticmethod
    def failure(error: str, code: ErrorCode = ErrorCode.UNKNOWN) -> "Result[T]":
        return Result(ok=False, error=error, error_code=code)

    @staticmethod
    def from_exception(exc: Exception, code: ErrorCode) -> "Result[T]":
        """Failure carrying the exception text, or its class name when the text is empty."""
        return Result(ok=False, error=str(exc) or exc.__class__.__name__, error_code=code)

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok else default
