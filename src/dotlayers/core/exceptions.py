from __future__ import annotations

from enum import IntEnum
from typing import Any, Dict, Iterable, List, Mapping


class ErrorCode(IntEnum):
    """Closed status taxonomy shared by the whole pipeline."""

    OK = 0
    GENERIC = 1
    INVALID_INPUT = 2
    NOT_FOUND = 3
    PERMISSION = 4
    VALIDATION = 5
    DEPENDENCY = 6
    BACKUP = 7

    def describe(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    ErrorCode.OK: "Success",
    ErrorCode.GENERIC: "Operation failed",
    ErrorCode.INVALID_INPUT: "Invalid input or arguments",
    ErrorCode.NOT_FOUND: "File or resource not found",
    ErrorCode.PERMISSION: "Permission denied",
    ErrorCode.VALIDATION: "Validation failed",
    ErrorCode.DEPENDENCY: "Missing required dependency",
    ErrorCode.BACKUP: "Backup operation failed",
}


class DotlayersError(Exception):
    """Base exception for dotlayers."""

    code: ErrorCode = ErrorCode.GENERIC
    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message or self.code.describe())
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "status": int(self.code),
            "context": self.context,
        }


class InvalidInputError(DotlayersError):
    """Raised when a caller passes missing or malformed arguments."""

    code = ErrorCode.INVALID_INPUT


class NotFoundError(DotlayersError):
    """Raised when a file, layer, repository or strategy cannot be found."""

    code = ErrorCode.NOT_FOUND


class PermissionDeniedError(DotlayersError):
    """Raised when the filesystem refuses an operation."""

    code = ErrorCode.PERMISSION


class ValidationError(DotlayersError):
    """Raised when a record or document violates one or more rules.

    ``errors`` always holds every violated rule, never only the first.
    """

    code = ErrorCode.VALIDATION

    def __init__(
        self,
        subject: str,
        errors: Iterable[str],
        *,
        title: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.subject = subject
        self.errors: List[str] = list(errors)
        lines = [title or f"{subject} validation failed:"]
        lines.extend(f"  - {err}" for err in self.errors)
        super().__init__("\n".join(lines), context=context)

    def to_json_error(self) -> Dict[str, Any]:
        payload = super().to_json_error()
        payload["errors"] = list(self.errors)
        return payload


class DependencyError(DotlayersError):
    """Raised when an external program (git, bash) fails or is missing."""

    code = ErrorCode.DEPENDENCY


class BackupError(DotlayersError):
    """Raised when a pre-overwrite backup cannot be taken."""

    code = ErrorCode.BACKUP


def code_of(exc: BaseException) -> ErrorCode:
    """Map any exception onto the status taxonomy."""
    if isinstance(exc, DotlayersError):
        return exc.code
    if isinstance(exc, PermissionError):
        return ErrorCode.PERMISSION
    if isinstance(exc, FileNotFoundError):
        return ErrorCode.NOT_FOUND
    return ErrorCode.GENERIC


__all__ = [
    "ErrorCode",
    "DotlayersError",
    "InvalidInputError",
    "NotFoundError",
    "PermissionDeniedError",
    "ValidationError",
    "DependencyError",
    "BackupError",
    "code_of",
]
