"""Result record produced by every merge or install hook invocation."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from dotlayers.core.exceptions import ErrorCode, ValidationError


@dataclass(slots=True)
class HookResult:
    """Outcome of a single hook run.

    Attributes:
        success: Whether the hook succeeded
        error_code: Status code, set only on failure
        error_message: Human-readable failure reason
        files_modified: Paths the hook created or replaced
    """

    success: bool = True
    error_code: Optional[int] = None
    error_message: str = ""
    files_modified: List[str] = field(default_factory=list)

    @classmethod
    def ok(cls, *files: str) -> HookResult:
        return cls(success=True, files_modified=list(files))

    @classmethod
    def failure(cls, code: int, message: str = "") -> HookResult:
        code = int(code)
        if not message:
            try:
                message = ErrorCode(code).describe()
            except ValueError:
                message = f"exit code {code}"
        return cls(success=False, error_code=code, error_message=message)

    def set_error(self, code: int, message: str) -> None:
        """Turn this result into a failure."""
        self.success = False
        self.error_code = int(code)
        self.error_message = message

    def add_file(self, path: str) -> None:
        if path not in self.files_modified:
            self.files_modified.append(path)

    @property
    def is_success(self) -> bool:
        return self.success

    def validation_errors(self) -> List[str]:
        errors: List[str] = []
        if not isinstance(self.success, bool):
            errors.append(f"success must be a boolean: {self.success!r}")
        if self.success is False and self.error_code is None:
            errors.append("error_code is required when success is false")
        if self.error_code is not None and (
            isinstance(self.error_code, bool) or not isinstance(self.error_code, int)
        ):
            errors.append(f"error_code must be numeric: {self.error_code!r}")
        if not isinstance(self.files_modified, list):
            errors.append("files_modified must be a list")
        return errors

    def validate(self) -> None:
        errors = self.validation_errors()
        if errors:
            raise ValidationError("HookResult", errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "files_modified": list(self.files_modified),
        }


__all__ = ["HookResult"]
