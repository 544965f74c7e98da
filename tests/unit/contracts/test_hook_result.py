"""HookResult contract tests."""
from __future__ import annotations

import pytest

from dotlayers.core.contracts import HookResult
from dotlayers.core.exceptions import ErrorCode, ValidationError


class TestHookResult:
    def test_ok_records_files(self) -> None:
        result = HookResult.ok("/a", "/b")
        assert result.is_success
        assert result.error_code is None
        assert result.files_modified == ["/a", "/b"]
        result.validate()

    def test_failure_uses_canonical_message(self) -> None:
        result = HookResult.failure(ErrorCode.NOT_FOUND)
        assert not result.success
        assert result.error_code == 3
        assert result.error_message == "File or resource not found"

    def test_failure_with_script_exit_code(self) -> None:
        result = HookResult.failure(42)
        assert result.error_code == 42
        assert result.error_message == "exit code 42"

    def test_add_file_deduplicates(self) -> None:
        result = HookResult.ok()
        result.add_file("/x")
        result.add_file("/x")
        assert result.files_modified == ["/x"]

    def test_set_error(self) -> None:
        result = HookResult.ok()
        result.set_error(ErrorCode.BACKUP, "disk full")
        assert not result.is_success
        assert result.to_dict() == {
            "success": False,
            "error_code": 7,
            "error_message": "disk full",
            "files_modified": [],
        }

    def test_failed_result_requires_code(self) -> None:
        result = HookResult(success=False)
        with pytest.raises(ValidationError, match="error_code is required"):
            result.validate()
