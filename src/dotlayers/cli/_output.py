"""Output formatting shared by every dotlayers command.

``--json`` output goes to stdout as one document per invocation; errors go
to stderr in either mode so scripted callers can keep stdout parseable.
"""
from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, Any, Dict, Optional

from dotlayers.core.exceptions import DotlayersError

if TYPE_CHECKING:
    from dotlayers.core.orchestrator import RunResult


class OutputFormatter:
    """Text or JSON rendering for command results."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def _dump(self, data: Any, *, stream=None) -> None:
        print(json.dumps(data, indent=self.indent, default=str), file=stream or sys.stdout)

    def success(
        self,
        data: Dict[str, Any],
        message: str,
        *,
        status: str = "success",
    ) -> None:
        """Report a completed action.

        Args:
            data: Fields merged into the JSON document
            message: Line printed in text mode
            status: Value of the JSON ``status`` field
        """
        if self.json_mode:
            self._dump({"status": status, **data})
        else:
            print(message)

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Report a failure on stderr; dotlayers errors carry their context."""
        msg = message or str(error)
        if not self.json_mode:
            print(f"Error: {msg}", file=sys.stderr)
            return
        output: Dict[str, Any] = {"error": error_code, "message": msg}
        if isinstance(error, DotlayersError):
            output["details"] = error.to_json_error()
        self._dump(output, stream=sys.stderr)

    def json_output(self, data: Any) -> None:
        self._dump(data)

    def text(self, message: str) -> None:
        if not self.json_mode:
            print(message)

    def run_summary(self, result: "RunResult") -> None:
        """Tally of an install run: the full record in JSON, one line of counts otherwise."""
        if self.json_mode:
            self._dump(result.to_dict())
            return
        prefix = "[DRY-RUN] " if result.dry_run else ""
        print(
            f"{prefix}{result.tools_processed} processed, {result.succeeded} succeeded, "
            f"{result.failed} failed, {result.skipped} skipped"
        )
        if result.failed_tools:
            print(f"Failed tools: {', '.join(result.failed_tools)}")


__all__ = ["OutputFormatter"]
