"""Console output formatting utilities for typedci."""

from __future__ import annotations

import sys
from typing import Optional


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug

    def print_render_started(self, workflow: str, pipeline: str, job_count: int) -> None:
        """Print render start information."""
        print("\nRENDER STARTED", file=sys.stderr)
        print(f"Workflow: {workflow}", file=sys.stderr)
        print(f"Pipeline: {pipeline}", file=sys.stderr)
        print(f"Jobs: {job_count}", file=sys.stderr)

    def print_rendered(self, output: str, fmt: str) -> None:
        """Print where the rendered document went."""
        print(f"RENDERED: {output} ({fmt})", file=sys.stderr)

    def print_up_to_date(self, output: str) -> None:
        print(f"STATUS: up to date ({output})")

    def print_drift(self, output: str, diff: list[str]) -> None:
        """
        Print a diff between the committed document and a fresh render.

        Args:
            output: Path of the committed document
            diff: unified diff lines
        """
        print(f"STATUS: out of date ({output})")
        if self.debug or len(diff) <= 40:
            for line in diff:
                print(line.rstrip("\n"))
        else:
            for line in diff[:40]:
                print(line.rstrip("\n"))
            print(f"... {len(diff) - 40} more line(s), rerun with --debug for the full diff")

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: Exception) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exception(type(exc), exc, exc.__traceback__)
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message, file=sys.stderr)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
