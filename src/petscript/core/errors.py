"""
Error types for petscript catalog loading, configuration, and diagnostics.

Script content never raises: structural problems are recorded in the tree as
``ParseErrorNode`` entries. The exceptions here cover everything around the
parser (catalog files, config files, HTTP fetches).
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class PetScriptError(Exception):
    """Base exception for all petscript errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class CatalogError(PetScriptError):
    """
    Raised when a name catalog file cannot be used.

    Examples:
    - Missing abilities or pets JSON file
    - Invalid JSON
    - Top-level value is not an id-to-name object
    """

    pass


class ScriptEncodingError(PetScriptError):
    """Raised when a script file is not valid UTF-8; context points at the bad byte."""

    pass


class CatalogNotLoadedError(PetScriptError):
    """Raised when a resolver is queried before its catalog was loaded."""

    pass


class ConfigError(PetScriptError):
    """
    Raised when petscript.toml is invalid.

    Examples:
    - TOML syntax errors
    - A value of the wrong type (e.g. ``abilities = 3``)
    """

    pass


class FetchError(PetScriptError):
    """Raised when the game data API returns a non-success response."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


@dataclass
class ErrorContext:
    """
    Source location of a diagnostic.

    Attributes:
        file: Path to the script file
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source lines around the error
    """

    file: Path
    line: int
    column: int
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "script.txt:10:5"
        """
        location = f"{self.file}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format code snippet with line numbers and error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippet starts up to 2 lines before the error line
        start_line = max(1, self.line - 2)

        for i, line in enumerate(lines):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^^^")

        return "\n".join(formatted)


def make_error_context(file: Path, lines: list[str], line: int) -> ErrorContext:
    """
    Build an ErrorContext pointing at the first non-blank column of ``line``.

    Args:
        file: Script path
        lines: All script lines
        line: Line number (1-indexed)

    Returns:
        ErrorContext with a snippet of up to two lines on either side
    """
    if 1 <= line <= len(lines):
        text = lines[line - 1]
        column = len(text) - len(text.lstrip()) + 1
    else:
        column = 1
    start = max(1, line - 2)
    end = min(len(lines), line + 2)
    snippet = "\n".join(lines[start - 1 : end]) if lines else None
    return ErrorContext(file=file, line=line, column=column, snippet=snippet)
