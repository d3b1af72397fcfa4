"""
Error types for theme fetching, rendering, and document patching.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class ThemeToolsError(Exception):
    """Base exception for all theme-tools errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message


class InputError(ThemeToolsError):
    """
    Raised when a theme source cannot be turned into a theme definition.

    Examples:
    - Malformed URL or missing local file
    - Non-2xx response or timeout while fetching
    - Response body is not JSON
    - JSON without a ``cssVars`` object
    """

    pass


class StructureParseError(ThemeToolsError):
    """
    Raised when an existing document does not have the expected shape.

    Examples:
    - Registry without a ``themes`` array literal
    - Non-record content inside the ``themes`` array
    - Unbalanced braces around a record block
    - Missing ``app.css``
    """

    pass


class ProtectedThemeError(ThemeToolsError):
    """Raised when removal of a protected theme id is requested."""

    pass


class ThemeNotFoundError(ThemeToolsError):
    """Raised when a theme to remove is not installed."""

    pass


class StubError(ThemeToolsError):
    """Raised when a bundled stub template is missing."""

    pass


class PartialApplyError(ThemeToolsError):
    """
    Raised when a target file fails after other targets were already written.

    Nothing is rolled back; ``updated`` lists the files that were changed so
    the user can reconcile them by hand.
    """

    def __init__(
        self,
        message: str,
        updated: list[Path],
        failed: Path,
        context: Optional["ErrorContext"] = None,
    ):
        self.updated = updated
        self.failed = failed
        super().__init__(message, context)


@dataclass
class ErrorContext:
    """
    Context information for an error.

    Attributes:
        file: Path to the document being processed
        line: Optional line number (1-indexed)
    """

    file: Path
    line: int | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "resources/js/conf/themes.ts:12"
        """
        if self.line:
            return f"{self.file}:{self.line}"
        return str(self.file)


def make_structure_error(message: str, file: Path | None = None) -> StructureParseError:
    """
    Helper to create a StructureParseError with optional file context.

    Args:
        message: Error description
        file: Optional path of the offending document

    Returns:
        StructureParseError with context if a file is given
    """
    if file is not None:
        return StructureParseError(message, ErrorContext(file=file))
    return StructureParseError(message)
