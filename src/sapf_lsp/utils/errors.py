"""
Error types and source location tracking for the SAPF language server.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """
    Represents a location in a source file or data file.

    Attributes:
        line: 0-indexed line number
        column: 0-indexed column number
        filename: Optional filename or URI for error reporting
    """

    line: int
    column: int
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line + 1}:{self.column + 1}"
        return f"{self.line + 1}:{self.column + 1}"


class SapfLspError(Exception):
    """Base exception for all sapf-lsp errors."""

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
    ) -> None:
        self.message = message
        self.location = location
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location:
            return f"[{self.location}] {self.message}"
        return self.message


class DictionaryLoadError(SapfLspError):
    """Raised when the bundled word documentation is missing or corrupt."""

    pass


class DocumentNotFoundError(SapfLspError):
    """Raised when a document operation targets a URI that is not open."""

    def __init__(self, uri: str) -> None:
        self.uri = uri
        super().__init__(f"Document not open: {uri}")


class StaleVersionError(SapfLspError):
    """Raised when a change does not advance the document version."""

    def __init__(self, uri: str, current: int, received: int) -> None:
        self.uri = uri
        self.current = current
        self.received = received
        super().__init__(
            f"Version {received} for {uri} does not advance current version {current}"
        )
