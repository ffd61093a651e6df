"""Exception hierarchy for Doxygen-to-Markdown conversion.

Only unrecoverable conditions are exceptions. Query misses and deliberate
symbol exclusions are ordinary control flow and never raise.
"""

from pathlib import Path
from typing import List, Optional, Union


class DoxygenMarkdownError(Exception):
    """Base class for every fatal error raised by this package."""


class ConfigError(DoxygenMarkdownError):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


class ConversionError(DoxygenMarkdownError):
    """Raised when an XML document is not well-formed."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.source = source
        self.line = line
        self.column = column
        location = source or "<xml>"
        if line is not None:
            location += f":{line}"
            if column is not None:
                location += f":{column}"
        super().__init__(f"{location}: {message}")


class IndexBuildError(DoxygenMarkdownError):
    """Raised when the compound directory or index artifact cannot be read or written."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(f"{message}: {path}" if path is not None else message)


class HeaderResolutionError(DoxygenMarkdownError):
    """Raised when the public header compound cannot be chosen unambiguously."""

    def __init__(self, message: str, candidates: Optional[List[str]] = None) -> None:
        self.candidates = candidates or []
        if self.candidates:
            message = f"{message} (candidates: {', '.join(self.candidates)})"
        super().__init__(message)


class OutputError(DoxygenMarkdownError):
    """Raised when an output artifact cannot be written or read back."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None) -> None:
        self.path = Path(path) if path is not None else None
        super().__init__(f"{message}: {path}" if path is not None else message)


class PathSyntaxError(ValueError):
    """Raised by strict path compilation for an unparseable query expression."""

    def __init__(self, message: str, path: str, position: Optional[int] = None) -> None:
        self.path = path
        self.position = position
        where = f" at offset {position}" if position is not None else ""
        super().__init__(f"{message}{where} in path {path!r}")
