"""Analysis-related exceptions: file access and parsing."""

from pathlib import Path

from .base import SanctifierError


class AnalysisError(SanctifierError):
    """Base class for analysis-related errors."""
    pass


class FileAccessError(AnalysisError):
    """Raised when a source file cannot be accessed or read."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ParsingError(AnalysisError):
    """Raised when source text cannot be turned into a syntax tree."""

    def __init__(self, reason: str, filepath: str = "<source>"):
        super().__init__(
            f"Failed to parse Rust source: {filepath}",
            details={"filepath": filepath, "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason
