"""Exception hierarchy for Sanctifier."""

from .analysis import (
    AnalysisError,
    FileAccessError,
    ParsingError,
)
from .base import SanctifierError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    NotAContractProjectError,
)

__all__ = [
    "SanctifierError",
    "AnalysisError",
    "FileAccessError",
    "ParsingError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "NotAContractProjectError",
]
