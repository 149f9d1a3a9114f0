"""Configuration exceptions: paths, settings, project detection."""

from pathlib import Path
from typing import Any

from .base import SanctifierError


class ConfigurationError(SanctifierError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when a provided path is invalid."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class NotAContractProjectError(ConfigurationError):
    """Raised when the analysis target is not a recognizable contract project."""

    def __init__(self, path: Path):
        super().__init__(
            f"{path} is not a valid Soroban project",
            details={"path": str(path), "reason": "missing Cargo.toml or .rs source"},
        )
        self.path = path
