"""Sanctifier - static analysis for Soroban smart contracts."""

__version__ = "0.1.0"

from .analyzer import Analyzer, run_recoverable  # noqa: E402
from .config import CustomRule, SanctifyConfig, load_config  # noqa: E402

__all__ = [
    "Analyzer",
    "CustomRule",
    "SanctifyConfig",
    "__version__",
    "load_config",
    "run_recoverable",
]
