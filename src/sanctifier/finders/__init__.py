"""Detector implementations: read a lowered SourceFile and produce findings.

Core detectors:
- auth_gaps: storage mutations without an authorization call
- panics: panic!/unwrap/expect inside functions
- arithmetic: unchecked + - * += -= *=
- ledger_size: oversized #[contracttype] layouts
- storage_collisions: repeated storage key literals
- gas: heuristic per-method cost
- complexity: per-function metrics

Supplementary: unsafe_patterns, events, upgrades, custom_rules.
"""

from .arithmetic import ArithmeticFinder
from .auth_gaps import AuthGapFinder
from .complexity import ComplexityFinder
from .custom_rules import CustomRuleEvaluator
from .events import EventFinder
from .gas import GasFinder
from .ledger_size import LedgerSizeFinder
from .panics import PanicFinder
from .storage_collision import StorageCollisionFinder
from .unsafe_patterns import UnsafePatternFinder
from .upgrades import UpgradeFinder

RULE_NAMES = frozenset(
    {
        AuthGapFinder.name,
        PanicFinder.name,
        ArithmeticFinder.name,
        LedgerSizeFinder.name,
        StorageCollisionFinder.name,
        GasFinder.name,
        ComplexityFinder.name,
        UnsafePatternFinder.name,
        EventFinder.name,
        UpgradeFinder.name,
        CustomRuleEvaluator.name,
    }
)

# Run only when listed in enabled_rules; every other detector always runs.
OPTIONAL_RULES = frozenset({GasFinder.name, ComplexityFinder.name, EventFinder.name, UpgradeFinder.name})

__all__ = [
    "ArithmeticFinder",
    "AuthGapFinder",
    "ComplexityFinder",
    "CustomRuleEvaluator",
    "EventFinder",
    "GasFinder",
    "LedgerSizeFinder",
    "OPTIONAL_RULES",
    "PanicFinder",
    "RULE_NAMES",
    "StorageCollisionFinder",
    "UnsafePatternFinder",
    "UpgradeFinder",
]
