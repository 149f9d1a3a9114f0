"""Finding records produced by the detectors.

Every record is a frozen dataclass created once by a detector. The only
post-emission change is ``with_prefix(path)``, which the driver uses to
qualify locations with the file they came from; it returns a new record.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any, Optional


class PanicKind(Enum):
    """Syntactic shapes that abort a contract call."""

    PANIC = "panic!"
    UNWRAP = "unwrap"
    EXPECT = "expect"


class SizeWarningLevel(Enum):
    APPROACHING_LIMIT = "ApproachingLimit"
    EXCEEDS_LIMIT = "ExceedsLimit"


class KeyKind(Enum):
    """Where a storage key literal was found."""

    CONST = "const"
    SYMBOL_NEW = "Symbol::new"
    SYMBOL_SHORT = "symbol_short!"


class EventIssueKind(Enum):
    INCONSISTENT_TOPICS = "inconsistent_topics"
    SYMBOL_SHORT_OPTIMIZATION = "symbol_short_optimization"


class UpgradeCategory(Enum):
    ADMIN_CONTROL = "admin_control"
    TIMELOCK = "timelock"
    INIT_PATTERN = "init_pattern"
    STORAGE_LAYOUT = "storage_layout"
    GOVERNANCE = "governance"


def _plain(value: Any) -> Any:
    """Convert enums (recursively) to their values for serialization."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


class _Record:
    """Mixin giving dataclass findings a JSON-ready ``to_dict``."""

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))  # type: ignore[call-overload]


class _Located(_Record):
    """Mixin for findings whose ``location`` can be qualified by a path."""

    location: str

    def with_prefix(self, path: str):
        if not path:
            return self
        return replace(self, location=f"{path}:{self.location}")  # type: ignore[type-var]


# ---------------------------------------------------------------------------
# Core findings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PanicIssue(_Located):
    """A ``panic!``, ``.unwrap()`` or ``.expect()`` inside a function body.

    Attributes:
        function_name: Enclosing function
        issue_type: Which shape matched
        location: ``"{function}:{line}"``
    """

    function_name: str
    issue_type: PanicKind
    location: str


@dataclass(frozen=True)
class ArithmeticIssue(_Located):
    """Unchecked arithmetic; one per (function, operator) pair.

    Attributes:
        operation: ``+``, ``-``, ``*``, ``+=``, ``-=`` or ``*=``
        suggestion: Checked or saturating alternative
        location: ``"{function}:{line of left operand}"``
    """

    function_name: str
    operation: str
    suggestion: str
    location: str


@dataclass(frozen=True)
class SizeWarning(_Record):
    """A persisted layout type whose estimated size is near or over the limit."""

    struct_name: str
    estimated_size: int
    limit: int
    level: SizeWarningLevel


@dataclass(frozen=True)
class StorageCollisionIssue(_Located):
    """One occurrence of a storage key literal that is used more than once.

    Attributes:
        key_value: The shared literal
        key_type: Source of this occurrence
        location: ``"{label}:{line}"`` where label is the const name or ``inline``
        message: Cross-reference to every other occurrence
    """

    key_value: str
    key_type: KeyKind
    location: str
    message: str


@dataclass(frozen=True)
class GasEstimationReport(_Record):
    function_name: str
    estimated_instructions: int
    estimated_memory_bytes: int


@dataclass(frozen=True)
class FunctionMetrics(_Record):
    name: str
    cyclomatic_complexity: int
    param_count: int
    max_nesting_depth: int
    loc: int
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class ContractMetrics(_Record):
    contract_path: str
    dependency_count: int
    functions: tuple[FunctionMetrics, ...] = ()

    def with_prefix(self, path: str) -> ContractMetrics:
        if not path:
            return self
        return replace(self, contract_path=path)


# ---------------------------------------------------------------------------
# Supplementary findings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UnsafePattern(_Record):
    """A panicking call anywhere in the file, with its source text."""

    pattern_type: PanicKind
    line: int
    snippet: str


@dataclass(frozen=True)
class EventIssue(_Located):
    function_name: str
    event_name: str
    issue_type: EventIssueKind
    location: str
    message: str


@dataclass(frozen=True)
class UpgradeFinding(_Located):
    category: UpgradeCategory
    function_name: Optional[str]
    location: str
    message: str
    suggestion: str


@dataclass(frozen=True)
class UpgradeReport(_Record):
    """Upgrade, admin and initialization surface of a contract."""

    findings: tuple[UpgradeFinding, ...] = ()
    upgrade_mechanisms: tuple[str, ...] = ()
    init_functions: tuple[str, ...] = ()
    storage_types: tuple[str, ...] = ()

    def with_prefix(self, path: str) -> UpgradeReport:
        if not path:
            return self
        return replace(self, findings=tuple(f.with_prefix(path) for f in self.findings))


@dataclass(frozen=True)
class CustomRuleMatch(_Record):
    rule_name: str
    line: int
    snippet: str


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnalysisReport(_Record):
    """Every detector's output for one source file.

    Detectors that are disabled in the configuration leave their field at
    the empty default.
    """

    path: str = ""
    auth_gaps: tuple[str, ...] = ()
    panic_issues: tuple[PanicIssue, ...] = ()
    arithmetic_issues: tuple[ArithmeticIssue, ...] = ()
    size_warnings: tuple[SizeWarning, ...] = ()
    storage_collisions: tuple[StorageCollisionIssue, ...] = ()
    gas_estimates: tuple[GasEstimationReport, ...] = ()
    unsafe_patterns: tuple[UnsafePattern, ...] = ()
    event_issues: tuple[EventIssue, ...] = ()
    upgrade_report: UpgradeReport = field(default_factory=UpgradeReport)
    custom_rule_matches: tuple[CustomRuleMatch, ...] = ()
    metrics: Optional[ContractMetrics] = None

    @property
    def issue_count(self) -> int:
        """Number of security findings (metrics and estimates excluded)."""
        return (
            len(self.auth_gaps)
            + len(self.panic_issues)
            + len(self.arithmetic_issues)
            + len(self.size_warnings)
            + len(self.storage_collisions)
            + len(self.event_issues)
            + len(self.upgrade_report.findings)
            + len(self.custom_rule_matches)
        )

    def with_prefix(self, path: str) -> AnalysisReport:
        """Qualify every location in the report with ``path``."""
        if not path:
            return self
        return replace(
            self,
            path=path,
            auth_gaps=tuple(f"{path}:{name}" for name in self.auth_gaps),
            panic_issues=tuple(i.with_prefix(path) for i in self.panic_issues),
            arithmetic_issues=tuple(i.with_prefix(path) for i in self.arithmetic_issues),
            storage_collisions=tuple(i.with_prefix(path) for i in self.storage_collisions),
            event_issues=tuple(i.with_prefix(path) for i in self.event_issues),
            upgrade_report=self.upgrade_report.with_prefix(path),
            metrics=self.metrics.with_prefix(path) if self.metrics is not None else None,
        )


@dataclass(frozen=True)
class AnalysisContext:
    """Run-level facts the formatters need besides the reports."""

    target: str
    files_scanned: int = 0
    ledger_limit: int = 0
