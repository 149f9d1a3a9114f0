"""Analyzer facade: runs the detectors over one source file.

Every detector entry point goes through ``run_recoverable`` so that an
unparsable file or an unexpected tree shape degrades that detector's
output to its empty result instead of aborting the run.

Usage:
    analyzer = Analyzer(load_config())
    report = analyzer.analyze(source_text, path="src/lib.rs")
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, TypeVar

from .config import CustomRule, SanctifyConfig
from .finders import (
    ArithmeticFinder,
    AuthGapFinder,
    ComplexityFinder,
    CustomRuleEvaluator,
    EventFinder,
    GasFinder,
    LedgerSizeFinder,
    OPTIONAL_RULES,
    PanicFinder,
    StorageCollisionFinder,
    UnsafePatternFinder,
    UpgradeFinder,
)
from .logging_config import get_logger
from .models import (
    AnalysisReport,
    ArithmeticIssue,
    ContractMetrics,
    CustomRuleMatch,
    EventIssue,
    GasEstimationReport,
    PanicIssue,
    SizeWarning,
    StorageCollisionIssue,
    UnsafePattern,
    UpgradeReport,
)
from .scanning import SourceFile, parse_source

logger = get_logger(__name__)

T = TypeVar("T")


def run_recoverable(fn: Callable[[], T], default: Callable[[], T], label: str = "") -> T:
    """Call ``fn``; on any exception log it and return ``default()``.

    ``RecursionError`` from pathologically deep input is an ``Exception``
    too, so it is contained here as well.
    """
    try:
        return fn()
    except Exception as e:
        logger.debug(f"{label or getattr(fn, '__name__', 'detector')} failed: {e!r}")
        return default()


class Analyzer:
    """Holds the configuration and dispatches source text to each detector.

    The analyzer keeps no state between calls; one instance can analyze
    any number of files, from any number of threads.
    """

    def __init__(self, config: Optional[SanctifyConfig] = None) -> None:
        self.config = config or SanctifyConfig()

    # ------------------------------------------------------------------
    # Per-detector entry points (source text in, findings out)
    # ------------------------------------------------------------------

    def scan_auth_gaps(self, source: str) -> list[str]:
        return self._on_source(source, AuthGapFinder().find, list, "auth_gaps")

    def scan_panics(self, source: str) -> list[PanicIssue]:
        return self._on_source(source, PanicFinder().find, list, "panics")

    def scan_arithmetic_overflow(self, source: str) -> list[ArithmeticIssue]:
        return self._on_source(source, ArithmeticFinder().find, list, "arithmetic")

    def analyze_ledger_size(self, source: str) -> list[SizeWarning]:
        return self._on_source(source, self._ledger_finder().find, list, "ledger_size")

    def scan_storage_collisions(self, source: str) -> list[StorageCollisionIssue]:
        return self._on_source(source, StorageCollisionFinder().find, list, "storage_collisions")

    def scan_gas_estimation(self, source: str) -> list[GasEstimationReport]:
        return self._on_source(source, GasFinder().find, list, "gas")

    def analyze_complexity(self, source: str, contract_path: str = "") -> ContractMetrics:
        return self._on_source(
            source,
            lambda syntax: ComplexityFinder().find(syntax, contract_path),
            lambda: ContractMetrics(contract_path=contract_path, dependency_count=0),
            "complexity",
        )

    def analyze_unsafe_patterns(self, source: str) -> list[UnsafePattern]:
        return self._on_source(source, UnsafePatternFinder().find, list, "unsafe_patterns")

    def scan_events(self, source: str) -> list[EventIssue]:
        return self._on_source(source, EventFinder().find, list, "events")

    def analyze_upgrade_patterns(self, source: str) -> UpgradeReport:
        return self._on_source(source, UpgradeFinder().find, UpgradeReport, "upgrades")

    def analyze_custom_rules(
        self, source: str, rules: Optional[Iterable[CustomRule]] = None
    ) -> list[CustomRuleMatch]:
        """Evaluate regex rules (the configured ones by default) line by line."""
        rules = self.config.custom_rules if rules is None else rules
        return run_recoverable(lambda: CustomRuleEvaluator(rules).evaluate(source), list, "custom_rules")

    # ------------------------------------------------------------------
    # Whole-file analysis
    # ------------------------------------------------------------------

    def analyze(self, source: str, path: str = "") -> AnalysisReport:
        """Parse once and run the detectors, each under its own boundary.

        The core scans (auth gaps, panics, arithmetic, ledger size, storage
        collisions, unsafe patterns) always run. Gas, complexity, events and
        upgrades run only when named in ``enabled_rules``. Custom rules run
        whenever the configuration holds any.

        Locations are left unqualified; call ``report.with_prefix(path)`` to
        attach the file path.
        """
        enabled = self.config.enabled_rules
        syntax = run_recoverable(lambda: parse_source(source, path or "<source>"), lambda: None, "parse")
        if syntax is None:
            logger.debug(f"{path or '<source>'}: unparsable, syntax detectors skipped")

        def run(rule: str, fn: Callable[[SourceFile], T], default: Callable[[], T]) -> T:
            if syntax is None or (rule in OPTIONAL_RULES and rule not in enabled):
                return default()
            return run_recoverable(lambda: fn(syntax), default, rule)

        metrics = run(
            "complexity",
            lambda s: ComplexityFinder().find(s, path),
            lambda: ContractMetrics(contract_path=path, dependency_count=0),
        )
        custom = self.analyze_custom_rules(source) if self.config.custom_rules else []

        return AnalysisReport(
            path=path,
            auth_gaps=tuple(run("auth_gaps", AuthGapFinder().find, list)),
            panic_issues=tuple(run("panics", PanicFinder().find, list)),
            arithmetic_issues=tuple(run("arithmetic", ArithmeticFinder().find, list)),
            size_warnings=tuple(run("ledger_size", self._ledger_finder().find, list)),
            storage_collisions=tuple(run("storage_collisions", StorageCollisionFinder().find, list)),
            gas_estimates=tuple(run("gas", GasFinder().find, list)),
            unsafe_patterns=tuple(run("unsafe_patterns", UnsafePatternFinder().find, list)),
            event_issues=tuple(run("events", EventFinder().find, list)),
            upgrade_report=run("upgrades", UpgradeFinder().find, UpgradeReport),
            custom_rule_matches=tuple(custom),
            metrics=metrics if "complexity" in enabled else None,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ledger_finder(self) -> LedgerSizeFinder:
        return LedgerSizeFinder(
            limit=self.config.ledger_limit,
            approaching_threshold=self.config.approaching_threshold,
            strict_mode=self.config.strict_mode,
        )

    def _on_source(
        self,
        source: str,
        fn: Callable[[SourceFile], T],
        default: Callable[[], T],
        label: str,
    ) -> T:
        def run() -> T:
            syntax = parse_source(source)
            if syntax is None:
                return default()
            return fn(syntax)

        return run_recoverable(run, default, label)
