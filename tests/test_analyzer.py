"""Tests for the Analyzer facade and the failure boundary."""

from sanctifier.analyzer import Analyzer, run_recoverable
from sanctifier.config import SanctifyConfig
from sanctifier.models import (
    AnalysisReport,
    ContractMetrics,
    PanicKind,
    SizeWarningLevel,
    UpgradeReport,
)


class TestRunRecoverable:
    def test_returns_value(self):
        assert run_recoverable(lambda: [1], list, "ok") == [1]

    def test_exception_becomes_default(self):
        def boom():
            raise RuntimeError("unexpected tree shape")

        assert run_recoverable(boom, list, "boom") == []

    def test_recursion_error_contained(self):
        def recurse():
            return recurse()

        assert run_recoverable(recurse, UpgradeReport, "deep") == UpgradeReport()


class TestEntryPoints:
    def test_add_scenario(self, add_contract):
        analyzer = Analyzer()
        assert analyzer.scan_auth_gaps(add_contract) == []
        assert analyzer.scan_panics(add_contract) == []
        issues = analyzer.scan_arithmetic_overflow(add_contract)
        assert [i.operation for i in issues] == ["+"]
        assert "checked_add" in issues[0].suggestion

    def test_ledger_limit_scenario(self):
        source = "#[contracttype]\npub struct Blob {\n    data: Bytes,\n}\n"
        warnings = Analyzer(SanctifyConfig(ledger_limit=50)).analyze_ledger_size(source)
        assert len(warnings) == 1
        assert warnings[0].estimated_size == 64
        assert warnings[0].level is SizeWarningLevel.EXCEEDS_LIMIT

    def test_panic_scenario(self, panic_contract):
        issues = Analyzer().scan_panics(panic_contract)
        assert len(issues) == 3
        assert {i.issue_type for i in issues} == set(PanicKind)

    def test_storage_collision_scenario(self):
        source = (
            'const KEY_A: &str = "collision";\n'
            'const KEY_B: &str = "collision";\n'
            'fn f(env: Env) { let s = Symbol::new(&env, "collision"); }\n'
        )
        assert len(Analyzer().scan_storage_collisions(source)) == 3

    def test_unparsable_input_yields_empty_results(self, broken_source):
        analyzer = Analyzer()
        assert analyzer.scan_auth_gaps(broken_source) == []
        assert analyzer.scan_panics(broken_source) == []
        assert analyzer.scan_arithmetic_overflow(broken_source) == []
        assert analyzer.analyze_ledger_size(broken_source) == []
        assert analyzer.scan_storage_collisions(broken_source) == []
        assert analyzer.scan_gas_estimation(broken_source) == []
        assert analyzer.analyze_unsafe_patterns(broken_source) == []
        assert analyzer.scan_events(broken_source) == []
        assert analyzer.analyze_upgrade_patterns(broken_source) == UpgradeReport()
        assert analyzer.analyze_complexity(broken_source, "x.rs") == ContractMetrics("x.rs", 0)

    def test_custom_rules_run_on_unparsable_text(self):
        matches = Analyzer().analyze_custom_rules("unsafe { broken(\n")
        assert [m.rule_name for m in matches] == ["no_unsafe_block"]

    def test_explicit_rules_override_config(self):
        from sanctifier.config import CustomRule

        matches = Analyzer().analyze_custom_rules("let x = 1;\n", [CustomRule("let", r"\blet\b")])
        assert [m.rule_name for m in matches] == ["let"]

    def test_repeated_calls_are_identical(self, token_contract):
        analyzer = Analyzer()
        assert analyzer.scan_auth_gaps(token_contract) == analyzer.scan_auth_gaps(token_contract)
        assert analyzer.scan_gas_estimation(token_contract) == analyzer.scan_gas_estimation(token_contract)


class TestAnalyze:
    def test_default_rules(self, token_contract):
        report = Analyzer().analyze(token_contract, "src/lib.rs")
        assert report.path == "src/lib.rs"
        assert report.auth_gaps == ("set_admin",)
        assert [i.issue_type for i in report.panic_issues] == [PanicKind.UNWRAP]
        assert [i.operation for i in report.arithmetic_issues] == ["-"]
        assert [p.pattern_type for p in report.unsafe_patterns] == [PanicKind.UNWRAP]
        # Keys are DataKey variants, not string literals
        assert report.storage_collisions == ()
        # Optional passes are off by default
        assert report.gas_estimates == ()
        assert report.upgrade_report == UpgradeReport()
        assert report.metrics is None

    def test_default_config_reports_collisions_and_custom_rules(self):
        source = (
            'const KEY_A: &str = "k";\n'
            'const KEY_B: &str = "k";\n'
            "\n"
            "fn f(v: Option<u32>) -> u32 {\n"
            "    unsafe { v.unwrap() }\n"
            "}\n"
        )
        report = Analyzer().analyze(source, "lib.rs")
        assert len(report.storage_collisions) == 2
        assert {c.key_value for c in report.storage_collisions} == {"k"}
        assert [p.pattern_type for p in report.unsafe_patterns] == [PanicKind.UNWRAP]
        assert [(m.rule_name, m.line) for m in report.custom_rule_matches] == [("no_unsafe_block", 5)]

    def test_core_detectors_ignore_enabled_rules(self, token_contract):
        config = SanctifyConfig(enabled_rules=frozenset())
        report = Analyzer(config).analyze(token_contract)
        assert report.auth_gaps == ("set_admin",)
        assert len(report.panic_issues) == 1
        assert len(report.arithmetic_issues) == 1
        assert len(report.unsafe_patterns) == 1

    def test_no_custom_rules_configured(self):
        config = SanctifyConfig(custom_rules=())
        report = Analyzer(config).analyze("fn f() {\n    unsafe { g() }\n}\n")
        assert report.custom_rule_matches == ()

    def test_all_rules(self, token_contract, all_rules_analyzer):
        report = all_rules_analyzer.analyze(token_contract)
        assert [g.function_name for g in report.gas_estimates] == ["set_admin", "transfer", "balance"]
        assert report.metrics is not None
        assert len(report.metrics.functions) == 4
        assert report.upgrade_report.upgrade_mechanisms == ("set_admin",)
        assert [p.pattern_type for p in report.unsafe_patterns] == [PanicKind.UNWRAP]

    def test_disabled_optional_pass_is_empty(self, token_contract):
        config = SanctifyConfig(enabled_rules=frozenset({"gas"}))
        report = Analyzer(config).analyze(token_contract)
        assert len(report.gas_estimates) == 3
        assert report.event_issues == ()
        assert report.upgrade_report == UpgradeReport()
        assert report.metrics is None

    def test_unparsable_report(self, broken_source, all_rules_analyzer):
        report = all_rules_analyzer.analyze(broken_source, "bad.rs")
        assert report.issue_count == 0
        assert report.metrics == ContractMetrics("bad.rs", 0)

    def test_with_prefix(self, add_contract):
        report = Analyzer().analyze(add_contract, "src/lib.rs").with_prefix("src/lib.rs")
        assert report.arithmetic_issues[0].location == "src/lib.rs:add:5"

    def test_idempotent(self, token_contract, all_rules_analyzer):
        first = all_rules_analyzer.analyze(token_contract, "lib.rs")
        second = all_rules_analyzer.analyze(token_contract, "lib.rs")
        assert first == second
        assert isinstance(first, AnalysisReport)
