"""Tests for the Sanctifier exception hierarchy."""

from pathlib import Path

from sanctifier.exceptions import (
    AnalysisError,
    ConfigurationError,
    FileAccessError,
    InvalidConfigError,
    InvalidPathError,
    NotAContractProjectError,
    ParsingError,
    SanctifierError,
)


class TestHierarchy:
    def test_all_derive_from_base(self):
        for cls in (
            AnalysisError,
            ConfigurationError,
            FileAccessError,
            InvalidConfigError,
            InvalidPathError,
            NotAContractProjectError,
            ParsingError,
        ):
            assert issubclass(cls, SanctifierError)

    def test_analysis_errors(self):
        assert issubclass(ParsingError, AnalysisError)
        assert issubclass(FileAccessError, AnalysisError)

    def test_configuration_errors(self):
        assert issubclass(InvalidConfigError, ConfigurationError)
        assert issubclass(NotAContractProjectError, ConfigurationError)


class TestMessages:
    def test_details_in_str(self):
        error = InvalidConfigError("ledger_limit", 0, "must be at least 1")
        text = str(error)
        assert text.startswith("Invalid configuration for ledger_limit: 0")
        assert "reason=must be at least 1" in text

    def test_parsing_error_fields(self):
        error = ParsingError("syntax error near line 3", "src/lib.rs")
        assert error.reason == "syntax error near line 3"
        assert error.filepath == "src/lib.rs"

    def test_not_a_project(self):
        error = NotAContractProjectError(Path("docs"))
        assert "is not a valid Soroban project" in str(error)

    def test_plain_message(self):
        assert str(SanctifierError("boom")) == "boom"
