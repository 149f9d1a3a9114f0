"""Configuration loading and management for Sanctifier.

Configuration sources are merged in priority order (lowest to highest):
    1. Defaults (defined in SanctifyConfig)
    2. Project config (./.sanctify.toml)
    3. Explicit config file (if config_file provided)
    4. Environment variables (SANCTIFY_* prefix)
    5. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(ledger_limit=50)
    >>> config.ledger_limit
    50
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import tomli_w

from .exceptions import InvalidConfigError
from .finders import RULE_NAMES

DEFAULT_CONFIG_FILENAME = ".sanctify.toml"


@dataclass(frozen=True)
class CustomRule:
    """A named regex applied to each source line."""

    name: str
    pattern: str


DEFAULT_CUSTOM_RULES = (
    CustomRule(name="no_unsafe_block", pattern=r"unsafe\s*\{"),
    CustomRule(name="no_mem_forget", pattern="std::mem::forget"),
)


@dataclass(frozen=True)
class SanctifyConfig:
    """Configuration for one analysis run.

    All fields have defaults; a project usually overrides a few of them in
    ``.sanctify.toml``.

    Attributes:
        ignore_paths: Directory names skipped while walking a project
        enabled_rules: Optional passes to run (gas, complexity, events, upgrades);
            the core detectors always run. Names are from ``finders.RULE_NAMES``
        ledger_limit: Ledger entry size limit in bytes
        approaching_threshold: Fraction of the limit that triggers ApproachingLimit
        strict_mode: Treat sizes at half the limit as ExceedsLimit
        custom_rules: Regex rules evaluated line by line
    """

    ignore_paths: frozenset[str] = frozenset({"target", ".git"})
    enabled_rules: frozenset[str] = frozenset({"auth_gaps", "panics", "arithmetic", "ledger_size", "events"})
    ledger_limit: int = 64000
    approaching_threshold: float = 0.8
    strict_mode: bool = False
    custom_rules: tuple[CustomRule, ...] = field(default_factory=lambda: DEFAULT_CUSTOM_RULES)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if isinstance(self.ledger_limit, bool) or not isinstance(self.ledger_limit, int):
            raise InvalidConfigError("ledger_limit", self.ledger_limit, "must be an integer")
        if self.ledger_limit < 1:
            raise InvalidConfigError("ledger_limit", self.ledger_limit, "must be at least 1")
        if not 0.0 < self.approaching_threshold < 1.0:
            raise InvalidConfigError(
                "approaching_threshold", self.approaching_threshold, "must be between 0.0 and 1.0"
            )
        if not isinstance(self.strict_mode, bool):
            raise InvalidConfigError("strict_mode", self.strict_mode, "must be true or false")
        unknown = sorted(set(self.enabled_rules) - RULE_NAMES)
        if unknown:
            raise InvalidConfigError(
                "enabled_rules",
                unknown,
                f"unknown rule(s); choose from {', '.join(sorted(RULE_NAMES))}",
            )

    def to_dict(self) -> dict[str, Any]:
        """TOML-ready representation (sets become sorted lists)."""
        return {
            "ignore_paths": sorted(self.ignore_paths),
            "enabled_rules": sorted(self.enabled_rules),
            "ledger_limit": self.ledger_limit,
            "approaching_threshold": self.approaching_threshold,
            "strict_mode": self.strict_mode,
            "custom_rules": [{"name": r.name, "pattern": r.pattern} for r in self.custom_rules],
        }


def load_config(config_file: Optional[Path] = None, **overrides) -> SanctifyConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags); None values
            are ignored

    Returns:
        Validated SanctifyConfig instance

    Raises:
        InvalidConfigError: If a config file is missing, unreadable or holds
            invalid values
    """
    merged: dict[str, Any] = {}

    # 1. Project config
    project_config = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    # 2. Explicit config file
    if config_file is not None:
        config_file = Path(config_file)
        if not config_file.exists():
            raise InvalidConfigError("config_file", str(config_file), "file not found")
        merged.update(_load_toml_file(config_file))

    # 3. Environment variables
    merged.update(_load_env_vars())

    # 4. CLI overrides
    merged.update({k: v for k, v in overrides.items() if v is not None})

    return _build_config(merged)


def write_config(config: SanctifyConfig, directory: Path, force: bool = False) -> Path:
    """Write ``config`` as ``.sanctify.toml`` inside ``directory``.

    Raises:
        InvalidConfigError: If the file exists and ``force`` is False
    """
    path = Path(directory) / DEFAULT_CONFIG_FILENAME
    if path.exists() and not force:
        raise InvalidConfigError(DEFAULT_CONFIG_FILENAME, str(path), "already exists (use --force to overwrite)")
    with open(path, "wb") as f:
        tomli_w.dump(config.to_dict(), f)
    return path


def _build_config(values: dict[str, Any]) -> SanctifyConfig:
    known = set(SanctifyConfig.__dataclass_fields__)
    unknown = sorted(set(values) - known)
    if unknown:
        raise InvalidConfigError(", ".join(unknown), None, "unknown configuration key")

    kwargs = dict(values)
    for key in ("ignore_paths", "enabled_rules"):
        if key in kwargs:
            if not isinstance(kwargs[key], (list, tuple, set, frozenset)):
                raise InvalidConfigError(key, kwargs[key], "must be a list of strings")
            kwargs[key] = frozenset(str(v) for v in kwargs[key])
    if "custom_rules" in kwargs:
        kwargs["custom_rules"] = _parse_custom_rules(kwargs["custom_rules"])
    if "approaching_threshold" in kwargs and isinstance(kwargs["approaching_threshold"], int):
        kwargs["approaching_threshold"] = float(kwargs["approaching_threshold"])

    return SanctifyConfig(**kwargs)


def _parse_custom_rules(raw: Any) -> tuple[CustomRule, ...]:
    if not isinstance(raw, (list, tuple)):
        raise InvalidConfigError("custom_rules", raw, "must be an array of tables")
    rules = []
    for entry in raw:
        if isinstance(entry, CustomRule):
            rules.append(entry)
            continue
        if not isinstance(entry, dict) or "name" not in entry or "pattern" not in entry:
            raise InvalidConfigError("custom_rules", entry, "each rule needs a name and a pattern")
        rules.append(CustomRule(name=str(entry["name"]), pattern=str(entry["pattern"])))
    return tuple(rules)


_ENV_FIELDS = {
    "ledger_limit": int,
    "approaching_threshold": float,
    "strict_mode": bool,
}


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from SANCTIFY_* environment variables.

    Supported environment variables:
        SANCTIFY_LEDGER_LIMIT: int
        SANCTIFY_APPROACHING_THRESHOLD: float
        SANCTIFY_STRICT_MODE: bool (true/false/1/0/yes/no)
    """
    result: dict[str, Any] = {}
    for field_name, type_hint in _ENV_FIELDS.items():
        env_key = f"SANCTIFY_{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue
        try:
            result[field_name] = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
    return result


def _parse_env_value(value: str, type_hint: type) -> Any:
    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")
    return type_hint(value)


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        InvalidConfigError: If the file cannot be read or parsed
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise InvalidConfigError(str(path), None, f"cannot read TOML: {e}")
