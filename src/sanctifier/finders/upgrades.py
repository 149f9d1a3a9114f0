"""Upgrade, admin and initialization surface of a contract.

Scope: top-level items. ``#[contracttype]`` structs and enums are listed
as storage types; impl methods are matched by name against the admin,
upgrade and init vocabularies. Each admin/upgrade method also yields a
governance finding.
"""

from __future__ import annotations

from ..models import UpgradeCategory, UpgradeFinding, UpgradeReport
from ..scanning.syntax import Enum, Impl, SourceFile, Struct, has_attribute
from .ledger_size import LAYOUT_MARKER

ADMIN_FUNCTIONS = frozenset(
    {
        "set_admin",
        "upgrade",
        "set_authorized",
        "deploy",
        "update_admin",
        "transfer_admin",
        "change_admin",
    }
)
INIT_FUNCTIONS = frozenset({"init", "initialize", "initialise"})

GOVERNANCE_MESSAGE = "Potential upgrade or administrative function found."
GOVERNANCE_SUGGESTION = "Ensure this function is protected by proper authentication."


def is_upgrade_or_admin_fn(name: str) -> bool:
    name = name.lower()
    if name in ADMIN_FUNCTIONS:
        return True
    return "upgrade" in name and ("contract" in name or "wasm" in name)


def is_init_fn(name: str) -> bool:
    return name.lower() in INIT_FUNCTIONS


class UpgradeFinder:
    name = "upgrades"

    def find(self, source: SourceFile) -> UpgradeReport:
        findings: list[UpgradeFinding] = []
        mechanisms: list[str] = []
        init_functions: list[str] = []
        storage_types: list[str] = []

        for item in source.items:
            if isinstance(item, (Struct, Enum)):
                if has_attribute(item.attributes, LAYOUT_MARKER):
                    storage_types.append(item.name)
            elif isinstance(item, Impl):
                for fn in item.functions:
                    if is_init_fn(fn.name):
                        init_functions.append(fn.name)
                    if is_upgrade_or_admin_fn(fn.name):
                        mechanisms.append(fn.name)
                        findings.append(
                            UpgradeFinding(
                                category=UpgradeCategory.GOVERNANCE,
                                function_name=fn.name,
                                location=f"{fn.name}:{fn.start_line}",
                                message=GOVERNANCE_MESSAGE,
                                suggestion=GOVERNANCE_SUGGESTION,
                            )
                        )

        return UpgradeReport(
            findings=tuple(findings),
            upgrade_mechanisms=tuple(mechanisms),
            init_functions=tuple(init_functions),
            storage_types=tuple(storage_types),
        )
