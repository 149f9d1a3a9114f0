"""User-defined regex rules evaluated line by line.

Patterns are compiled with ``re``. A pattern that does not compile is
logged and skipped; the remaining rules still run.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from ..models import CustomRuleMatch

logger = logging.getLogger(__name__)


def compile_rules(rules: Iterable) -> list[tuple[str, re.Pattern]]:
    """Compile ``CustomRule`` patterns, dropping the invalid ones."""
    compiled = []
    for rule in rules:
        try:
            compiled.append((rule.name, re.compile(rule.pattern)))
        except re.error as e:
            logger.warning(f"Skipping custom rule {rule.name!r}: invalid pattern ({e})")
    return compiled


class CustomRuleEvaluator:
    """Runs compiled rules over raw source text.

    Usage:
        evaluator = CustomRuleEvaluator(config.custom_rules)
        matches = evaluator.evaluate(source_text)
    """

    name = "custom_rules"

    def __init__(self, rules: Iterable) -> None:
        self._rules = compile_rules(rules)

    def evaluate(self, text: str) -> list[CustomRuleMatch]:
        matches: list[CustomRuleMatch] = []
        lines = text.splitlines()
        for rule_name, pattern in self._rules:
            for line_no, line in enumerate(lines, start=1):
                if pattern.search(line):
                    matches.append(CustomRuleMatch(rule_name=rule_name, line=line_no, snippet=line.strip()))
        return matches
