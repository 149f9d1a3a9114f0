"""Public contract methods that mutate storage without auth.

Scope: ``pub`` methods of top-level impl blocks.

A method is a gap when its body contains a storage mutation and no
authorization primitive anywhere. Both checks are textual:

- mutation: ``set``/``update``/``remove`` called on a receiver whose
  source text mentions storage, persistent, temporary or instance
- auth: ``require_auth`` or ``require_auth_for_args`` as a call path's
  last segment, a method name or a macro name

The check is flow-insensitive: an auth call in any branch, even one that
never runs before the mutation, suppresses the finding.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..scanning.syntax import (
    Call,
    Expr,
    ExprStmt,
    Function,
    ItemStmt,
    Let,
    MacroCall,
    MethodCall,
    SourceFile,
    Stmt,
    expr_children,
    impl_functions,
    stmt_children,
)

AUTH_PRIMITIVES = frozenset({"require_auth", "require_auth_for_args"})
MUTATING_METHODS = frozenset({"set", "update", "remove"})
STORAGE_KEYWORDS = ("storage", "persistent", "temporary", "instance")


@dataclass
class _Flags:
    has_mutation: bool = False
    has_auth: bool = False


class AuthGapFinder:
    name = "auth_gaps"

    def find(self, source: SourceFile) -> list[str]:
        gaps: list[str] = []
        for fn in impl_functions(source):
            if fn.is_public and is_auth_gap(fn):
                gaps.append(fn.name)
        return gaps


def is_auth_gap(fn: Function) -> bool:
    if fn.body is None:
        return False
    flags = _Flags()
    _scan(fn.body, flags)
    return flags.has_mutation and not flags.has_auth


def _scan(node: Union[Expr, Stmt], flags: _Flags) -> None:
    if isinstance(node, ItemStmt):
        return
    if isinstance(node, (Let, ExprStmt)):
        for child in stmt_children(node):
            _scan(child, flags)
        return

    if isinstance(node, Call):
        if node.path and node.path[-1] in AUTH_PRIMITIVES:
            flags.has_auth = True
    elif isinstance(node, MethodCall):
        if node.method in AUTH_PRIMITIVES:
            flags.has_auth = True
        elif node.method in MUTATING_METHODS and _is_storage_receiver(node.receiver_text):
            flags.has_mutation = True
    elif isinstance(node, MacroCall) and node.name in AUTH_PRIMITIVES:
        flags.has_auth = True

    for child in expr_children(node):
        _scan(child, flags)


def _is_storage_receiver(text: str) -> bool:
    return any(keyword in text for keyword in STORAGE_KEYWORDS)
