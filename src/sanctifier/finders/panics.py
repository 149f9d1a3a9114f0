"""Finds ``panic!``, ``.unwrap()`` and ``.expect()`` in function bodies.

Scope: top-level free functions and methods of top-level impl blocks.
Every occurrence is reported; chained calls such as
``a.b().unwrap().c()`` are found through method receivers.
"""

from __future__ import annotations

from typing import Union

from ..models import PanicIssue, PanicKind
from ..scanning.syntax import (
    Expr,
    ExprStmt,
    ItemStmt,
    Let,
    MacroCall,
    MethodCall,
    SourceFile,
    Stmt,
    expr_children,
    stmt_children,
    top_level_functions,
)

_PANIC_METHODS = {"unwrap": PanicKind.UNWRAP, "expect": PanicKind.EXPECT}


class PanicFinder:
    name = "panics"

    def find(self, source: SourceFile) -> list[PanicIssue]:
        issues: list[PanicIssue] = []
        for fn in top_level_functions(source):
            if fn.body is not None:
                _scan(fn.body, fn.name, issues)
        return issues


def _scan(node: Union[Expr, Stmt], fn_name: str, issues: list[PanicIssue]) -> None:
    if isinstance(node, ItemStmt):
        # Nested items are separate functions
        return
    if isinstance(node, (Let, ExprStmt)):
        for child in stmt_children(node):
            _scan(child, fn_name, issues)
        return

    kind = None
    if isinstance(node, MacroCall) and node.name == "panic":
        kind = PanicKind.PANIC
    elif isinstance(node, MethodCall):
        kind = _PANIC_METHODS.get(node.method)

    if kind is not None:
        issues.append(
            PanicIssue(
                function_name=fn_name,
                issue_type=kind,
                location=f"{fn_name}:{node.line}",
            )
        )

    for child in expr_children(node):
        _scan(child, fn_name, issues)
