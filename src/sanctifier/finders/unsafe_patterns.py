"""Every panicking call in the file with its source text.

Unlike ``panics`` this is not tied to a function: constants, nested
modules and nested items are all scanned.
"""

from __future__ import annotations

from typing import Union

from ..models import PanicKind, UnsafePattern
from ..scanning.syntax import (
    Const,
    Expr,
    ExprStmt,
    Function,
    Impl,
    ItemStmt,
    Let,
    MacroCall,
    MethodCall,
    SourceFile,
    Stmt,
    expr_children,
    stmt_children,
    walk_all_items,
)

_METHODS = {"unwrap": PanicKind.UNWRAP, "expect": PanicKind.EXPECT}


class UnsafePatternFinder:
    name = "unsafe_patterns"

    def find(self, source: SourceFile) -> list[UnsafePattern]:
        patterns: list[UnsafePattern] = []
        for item in walk_all_items(source.items):
            if isinstance(item, Function) and item.body is not None:
                _scan(item.body, patterns)
            elif isinstance(item, Impl):
                for fn in item.functions:
                    if fn.body is not None:
                        _scan(fn.body, patterns)
            elif isinstance(item, Const) and item.value is not None:
                _scan(item.value, patterns)
        return patterns


def _scan(node: Union[Expr, Stmt], patterns: list[UnsafePattern]) -> None:
    if isinstance(node, ItemStmt):
        return
    if isinstance(node, (Let, ExprStmt)):
        for child in stmt_children(node):
            _scan(child, patterns)
        return

    if isinstance(node, MethodCall) and node.method in _METHODS:
        patterns.append(UnsafePattern(_METHODS[node.method], node.line, node.text))
    elif isinstance(node, MacroCall) and node.name == "panic":
        patterns.append(UnsafePattern(PanicKind.PANIC, node.line, node.text))

    for child in expr_children(node):
        _scan(child, patterns)
