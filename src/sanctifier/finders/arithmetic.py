"""Unchecked ``+ - * += -= *=`` in functions.

One issue per (function, operator) pair; later uses of the same operator
in the same function are suppressed. Operations with a string literal
operand are skipped. Closures are attributed to their enclosing function;
a nested ``fn`` item starts its own context.
"""

from __future__ import annotations

from typing import Optional, Union

from ..models import ArithmeticIssue
from ..scanning.syntax import (
    Binary,
    Const,
    Expr,
    ExprStmt,
    Function,
    Impl,
    Item,
    ItemStmt,
    Let,
    Literal,
    Module,
    SourceFile,
    Stmt,
    expr_children,
    stmt_children,
)

SUGGESTIONS = {
    "+": "Use `.checked_add(rhs)` or `.saturating_add(rhs)` to handle overflow",
    "-": "Use `.checked_sub(rhs)` or `.saturating_sub(rhs)` to handle underflow",
    "*": "Use `.checked_mul(rhs)` or `.saturating_mul(rhs)` to handle overflow",
    "+=": 'Replace `a += b` with `a = a.checked_add(b).expect("overflow")`',
    "-=": 'Replace `a -= b` with `a = a.checked_sub(b).expect("underflow")`',
    "*=": 'Replace `a *= b` with `a = a.checked_mul(b).expect("overflow")`',
}


def _is_string_literal(expr: Expr) -> bool:
    return isinstance(expr, Literal) and expr.is_string


class _Scan:
    """Accumulator for one file: issues plus the (function, op) pairs seen."""

    def __init__(self) -> None:
        self.issues: list[ArithmeticIssue] = []
        self.seen: set[tuple[str, str]] = set()


class ArithmeticFinder:
    name = "arithmetic"

    def find(self, source: SourceFile) -> list[ArithmeticIssue]:
        scan = _Scan()
        for item in source.items:
            _visit_item(item, None, scan)
        return scan.issues


def _visit_item(item: Item, fn_name: Optional[str], scan: _Scan) -> None:
    if isinstance(item, Function):
        if item.body is not None:
            _visit(item.body, item.name, scan)
    elif isinstance(item, Impl):
        for fn in item.functions:
            if fn.body is not None:
                _visit(fn.body, fn.name, scan)
    elif isinstance(item, Module):
        for inner in item.items:
            _visit_item(inner, fn_name, scan)
    elif isinstance(item, Const) and item.value is not None:
        _visit(item.value, fn_name, scan)


def _visit(node: Union[Expr, Stmt], fn_name: Optional[str], scan: _Scan) -> None:
    if isinstance(node, ItemStmt):
        _visit_item(node.item, fn_name, scan)
        return
    if isinstance(node, (Let, ExprStmt)):
        for child in stmt_children(node):
            _visit(child, fn_name, scan)
        return

    if isinstance(node, Binary) and fn_name is not None and node.op in SUGGESTIONS:
        key = (fn_name, node.op)
        if (
            key not in scan.seen
            and not _is_string_literal(node.left)
            and not _is_string_literal(node.right)
        ):
            scan.seen.add(key)
            scan.issues.append(
                ArithmeticIssue(
                    function_name=fn_name,
                    operation=node.op,
                    suggestion=SUGGESTIONS[node.op],
                    location=f"{fn_name}:{_line(node.left, node.line)}",
                )
            )

    for child in expr_children(node):
        _visit(child, fn_name, scan)


def _line(expr: Expr, default: int) -> int:
    return getattr(expr, "line", default)
