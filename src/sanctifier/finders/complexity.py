"""Per-function cyclomatic complexity, nesting, params and LOC.

Scope: every public free function and every impl method, at any depth
(inline modules and items nested in bodies included).

Cyclomatic complexity starts at 1:
- ``if``, ``for``, ``while``, ``loop``, closure: +1
- ``match``: + (arms - 1)
- ``&&`` / ``||``: +1 each

Nesting depth only grows for those same constructs; plain blocks do not
count. ``else if`` nests one level below its parent ``if``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..models import ContractMetrics, FunctionMetrics
from ..scanning.syntax import (
    Binary,
    Closure,
    Const,
    Expr,
    ExprStmt,
    ExternCrate,
    ForLoop,
    Function,
    If,
    Impl,
    ItemStmt,
    Let,
    Loop,
    Match,
    Module,
    SourceFile,
    Stmt,
    Use,
    While,
    expr_children,
    stmt_children,
    walk_all_items,
)

MAX_CYCLOMATIC = 10
MAX_PARAMS = 5
MAX_NESTING = 4
MAX_LOC = 50

_NESTING = (If, Match, ForLoop, While, Loop, Closure)
_SHORT_CIRCUIT = frozenset({"&&", "||"})


@dataclass
class _Counts:
    cyclomatic: int = 1
    max_depth: int = 0


class ComplexityFinder:
    """Computes ``ContractMetrics`` for one file."""

    name = "complexity"

    def find(self, source: SourceFile, contract_path: str = "") -> ContractMetrics:
        dependency_count = 0
        functions: list[FunctionMetrics] = []

        for item in walk_all_items(source.items):
            if isinstance(item, (Use, ExternCrate)):
                dependency_count += 1
            elif isinstance(item, Function):
                if item.is_public:
                    functions.append(measure_function(item))
            elif isinstance(item, Impl):
                functions.extend(measure_function(fn) for fn in item.functions)

        return ContractMetrics(
            contract_path=contract_path,
            dependency_count=dependency_count,
            functions=tuple(functions),
        )


def measure_function(fn: Function) -> FunctionMetrics:
    counts = _Counts()
    if fn.body is not None:
        _walk(fn.body, 0, counts)

    warnings = []
    if counts.cyclomatic > MAX_CYCLOMATIC:
        warnings.append(f"Cyclomatic complexity {counts.cyclomatic} exceeds threshold {MAX_CYCLOMATIC}")
    if fn.param_count > MAX_PARAMS:
        warnings.append(f"{fn.param_count} parameters exceeds threshold {MAX_PARAMS}")
    if counts.max_depth > MAX_NESTING:
        warnings.append(f"Nesting depth {counts.max_depth} exceeds threshold {MAX_NESTING}")
    if fn.loc > MAX_LOC:
        warnings.append(f"{fn.loc} LOC exceeds threshold {MAX_LOC}")

    return FunctionMetrics(
        name=fn.name,
        cyclomatic_complexity=counts.cyclomatic,
        param_count=fn.param_count,
        max_nesting_depth=counts.max_depth,
        loc=fn.loc,
        warnings=tuple(warnings),
    )


def _walk(node: Union[Expr, Stmt], depth: int, counts: _Counts) -> None:
    if isinstance(node, (Let, ExprStmt)):
        for child in stmt_children(node):
            _walk(child, depth, counts)
        return
    if isinstance(node, ItemStmt):
        _walk_item(node.item, depth, counts)
        return

    if isinstance(node, _NESTING):
        if isinstance(node, Match):
            counts.cyclomatic += max(len(node.arms) - 1, 0)
        else:
            counts.cyclomatic += 1
        depth += 1
        counts.max_depth = max(counts.max_depth, depth)
    elif isinstance(node, Binary) and node.op in _SHORT_CIRCUIT:
        counts.cyclomatic += 1

    for child in expr_children(node):
        _walk(child, depth, counts)


def _walk_item(item, depth: int, counts: _Counts) -> None:
    """Items nested in a body still count toward the enclosing function."""
    if isinstance(item, Function):
        if item.body is not None:
            _walk(item.body, depth, counts)
    elif isinstance(item, Impl):
        for fn in item.functions:
            if fn.body is not None:
                _walk(fn.body, depth, counts)
    elif isinstance(item, Module):
        for inner in item.items:
            _walk_item(inner, depth, counts)
    elif isinstance(item, Const) and item.value is not None:
        _walk(item.value, depth, counts)
