"""Heuristic instruction and stack-memory estimate per public method.

Scope: ``pub`` methods of top-level impl blocks.

Costs come from ``cost_model``. Loop bodies are estimated in isolation
(with their own base cost) and charged ``LOOP_ITERATION_FACTOR`` times on
top of a fixed loop overhead. Items nested in a body are not charged.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .. import cost_model as cm
from ..models import GasEstimationReport
from ..scanning.syntax import (
    Binary,
    Block,
    Call,
    Expr,
    ExprStmt,
    ForLoop,
    ItemStmt,
    Let,
    Loop,
    MacroCall,
    MethodCall,
    SourceFile,
    Stmt,
    While,
    expr_children,
    impl_functions,
    stmt_children,
)


@dataclass
class _Cost:
    instructions: int = cm.BASE_INSTRUCTIONS
    memory: int = cm.BASE_MEMORY


class GasFinder:
    name = "gas"

    def find(self, source: SourceFile) -> list[GasEstimationReport]:
        reports: list[GasEstimationReport] = []
        for fn in impl_functions(source):
            if not fn.is_public:
                continue
            cost = estimate_block(fn.body) if fn.body is not None else _Cost()
            reports.append(
                GasEstimationReport(
                    function_name=fn.name,
                    estimated_instructions=cost.instructions,
                    estimated_memory_bytes=cost.memory,
                )
            )
        return reports


def estimate_block(body: Block) -> _Cost:
    """Estimate a block as if it were a whole function body."""
    cost = _Cost()
    _walk(body, cost)
    return cost


def _walk(node: Union[Expr, Stmt], cost: _Cost) -> None:
    if isinstance(node, ItemStmt):
        return
    if isinstance(node, Let):
        cost.instructions += cm.LET_COST
        if node.type is not None:
            cost.memory += cm.estimate_type_size(node.type)
        else:
            cost.memory += cm.LET_UNTYPED_MEMORY
        for child in stmt_children(node):
            _walk(child, cost)
        return
    if isinstance(node, ExprStmt):
        _walk(node.expr, cost)
        return

    if isinstance(node, (ForLoop, While, Loop)):
        inner = estimate_block(node.body)
        cost.instructions += cm.LOOP_OVERHEAD + inner.instructions * cm.LOOP_ITERATION_FACTOR
        cost.memory += inner.memory * cm.LOOP_ITERATION_FACTOR
        # The loop header runs in the enclosing scope
        if isinstance(node, ForLoop):
            _walk(node.iterable, cost)
        elif isinstance(node, While):
            _walk(node.cond, cost)
        return

    if isinstance(node, Binary):
        cost.instructions += cm.BINARY_OP_COST
    elif isinstance(node, Call):
        cost.instructions += cm.CALL_COST
    elif isinstance(node, MethodCall):
        if node.method in cm.STORAGE_METHODS:
            cost.instructions += cm.STORAGE_METHOD_COST
        elif node.method in cm.AUTH_METHODS:
            cost.instructions += cm.AUTH_METHOD_COST
        else:
            cost.instructions += cm.METHOD_COST
    elif isinstance(node, MacroCall):
        if node.name in cm.COLLECTION_MACROS:
            instructions, memory = cm.COLLECTION_MACRO_COST
        elif node.name in cm.SYMBOL_MACROS:
            instructions, memory = cm.SYMBOL_MACRO_COST
        else:
            instructions, memory = cm.OTHER_MACRO_COST
        cost.instructions += instructions
        cost.memory += memory

    for child in expr_children(node):
        _walk(child, cost)
