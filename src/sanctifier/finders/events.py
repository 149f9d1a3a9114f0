"""Consistency of ``env.events().publish(topics, data)`` calls.

Scope: top-level free functions and methods of top-level impl blocks.

The event name is the source text of the first topic. Two checks:

- a later publish of the same name with a different number of topics
  is flagged as inconsistent
- a first topic built with ``Symbol::new(env, "lit")`` where ``lit`` fits
  in a short symbol (9 chars or fewer) could use ``symbol_short!``
"""

from __future__ import annotations

from typing import Optional, Union

from ..models import EventIssue, EventIssueKind
from ..scanning.syntax import (
    Call,
    Expr,
    ExprStmt,
    ItemStmt,
    Let,
    Literal,
    MacroCall,
    MethodCall,
    OtherExpr,
    Path,
    SourceFile,
    Stmt,
    expr_children,
    stmt_children,
    top_level_functions,
)

SHORT_SYMBOL_MAX_LEN = 9


def _expr_text(expr: Expr) -> str:
    if isinstance(expr, (Call, MethodCall, MacroCall, OtherExpr)):
        return expr.text
    if isinstance(expr, Path):
        return "::".join(expr.segments)
    if isinstance(expr, Literal):
        return f'"{expr.value}"' if expr.kind == "str" else expr.value
    return ""


def _topics(expr: Expr) -> tuple[Expr, ...]:
    """Topic expressions; a tuple literal holds several, anything else one."""
    if isinstance(expr, OtherExpr) and expr.kind == "tuple_expression":
        return expr.children
    if isinstance(expr, OtherExpr) and expr.kind == "reference_expression" and expr.children:
        return _topics(expr.children[-1])
    return (expr,)


def _short_symbol_candidate(topic: Expr) -> Optional[str]:
    if isinstance(topic, Call):
        path = topic.path
        if len(path) >= 2 and path[-2] == "Symbol" and path[-1] == "new" and len(topic.args) >= 2:
            arg = topic.args[1]
            if isinstance(arg, Literal) and arg.is_string and len(arg.value) <= SHORT_SYMBOL_MAX_LEN:
                return arg.value
    return None


class EventFinder:
    name = "events"

    def find(self, source: SourceFile) -> list[EventIssue]:
        issues: list[EventIssue] = []
        # event name -> topic count of its first publish
        schemas: dict[str, int] = {}
        for fn in top_level_functions(source):
            if fn.body is not None:
                _scan(fn.body, fn.name, schemas, issues)
        return issues


def _scan(
    node: Union[Expr, Stmt],
    fn_name: str,
    schemas: dict[str, int],
    issues: list[EventIssue],
) -> None:
    if isinstance(node, ItemStmt):
        return
    if isinstance(node, (Let, ExprStmt)):
        for child in stmt_children(node):
            _scan(child, fn_name, schemas, issues)
        return

    if (
        isinstance(node, MethodCall)
        and node.method == "publish"
        and "events" in node.receiver_text
        and node.args
    ):
        _check_publish(node, fn_name, schemas, issues)

    for child in expr_children(node):
        _scan(child, fn_name, schemas, issues)


def _check_publish(
    call: MethodCall,
    fn_name: str,
    schemas: dict[str, int],
    issues: list[EventIssue],
) -> None:
    topics = _topics(call.args[0])
    if not topics:
        return
    event_name = _expr_text(topics[0])
    location = f"{fn_name}:{call.line}"

    previous = schemas.setdefault(event_name, len(topics))
    if previous != len(topics):
        issues.append(
            EventIssue(
                function_name=fn_name,
                event_name=event_name,
                issue_type=EventIssueKind.INCONSISTENT_TOPICS,
                location=location,
                message=(
                    f"Event {event_name} is published with {len(topics)} topics here "
                    f"but {previous} topics elsewhere"
                ),
            )
        )

    literal = _short_symbol_candidate(topics[0])
    if literal is not None:
        issues.append(
            EventIssue(
                function_name=fn_name,
                event_name=event_name,
                issue_type=EventIssueKind.SYMBOL_SHORT_OPTIMIZATION,
                location=location,
                message=f'Topic "{literal}" fits in a short symbol; use `symbol_short!("{literal}")` to save gas',
            )
        )
