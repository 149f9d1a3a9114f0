"""String literals reused as storage keys.

Keys are collected from three shapes, anywhere in the file:

- ``const NAME: T = "literal";``  (location label = const name)
- ``Symbol::new(env, "literal")`` (location label = ``inline``)
- ``symbol_short!("literal")``    (location label = ``inline``)

Every occurrence of a value seen more than once yields its own issue,
listing all the other occurrences. Values are reported in first-seen
order, occurrences in source order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from ..models import KeyKind, StorageCollisionIssue
from ..scanning.syntax import (
    Call,
    Const,
    Expr,
    ExprStmt,
    Function,
    Impl,
    ItemStmt,
    Let,
    Literal,
    MacroCall,
    SourceFile,
    Stmt,
    expr_children,
    stmt_children,
    walk_all_items,
)

INLINE = "inline"


@dataclass(frozen=True)
class KeyOccurrence:
    value: str
    kind: KeyKind
    label: str
    line: int


def _symbol_new_key(call: Call) -> Optional[str]:
    path = call.path
    if len(path) >= 2 and path[0] == "Symbol" and path[1] == "new" and len(call.args) >= 2:
        arg = call.args[1]
        if isinstance(arg, Literal) and arg.is_string:
            return arg.value
    return None


def _symbol_short_key(macro: MacroCall) -> Optional[str]:
    if macro.name == "symbol_short" and macro.token_count == 1 and len(macro.string_args) == 1:
        return macro.string_args[0]
    return None


def collect_keys(source: SourceFile) -> list[KeyOccurrence]:
    """All key literals in the file, in source order."""
    keys: list[KeyOccurrence] = []
    for item in walk_all_items(source.items):
        if isinstance(item, Const):
            if isinstance(item.value, Literal) and item.value.is_string:
                keys.append(KeyOccurrence(item.value.value, KeyKind.CONST, item.name, item.line))
            if item.value is not None:
                _collect(item.value, keys)
        elif isinstance(item, Function) and item.body is not None:
            _collect(item.body, keys)
        elif isinstance(item, Impl):
            for fn in item.functions:
                if fn.body is not None:
                    _collect(fn.body, keys)
    return keys


def _collect(node: Union[Expr, Stmt], keys: list[KeyOccurrence]) -> None:
    # Nested items are reached through walk_all_items
    if isinstance(node, ItemStmt):
        return
    if isinstance(node, (Let, ExprStmt)):
        for child in stmt_children(node):
            _collect(child, keys)
        return

    if isinstance(node, Call):
        value = _symbol_new_key(node)
        if value is not None:
            keys.append(KeyOccurrence(value, KeyKind.SYMBOL_NEW, INLINE, node.line))
    elif isinstance(node, MacroCall):
        value = _symbol_short_key(node)
        if value is not None:
            keys.append(KeyOccurrence(value, KeyKind.SYMBOL_SHORT, INLINE, node.line))

    for child in expr_children(node):
        _collect(child, keys)


class StorageCollisionFinder:
    name = "storage_collisions"

    def find(self, source: SourceFile) -> list[StorageCollisionIssue]:
        groups: dict[str, list[KeyOccurrence]] = {}
        for key in collect_keys(source):
            groups.setdefault(key.value, []).append(key)

        issues: list[StorageCollisionIssue] = []
        for value, occurrences in groups.items():
            if len(occurrences) < 2:
                continue
            for index, current in enumerate(occurrences):
                others = ", ".join(
                    f"{other.label} (line {other.line})"
                    for i, other in enumerate(occurrences)
                    if i != index
                )
                issues.append(
                    StorageCollisionIssue(
                        key_value=value,
                        key_type=current.kind,
                        location=f"{current.label}:{current.line}",
                        message=f"Potential storage key collision: value '{value}' is also used in: {others}",
                    )
                )
        return issues
