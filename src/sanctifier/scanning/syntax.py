"""Syntax models for parsed Rust source files.

The normalizer lowers tree-sitter's concrete tree into this small tagged
union of node kinds. Detectors dispatch on the node class with explicit
``isinstance`` chains instead of subclassing a visitor, so each traversal
lives in one function and states which kinds it descends into.

Node families:
    - Items: Function, Impl, Struct, Enum, Const, Use, ExternCrate, Module, OtherItem
    - Statements: Let, ExprStmt, ItemStmt
    - Expressions: Binary, Call, MethodCall, MacroCall, Block, If, Match,
      ForLoop, While, Loop, Closure, Literal, Path, OtherExpr
    - Types: PathType, ArrayType, OtherType

Every node records the 1-indexed line it starts on; spans that detectors
need (function LOC) are stored explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PathType:
    """A named type such as ``u64``, ``Address`` or ``Vec<Map<Symbol, i128>>``.

    Attributes:
        name: Last path segment (``Vec`` for ``soroban_sdk::Vec<u32>``)
        args: Generic type arguments (lifetimes and const arguments excluded)
    """

    name: str
    args: tuple[TypeNode, ...] = ()


@dataclass(frozen=True)
class ArrayType:
    """A fixed-size array ``[T; N]``; ``length`` is None when N is not a literal."""

    element: TypeNode
    length: Optional[int]


@dataclass(frozen=True)
class OtherType:
    """Any other type form (references, tuples, function pointers, ...)."""

    text: str


TypeNode = Union[PathType, ArrayType, OtherType]

# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Literal:
    """A literal. ``kind`` is one of str, int, float, char, bool, byte_str."""

    kind: str
    value: str
    line: int

    @property
    def is_string(self) -> bool:
        return self.kind == "str"


@dataclass(frozen=True)
class Path:
    """A plain or scoped identifier (``x``, ``Symbol::new``, ``self``)."""

    segments: tuple[str, ...]
    line: int

    @property
    def name(self) -> str:
        return self.segments[-1] if self.segments else ""


@dataclass(frozen=True)
class Binary:
    """Binary or compound-assignment expression; ``op`` is the operator token."""

    op: str
    left: Expr
    right: Expr
    line: int


@dataclass(frozen=True)
class Call:
    """Free-function call ``func(args)``; ``text`` is the call source."""

    func: Expr
    args: tuple[Expr, ...]
    line: int
    text: str = ""

    @property
    def path(self) -> tuple[str, ...]:
        """Path segments of the callee, empty when it is not a path."""
        if isinstance(self.func, Path):
            return self.func.segments
        return ()


@dataclass(frozen=True)
class MethodCall:
    """Method call ``receiver.method(args)``.

    Attributes:
        receiver_text: Source text of the receiver, used by textual heuristics
        text: Source text of the whole call
    """

    receiver: Expr
    method: str
    args: tuple[Expr, ...]
    receiver_text: str
    text: str
    line: int


@dataclass(frozen=True)
class MacroCall:
    """Macro invocation ``name!(tokens)``. Macro bodies stay opaque.

    Attributes:
        name: Last segment of the macro path
        tokens: Source text of the token tree, delimiters included
        string_args: Values of top-level string literal tokens
        token_count: Number of top-level tokens inside the delimiters
    """

    name: str
    tokens: str
    string_args: tuple[str, ...]
    token_count: int
    text: str
    line: int


@dataclass(frozen=True)
class Block:
    """A ``{ ... }`` block (also unsafe/async/const blocks)."""

    stmts: tuple[Stmt, ...]
    line: int


@dataclass(frozen=True)
class If:
    """``if`` expression; ``else_branch`` is a Block or another If."""

    cond: Expr
    then_branch: Block
    else_branch: Optional[Expr]
    line: int


@dataclass(frozen=True)
class MatchArm:
    guard: Optional[Expr]
    body: Expr


@dataclass(frozen=True)
class Match:
    scrutinee: Expr
    arms: tuple[MatchArm, ...]
    line: int


@dataclass(frozen=True)
class ForLoop:
    iterable: Expr
    body: Block
    line: int


@dataclass(frozen=True)
class While:
    cond: Expr
    body: Block
    line: int


@dataclass(frozen=True)
class Loop:
    body: Block
    line: int


@dataclass(frozen=True)
class Closure:
    body: Expr
    line: int


@dataclass(frozen=True)
class OtherExpr:
    """Any other expression kind, keeping its sub-expressions in source order.

    ``kind`` is the tree-sitter node type (``return_expression``,
    ``field_expression``, ``tuple_expression``...).
    """

    kind: str
    children: tuple[Expr, ...]
    text: str
    line: int


Expr = Union[
    Literal,
    Path,
    Binary,
    Call,
    MethodCall,
    MacroCall,
    Block,
    If,
    Match,
    ForLoop,
    While,
    Loop,
    Closure,
    OtherExpr,
]

# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Let:
    """``let`` binding; ``type`` is the explicit annotation, if any."""

    type: Optional[TypeNode]
    init: Optional[Expr]
    else_block: Optional[Block]
    line: int


@dataclass(frozen=True)
class ExprStmt:
    expr: Expr


@dataclass(frozen=True)
class ItemStmt:
    """An item declared inside a block (nested fn, const, struct...)."""

    item: Item


Stmt = Union[Let, ExprStmt, ItemStmt]

# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Function:
    """A free function or an impl method.

    Attributes:
        name: Function name
        is_public: True only for a bare ``pub`` visibility
        param_count: Parameter count, ``self`` receiver included
        body: Function body (None for bodiless declarations)
        attributes: Attribute paths (``contractimpl``, ``test``...)
        start_line: First line of the function item (1-indexed)
        end_line: Last line of the function item (1-indexed)
    """

    name: str
    is_public: bool
    param_count: int
    body: Optional[Block]
    attributes: tuple[str, ...]
    start_line: int
    end_line: int

    @property
    def loc(self) -> int:
        return self.end_line - self.start_line + 1


@dataclass(frozen=True)
class Impl:
    type_name: str
    trait_name: Optional[str]
    functions: tuple[Function, ...]
    attributes: tuple[str, ...]
    line: int
    consts: tuple[Const, ...] = ()


@dataclass(frozen=True)
class Struct:
    """A struct; ``fields`` holds field types in declaration order."""

    name: str
    fields: tuple[TypeNode, ...]
    attributes: tuple[str, ...]
    line: int


@dataclass(frozen=True)
class Variant:
    name: str
    fields: tuple[TypeNode, ...]


@dataclass(frozen=True)
class Enum:
    name: str
    variants: tuple[Variant, ...]
    attributes: tuple[str, ...]
    line: int


@dataclass(frozen=True)
class Const:
    name: str
    value: Optional[Expr]
    line: int


@dataclass(frozen=True)
class Use:
    text: str
    line: int


@dataclass(frozen=True)
class ExternCrate:
    name: str
    line: int


@dataclass(frozen=True)
class Module:
    """Inline module ``mod name { ... }``; out-of-line modules have no items."""

    name: str
    items: tuple[Item, ...]
    attributes: tuple[str, ...]
    line: int


@dataclass(frozen=True)
class OtherItem:
    """Traits, type aliases, statics, macro definitions, item macros..."""

    kind: str
    line: int


Item = Union[Function, Impl, Struct, Enum, Const, Use, ExternCrate, Module, OtherItem]


@dataclass(frozen=True)
class SourceFile:
    """A lowered Rust source file."""

    items: tuple[Item, ...]
    line_count: int = 0
    inner_attributes: tuple[str, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Helpers shared by the finders
# ---------------------------------------------------------------------------


def has_attribute(attributes: tuple[str, ...], name: str) -> bool:
    """True if any attribute path equals ``name`` or has it as a segment."""
    return any(attr == name or name in attr.split("::") for attr in attributes)


def walk_all_items(items: tuple[Item, ...]) -> Iterator[Item]:
    """Yield items depth-first, including those in modules and function bodies.

    Impl methods are not yielded on their own; callers reach them through
    the ``Impl``. Items declared inside method bodies are yielded.
    """
    for item in items:
        yield item
        if isinstance(item, Module):
            yield from walk_all_items(item.items)
        elif isinstance(item, Function):
            if item.body is not None:
                yield from walk_all_items(tuple(nested_items(item.body)))
        elif isinstance(item, Impl):
            for fn in item.functions:
                if fn.body is not None:
                    yield from walk_all_items(tuple(nested_items(fn.body)))
        elif isinstance(item, Const):
            if item.value is not None:
                yield from walk_all_items(tuple(nested_items(item.value)))


def nested_items(root: Union[Expr, Stmt]) -> Iterator[Item]:
    """Yield items declared in blocks below ``root``, without entering them."""
    stack: list = [root]
    while stack:
        node = stack.pop()
        if isinstance(node, ItemStmt):
            yield node.item
            continue
        if isinstance(node, (Let, ExprStmt)):
            children = list(stmt_children(node))
        else:
            children = list(expr_children(node))
        stack.extend(reversed(children))


def impl_functions(source: SourceFile) -> Iterator[Function]:
    """Yield methods of top-level impl blocks in declaration order."""
    for item in source.items:
        if isinstance(item, Impl):
            yield from item.functions


def top_level_functions(source: SourceFile) -> Iterator[Function]:
    """Yield top-level free functions and top-level impl methods in order."""
    for item in source.items:
        if isinstance(item, Function):
            yield item
        elif isinstance(item, Impl):
            yield from item.functions


def stmt_children(stmt: Stmt) -> Iterator[Expr]:
    """Expressions directly owned by a statement (not nested items)."""
    if isinstance(stmt, Let):
        if stmt.init is not None:
            yield stmt.init
        if stmt.else_block is not None:
            yield stmt.else_block
    elif isinstance(stmt, ExprStmt):
        yield stmt.expr


def expr_children(expr: Expr) -> Iterator[Union[Expr, Stmt]]:
    """All direct children of an expression, in source order.

    Used by finders that need full-depth traversal; statements are yielded
    for blocks so callers can see ``let`` bindings and nested items.
    """
    if isinstance(expr, Binary):
        yield expr.left
        yield expr.right
    elif isinstance(expr, Call):
        yield expr.func
        yield from expr.args
    elif isinstance(expr, MethodCall):
        yield expr.receiver
        yield from expr.args
    elif isinstance(expr, Block):
        yield from expr.stmts
    elif isinstance(expr, If):
        yield expr.cond
        yield expr.then_branch
        if expr.else_branch is not None:
            yield expr.else_branch
    elif isinstance(expr, Match):
        yield expr.scrutinee
        for arm in expr.arms:
            if arm.guard is not None:
                yield arm.guard
            yield arm.body
    elif isinstance(expr, ForLoop):
        yield expr.iterable
        yield expr.body
    elif isinstance(expr, While):
        yield expr.cond
        yield expr.body
    elif isinstance(expr, Loop):
        yield expr.body
    elif isinstance(expr, Closure):
        yield expr.body
    elif isinstance(expr, OtherExpr):
        yield from expr.children
    # Literal, Path, MacroCall: leaves
