"""Normalizer: converts tree-sitter Rust trees to ``syntax`` nodes.

tree-sitter gives a concrete tree with one node type per grammar rule.
This module folds it into the handful of node kinds the finders care
about, keeping every other expression as an ``OtherExpr`` container so
full-depth traversals still reach nested calls and operators.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from ..exceptions import ParsingError
from .syntax import (
    ArrayType,
    Binary,
    Block,
    Call,
    Closure,
    Const,
    Enum,
    ExternCrate,
    ExprStmt,
    ForLoop,
    Function,
    If,
    Impl,
    Item,
    ItemStmt,
    Let,
    Literal,
    Loop,
    MacroCall,
    Match,
    MatchArm,
    MethodCall,
    Module,
    OtherExpr,
    OtherItem,
    OtherType,
    Path,
    PathType,
    SourceFile,
    Stmt,
    Struct,
    TypeNode,
    Use,
    Variant,
    While,
)
from .treesitter_parser import RustParser, node_line, node_text

logger = logging.getLogger(__name__)

_COMMENTS = frozenset({"line_comment", "block_comment"})

_TYPE_KINDS = frozenset(
    {
        "primitive_type",
        "type_identifier",
        "generic_type",
        "generic_type_with_turbofish",
        "scoped_type_identifier",
        "reference_type",
        "array_type",
        "tuple_type",
        "unit_type",
        "pointer_type",
        "function_type",
        "dynamic_type",
        "abstract_type",
        "bounded_type",
        "never_type",
        "qualified_type",
        "bracketed_type",
    }
)

# Children never lowered as expressions by the generic fallback
_SKIP_CHILD = _COMMENTS | _TYPE_KINDS | {
    "attribute_item",
    "inner_attribute_item",
    "field_identifier",
    "shorthand_field_identifier",
    "lifetime",
    "label",
    "mutable_specifier",
    "type_arguments",
}

_PATH_KINDS = frozenset({"identifier", "self", "crate", "super", "scoped_identifier", "metavariable"})

_LITERAL_KINDS = {
    "integer_literal": "int",
    "float_literal": "float",
    "char_literal": "char",
    "boolean_literal": "bool",
}

_STRING_KINDS = frozenset({"string_literal", "raw_string_literal"})

_WRAPPED_BLOCKS = frozenset({"unsafe_block", "async_block", "const_block", "try_block", "gen_block"})

_FUNCTION_PARAM_KINDS = frozenset({"parameter", "self_parameter", "variadic_parameter"})

# Generic arguments that are not types (const generics, lifetimes, bindings)
_NON_TYPE_ARGS = _COMMENTS | {
    "lifetime",
    "type_binding",
    "block",
    "integer_literal",
    "string_literal",
    "boolean_literal",
    "char_literal",
    "float_literal",
    "negative_literal",
    "trait_bounds",
}

_RAW_STRING = re.compile(r'^[bc]?r(#*)"(.*)"\1$', re.DOTALL)
_ATTRIBUTE_PATH = re.compile(r"#!?\[\s*([A-Za-z_][\w:]*)")
_GENERIC_ARGS = re.compile(r"<[^<>]*>")
_INT_PREFIX = re.compile(r"^(0x[0-9a-fA-F_]+|0o[0-7_]+|0b[01_]+|[0-9][0-9_]*)")


class TreeSitterNormalizer:
    """Parses Rust source and lowers it to a ``SourceFile``.

    Usage:
        normalizer = TreeSitterNormalizer()
        syntax = normalizer.parse_file(content)
        if syntax is None:
            # unparsable input
    """

    def __init__(self) -> None:
        self._parser = RustParser()

    def parse_file(self, content: str, path: str = "<source>") -> Optional[SourceFile]:
        """Parse file content and return the lowered tree.

        Args:
            content: File content as string
            path: File path, used in log messages only

        Returns:
            SourceFile, or None if the content does not parse cleanly
        """
        try:
            tree = self._parser.parse(content)
        except ParsingError as e:
            logger.debug(f"Unparsable source {path}: {e.reason}")
            return None
        return lower_source_file(tree.root_node)


def parse_source(content: str, path: str = "<source>") -> Optional[SourceFile]:
    """Parse Rust source text into a ``SourceFile`` (None when unparsable)."""
    return TreeSitterNormalizer().parse_file(content, path)


def lower_source_file(root: Any) -> SourceFile:
    inner = tuple(
        _attribute_path(child) for child in root.named_children if child.type == "inner_attribute_item"
    )
    return SourceFile(
        items=_lower_items(root),
        line_count=root.end_point[0] + 1,
        inner_attributes=inner,
    )


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


def _lower_items(container: Any) -> tuple[Item, ...]:
    """Lower the item children of a source file, module or impl body.

    Outer attributes are separate sibling nodes in tree-sitter; they are
    attached to the next item.
    """
    items: list[Item] = []
    pending: list[str] = []
    for child in container.named_children:
        if child.type in _COMMENTS or child.type == "inner_attribute_item":
            continue
        if child.type == "attribute_item":
            pending.append(_attribute_path(child))
            continue
        items.append(_lower_item(child, tuple(pending)))
        pending = []
    return tuple(items)


def _lower_item(node: Any, attributes: tuple[str, ...]) -> Item:
    kind = node.type
    line = node_line(node)

    if kind == "function_item":
        return _lower_function(node, attributes)

    if kind == "impl_item":
        body = node.child_by_field_name("body")
        members = _lower_items(body) if body is not None else ()
        trait = node.child_by_field_name("trait")
        return Impl(
            type_name=_type_name(node.child_by_field_name("type")),
            trait_name=_type_name(trait) if trait is not None else None,
            functions=tuple(m for m in members if isinstance(m, Function)),
            attributes=attributes,
            line=line,
            consts=tuple(m for m in members if isinstance(m, Const)),
        )

    if kind == "struct_item":
        return Struct(
            name=_field_text(node, "name"),
            fields=_lower_fields(node.child_by_field_name("body")),
            attributes=attributes,
            line=line,
        )

    if kind == "enum_item":
        variants: list[Variant] = []
        body = node.child_by_field_name("body")
        if body is not None:
            for child in body.named_children:
                if child.type == "enum_variant":
                    variants.append(
                        Variant(
                            name=_field_text(child, "name"),
                            fields=_lower_fields(child.child_by_field_name("body")),
                        )
                    )
        return Enum(
            name=_field_text(node, "name"),
            variants=tuple(variants),
            attributes=attributes,
            line=line,
        )

    if kind == "const_item":
        value = node.child_by_field_name("value")
        return Const(
            name=_field_text(node, "name"),
            value=_lower_expr(value) if value is not None else None,
            line=line,
        )

    if kind == "use_declaration":
        return Use(text=node_text(node), line=line)

    if kind == "extern_crate_declaration":
        return ExternCrate(name=_field_text(node, "name"), line=line)

    if kind == "mod_item":
        body = node.child_by_field_name("body")
        return Module(
            name=_field_text(node, "name"),
            items=_lower_items(body) if body is not None else (),
            attributes=attributes,
            line=line,
        )

    return OtherItem(kind=kind, line=line)


def _lower_function(node: Any, attributes: tuple[str, ...]) -> Function:
    params = node.child_by_field_name("parameters")
    param_count = 0
    if params is not None:
        param_count = sum(1 for p in params.named_children if p.type in _FUNCTION_PARAM_KINDS)

    body = node.child_by_field_name("body")
    is_public = any(
        child.type == "visibility_modifier" and node_text(child).strip() == "pub"
        for child in node.children
    )
    return Function(
        name=_field_text(node, "name"),
        is_public=is_public,
        param_count=param_count,
        body=_lower_block(body) if body is not None else None,
        attributes=attributes,
        start_line=node_line(node),
        end_line=node.end_point[0] + 1,
    )


def _lower_fields(body: Any) -> tuple[TypeNode, ...]:
    """Field types of a struct or enum variant body (named or tuple form)."""
    if body is None:
        return ()
    if body.type == "field_declaration_list":
        types = []
        for child in body.named_children:
            if child.type == "field_declaration":
                ty = child.child_by_field_name("type")
                if ty is not None:
                    types.append(_lower_type(ty))
        return tuple(types)
    if body.type == "ordered_field_declaration_list":
        return tuple(_lower_type(ty) for ty in body.children_by_field_name("type"))
    return ()


def _attribute_path(node: Any) -> str:
    match = _ATTRIBUTE_PATH.match(node_text(node))
    return match.group(1) if match else ""


def _type_name(node: Any) -> str:
    if node is None:
        return ""
    text = _strip_generics(node_text(node))
    return text.split("::")[-1].strip()


def _field_text(node: Any, field_name: str) -> str:
    child = node.child_by_field_name(field_name)
    return node_text(child) if child is not None else ""


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


def _lower_type(node: Any) -> TypeNode:
    kind = node.type
    if kind in ("primitive_type", "type_identifier"):
        return PathType(name=node_text(node))
    if kind == "scoped_type_identifier":
        return PathType(name=_field_text(node, "name"))
    if kind == "generic_type":
        args_node = node.child_by_field_name("type_arguments")
        args: tuple[TypeNode, ...] = ()
        if args_node is not None:
            args = tuple(
                _lower_type(child)
                for child in args_node.named_children
                if child.type not in _NON_TYPE_ARGS
            )
        return PathType(name=_type_name(node.child_by_field_name("type")), args=args)
    if kind == "array_type":
        element = node.child_by_field_name("element")
        length = node.child_by_field_name("length")
        if element is None or length is None:
            # Slices have no length
            return OtherType(text=node_text(node))
        return ArrayType(element=_lower_type(element), length=_int_value(length))
    return OtherType(text=node_text(node))


def _int_value(node: Any) -> Optional[int]:
    if node.type != "integer_literal":
        return None
    match = _INT_PREFIX.match(node_text(node))
    if match is None:
        return None
    digits = match.group(1).replace("_", "")
    try:
        return int(digits, 0) if digits[:2] in ("0x", "0o", "0b") else int(digits, 10)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Statements and expressions
# ---------------------------------------------------------------------------


def _lower_block(node: Any) -> Block:
    stmts: list[Stmt] = []
    pending: list[str] = []
    for child in node.named_children:
        kind = child.type
        if kind in _COMMENTS or kind in ("label", "empty_statement", "inner_attribute_item"):
            continue
        if kind == "attribute_item":
            pending.append(_attribute_path(child))
            continue
        if kind == "let_declaration":
            stmts.append(_lower_let(child))
        elif kind == "expression_statement":
            inner = _first_expression_child(child)
            if inner is not None:
                stmts.append(ExprStmt(_lower_expr(inner)))
        elif kind in _ITEM_KINDS:
            stmts.append(ItemStmt(_lower_item(child, tuple(pending))))
        else:
            stmts.append(ExprStmt(_lower_expr(child)))
        pending = []
    return Block(stmts=tuple(stmts), line=node_line(node))


_ITEM_KINDS = frozenset(
    {
        "function_item",
        "function_signature_item",
        "impl_item",
        "struct_item",
        "enum_item",
        "union_item",
        "const_item",
        "static_item",
        "use_declaration",
        "extern_crate_declaration",
        "mod_item",
        "trait_item",
        "type_item",
        "macro_definition",
        "foreign_mod_item",
        "associated_type",
    }
)


def _lower_let(node: Any) -> Let:
    ty = node.child_by_field_name("type")
    value = node.child_by_field_name("value")
    alternative = node.child_by_field_name("alternative")
    return Let(
        type=_lower_type(ty) if ty is not None else None,
        init=_lower_expr(value) if value is not None else None,
        else_block=_lower_block(alternative) if alternative is not None else None,
        line=node_line(node),
    )


def _first_expression_child(node: Any) -> Any:
    for child in node.named_children:
        if child.type not in _COMMENTS:
            return child
    return None


def _lower_expr(node: Any) -> Any:
    kind = node.type
    line = node_line(node)

    if kind in _PATH_KINDS:
        return Path(segments=_path_segments(node_text(node)), line=line)

    if kind in _STRING_KINDS:
        text = node_text(node)
        lit_kind = "byte_str" if text[:1] in ("b", "c") else "str"
        return Literal(kind=lit_kind, value=_string_value(text), line=line)

    if kind in _LITERAL_KINDS:
        return Literal(kind=_LITERAL_KINDS[kind], value=node_text(node), line=line)

    if kind in ("binary_expression", "compound_assignment_expr"):
        operator = node.child_by_field_name("operator")
        return Binary(
            op=operator.type if operator is not None else "",
            left=_lower_expr(node.child_by_field_name("left")),
            right=_lower_expr(node.child_by_field_name("right")),
            line=line,
        )

    if kind == "call_expression":
        return _lower_call(node)

    if kind == "macro_invocation":
        return _lower_macro(node)

    if kind == "block":
        return _lower_block(node)

    if kind in _WRAPPED_BLOCKS:
        for child in node.named_children:
            if child.type == "block":
                return _lower_block(child)
        return Block(stmts=(), line=line)

    if kind == "if_expression":
        alternative = node.child_by_field_name("alternative")
        else_branch = None
        if alternative is not None:
            inner = _first_expression_child(alternative)
            if inner is not None:
                else_branch = _lower_expr(inner)
        return If(
            cond=_lower_expr(node.child_by_field_name("condition")),
            then_branch=_lower_block(node.child_by_field_name("consequence")),
            else_branch=else_branch,
            line=line,
        )

    if kind == "match_expression":
        arms: list[MatchArm] = []
        body = node.child_by_field_name("body")
        if body is not None:
            for arm in body.named_children:
                if arm.type != "match_arm":
                    continue
                pattern = arm.child_by_field_name("pattern")
                guard = pattern.child_by_field_name("condition") if pattern is not None else None
                value = arm.child_by_field_name("value")
                arms.append(
                    MatchArm(
                        guard=_lower_expr(guard) if guard is not None else None,
                        body=_lower_expr(value) if value is not None else Block(stmts=(), line=node_line(arm)),
                    )
                )
        return Match(
            scrutinee=_lower_expr(node.child_by_field_name("value")),
            arms=tuple(arms),
            line=line,
        )

    if kind == "for_expression":
        return ForLoop(
            iterable=_lower_expr(node.child_by_field_name("value")),
            body=_lower_block(node.child_by_field_name("body")),
            line=line,
        )

    if kind == "while_expression":
        return While(
            cond=_lower_expr(node.child_by_field_name("condition")),
            body=_lower_block(node.child_by_field_name("body")),
            line=line,
        )

    if kind == "loop_expression":
        return Loop(body=_lower_block(node.child_by_field_name("body")), line=line)

    if kind == "closure_expression":
        body = node.child_by_field_name("body")
        return Closure(
            body=_lower_expr(body) if body is not None else Block(stmts=(), line=line),
            line=line,
        )

    if kind == "let_condition":
        # Only the scrutinee is an expression; the pattern is not
        value = node.child_by_field_name("value")
        children = (_lower_expr(value),) if value is not None else ()
        return OtherExpr(kind=kind, children=children, text=node_text(node), line=line)

    return OtherExpr(
        kind=kind,
        children=tuple(
            _lower_expr(child) for child in node.named_children if child.type not in _SKIP_CHILD
        ),
        text=node_text(node),
        line=line,
    )


def _lower_call(node: Any) -> Any:
    line = node_line(node)
    target = node.child_by_field_name("function")
    args_node = node.child_by_field_name("arguments")
    args: tuple = ()
    if args_node is not None:
        args = tuple(
            _lower_expr(child) for child in args_node.named_children if child.type not in _SKIP_CHILD
        )

    if target.type == "generic_function":
        target = target.child_by_field_name("function")

    if target.type == "field_expression":
        receiver = target.child_by_field_name("value")
        return MethodCall(
            receiver=_lower_expr(receiver),
            method=_field_text(target, "field"),
            args=args,
            receiver_text=node_text(receiver),
            text=node_text(node),
            line=line,
        )

    return Call(func=_lower_expr(target), args=args, line=line, text=node_text(node))


def _lower_macro(node: Any) -> MacroCall:
    macro_path = node.child_by_field_name("macro")
    segments = _path_segments(node_text(macro_path)) if macro_path is not None else ()

    token_tree = None
    for child in node.children:
        if child.type == "token_tree":
            token_tree = child
            break

    inner: list[Any] = []
    if token_tree is not None:
        # First and last children are the delimiters
        inner = [c for c in token_tree.children[1:-1] if c.type not in _COMMENTS]

    return MacroCall(
        name=segments[-1] if segments else "",
        tokens=node_text(token_tree) if token_tree is not None else "",
        string_args=tuple(_string_value(node_text(c)) for c in inner if c.type in _STRING_KINDS),
        token_count=len(inner),
        text=node_text(node),
        line=node_line(node),
    )


def _strip_generics(text: str) -> str:
    previous = None
    while previous != text:
        previous = text
        text = _GENERIC_ARGS.sub("", text)
    return text


def _path_segments(text: str) -> tuple[str, ...]:
    return tuple(seg.strip() for seg in _strip_generics(text).split("::") if seg.strip())


def _string_value(text: str) -> str:
    """Literal contents of a string token, without quotes or prefixes."""
    raw = _RAW_STRING.match(text)
    if raw is not None:
        return raw.group(2)
    if text[:1] in ("b", "c"):
        text = text[1:]
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        return text[1:-1]
    return text
