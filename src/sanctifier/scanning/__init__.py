"""Rust front end: tree-sitter parsing and lowering to syntax nodes."""

from .normalizer import TreeSitterNormalizer, parse_source
from .syntax import (
    ArrayType,
    Binary,
    Block,
    Call,
    Closure,
    Const,
    Enum,
    ExprStmt,
    ExternCrate,
    ForLoop,
    Function,
    If,
    Impl,
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
    Struct,
    Use,
    Variant,
    While,
)
from .treesitter_parser import RustParser

__all__ = [
    "ArrayType",
    "Binary",
    "Block",
    "Call",
    "Closure",
    "Const",
    "Enum",
    "ExprStmt",
    "ExternCrate",
    "ForLoop",
    "Function",
    "If",
    "Impl",
    "ItemStmt",
    "Let",
    "Literal",
    "Loop",
    "MacroCall",
    "Match",
    "MatchArm",
    "MethodCall",
    "Module",
    "OtherExpr",
    "OtherItem",
    "OtherType",
    "Path",
    "PathType",
    "RustParser",
    "SourceFile",
    "Struct",
    "TreeSitterNormalizer",
    "Use",
    "Variant",
    "While",
    "parse_source",
]
