"""Tree-sitter parser wrapper.

Wraps the tree-sitter Rust grammar behind a small interface that reports
malformed input with ``ParsingError`` instead of handing back a tree full
of ERROR nodes.

Usage:
    parser = RustParser()
    tree = parser.parse(source)
    root = tree.root_node
"""

from __future__ import annotations

from typing import Any

import tree_sitter
import tree_sitter_rust

from ..exceptions import ParsingError

_RUST_LANGUAGE = tree_sitter.Language(tree_sitter_rust.language())


def node_text(node: Any) -> str:
    """Decode the source text covered by a node."""
    text = node.text
    if text is None:
        return ""
    return text.decode("utf-8", errors="replace")


def node_line(node: Any) -> int:
    """1-indexed starting line of a node."""
    return node.start_point[0] + 1


class RustParser:
    """Wrapper around tree-sitter for Rust parsing.

    One instance owns one tree-sitter ``Parser``; parsers are not shared
    between threads, so create one per analysis.
    """

    def __init__(self) -> None:
        self._parser = tree_sitter.Parser(_RUST_LANGUAGE)

    def parse(self, source: str) -> Any:
        """Parse source text and return the syntax tree.

        Args:
            source: Rust source code

        Returns:
            tree-sitter Tree whose root has no ERROR or MISSING nodes

        Raises:
            ParsingError: If the text cannot be encoded or contains syntax errors
        """
        try:
            code_bytes = source.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ParsingError(f"encoding error: {e}")

        tree = self._parser.parse(code_bytes)
        if tree is None:
            raise ParsingError("parser returned no tree")
        if tree.root_node.has_error:
            raise ParsingError(f"syntax error near line {_first_error_line(tree.root_node)}")
        return tree


def _first_error_line(root: Any) -> int:
    """Find the line of the first ERROR/MISSING node (for messages only)."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node_line(node)
        if node.has_error:
            stack.extend(reversed(node.children))
    return node_line(root)
