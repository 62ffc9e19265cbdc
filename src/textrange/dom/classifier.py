# src/textrange/dom/classifier.py
"""
Style classification of document nodes.

Pure predicates over a node, its resolved style and the surrounding tree shape.
They decide what is a block, what is hidden, which whitespace collapses away and
which implicit separator an element contributes at its edges.
"""
from __future__ import annotations

import re
from typing import Optional

from textrange.dom import tree
from textrange.dom.tree import NodeKind
from textrange.model import Display, ResolvedStyle, Visibility, WhiteSpace

# Elements that cannot contain positions; iteration steps over them.
VOID_ELEMENTS = {
    "area", "base", "basefont", "br", "col", "embed", "frame", "hr", "img",
    "input", "isindex", "link", "meta", "param", "source", "track", "wbr",
}

NON_BLOCK_DISPLAYS = {Display.INLINE, Display.INLINE_BLOCK, Display.INLINE_TABLE, Display.NONE}

# Displays that contribute no separator on either edge
NO_SPACE_DISPLAYS = {
    Display.INLINE_BLOCK, Display.INLINE_TABLE, Display.NONE,
    Display.TABLE_COLUMN, Display.TABLE_COLUMN_GROUP,
}

COLLAPSING_MODES = {WhiteSpace.NORMAL, WhiteSpace.NOWRAP, WhiteSpace.PRE_LINE}

_SPACES_RE = re.compile(r"^[\t\n\f\r ]+$")
_SPACES_MINUS_LINE_BREAKS_RE = re.compile(r"^[\t\f\r ]+$")

COLLAPSIBLE_SPACES = " \t\f\r\n"
COLLAPSIBLE_SPACES_PRE_LINE = " \t\f\r"


class StyleClassifier:
    """
    Answers layout questions about nodes using a style resolver.

    Every style lookup goes through `style_of`, so a resolver is consulted
    once per question and never cached here.
    """

    def __init__(self, resolver) -> None:
        self.resolver = resolver

    # --- Resolved style access ---

    def style_of(self, node) -> ResolvedStyle:
        return self.resolver.resolve(node)

    def display_of(self, node) -> Display:
        return self.style_of(node).display

    def white_space_mode(self, text_node) -> Optional[WhiteSpace]:
        """White-space of the element containing text_node, or None outside any element."""
        parent = text_node.parent
        if parent is None or not tree.is_element(parent):
            return None
        return self.style_of(parent).white_space

    def collapsible_spaces(self, text_node) -> str:
        """Characters that collapse in text_node; empty when whitespace is preserved."""
        mode = self.white_space_mode(text_node)
        if mode is WhiteSpace.PRE_LINE:
            return COLLAPSIBLE_SPACES_PRE_LINE
        if mode in (WhiteSpace.NORMAL, WhiteSpace.NOWRAP):
            return COLLAPSIBLE_SPACES
        return ""

    # --- Structural predicates ---

    def is_block_node(self, node) -> bool:
        """An element whose display is not inline/inline-block/inline-table/none, or the root."""
        if node is None:
            return False
        if tree.is_root(node):
            return True
        return tree.is_element(node) and self.display_of(node) not in NON_BLOCK_DISPLAYS

    @staticmethod
    def is_void_element(node) -> bool:
        return tree.is_html_element(node) and tree.tag_name(node) in VOID_ELEMENTS

    @staticmethod
    def contains_positions(node) -> bool:
        return tree.is_character_data(node) or not StyleClassifier.is_void_element(node)

    def is_whitespace_node(self, node) -> bool:
        if not tree.is_text(node):
            return False
        text = tree.get_data(node)
        if text == "":
            return True
        mode = self.white_space_mode(node)
        if mode is None:
            return False
        return bool(
            (_SPACES_RE.match(text) and mode in (WhiteSpace.NORMAL, WhiteSpace.NOWRAP))
            or (_SPACES_MINUS_LINE_BREAKS_RE.match(text) and mode is WhiteSpace.PRE_LINE)
        )

    def is_hidden(self, node) -> bool:
        """True if some ancestor-or-self element has display none."""
        for ancestor in tree.get_ancestors_and_self(node):
            if tree.is_element(ancestor) and self.display_of(ancestor) is Display.NONE:
                return True
        return False

    def is_visibility_hidden_text_node(self, node) -> bool:
        if not tree.is_text(node):
            return False
        parent = node.parent
        return (
            parent is not None
            and tree.is_element(parent)
            and self.style_of(parent).visibility is not Visibility.VISIBLE
        )

    def _is_line_break_boundary(self, node) -> bool:
        return self.is_block_node(node) or tree.is_html_element(node, "br")

    def _ends_whitespace_scan(self, node) -> bool:
        return (tree.is_text(node) and not self.is_whitespace_node(node)) or tree.is_html_element(node, "img")

    def is_collapsed_whitespace_node(self, node) -> bool:
        """
        A whitespace text node is collapsed when a block boundary or line break is
        met before any real content, scanning backward to the nearest block
        ancestor or forward to the end of it.
        """
        if tree.is_text(node) and tree.get_data(node) == "":
            return True
        if not self.is_whitespace_node(node):
            return False

        ancestor = node.parent
        if ancestor is None:
            return True
        if self.is_hidden(node):
            return True

        while not self.is_block_node(ancestor) and ancestor.parent is not None:
            ancestor = ancestor.parent

        # Backward: anything up to and including the block ancestor itself
        reference = node
        while reference is not ancestor:
            reference = tree.previous_node(reference)
            if reference is None:
                break
            if self._is_line_break_boundary(reference):
                return True
            if self._ends_whitespace_scan(reference):
                break

        # Forward: until the node after the ancestor's subtree
        stop = tree.next_node_descendants(ancestor)
        reference = node
        while True:
            reference = tree.next_node(reference)
            if reference is None or reference is stop:
                break
            if self._is_line_break_boundary(reference):
                return True
            if self._ends_whitespace_scan(reference):
                break

        return False

    def is_collapsed_node(self, node) -> bool:
        """A node that, together with its whole subtree, renders no characters."""
        kind = tree.node_kind(node)
        if kind in (NodeKind.PROCESSING_INSTRUCTION, NodeKind.COMMENT, NodeKind.OTHER_DATA):
            return True
        if kind is NodeKind.ROOT:
            return False
        if tree.is_html_element(node, "script", "style"):
            return True
        if kind is NodeKind.TEXT and tree.is_html_element(node.parent, "script", "style"):
            return True
        return (
            self.is_hidden(node)
            or self.is_visibility_hidden_text_node(node)
            or self.is_collapsed_whitespace_node(node)
        )

    def is_ignored_node(self, node) -> bool:
        kind = tree.node_kind(node)
        return (
            kind in (NodeKind.PROCESSING_INSTRUCTION, NodeKind.COMMENT, NodeKind.OTHER_DATA)
            or (kind is NodeKind.ELEMENT and self.display_of(node) is Display.NONE)
        )

    def has_inner_text(self, node) -> bool:
        """True if some non-collapsed text node lives in node's subtree."""
        stack = [node]
        while stack:
            current = stack.pop()
            if self.is_collapsed_node(current):
                continue
            if tree.is_text(current):
                return True
            stack.extend(reversed(tree.get_children(current)))
        return False

    # --- Implicit separators ---

    def get_leading_space(self, el) -> str:
        display = self.display_of(el)
        if display is Display.INLINE:
            for child in tree.get_children(el):
                if not self.is_ignored_node(child):
                    return self.get_leading_space(child) if tree.is_element(child) else ""
            return ""
        if display in NO_SPACE_DISPLAYS or display is Display.TABLE_CELL:
            return ""
        return "\n"

    def get_trailing_space(self, el) -> str:
        display = self.display_of(el)
        if display is Display.INLINE:
            for child in reversed(tree.get_children(el)):
                if not self.is_ignored_node(child):
                    return self.get_trailing_space(child) if tree.is_element(child) else ""
            return ""
        if display in NO_SPACE_DISPLAYS:
            return ""
        if display is Display.TABLE_CELL:
            return "\t"
        return "\n" if self.has_inner_text(el) else ""
