# src/textrange/dom/tree.py
"""
Tree accessor over BeautifulSoup documents.

The core never touches bs4 types directly; every question about node kind,
parent/child structure and character data goes through these helpers.
NavigableString subclasses str, so nodes are always compared by identity.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from bs4 import BeautifulSoup, Tag, NavigableString
from bs4.element import CData, Comment, PreformattedString, ProcessingInstruction

from textrange.errors import StructuralInconsistencyError


class NodeKind(str, Enum):
    ROOT = "root"
    ELEMENT = "element"
    TEXT = "text"
    COMMENT = "comment"
    PROCESSING_INSTRUCTION = "processing-instruction"
    OTHER_DATA = "other-data"  # doctype, declaration


def node_kind(node) -> NodeKind:
    """Classifies a bs4 object into one of the DOM node kinds the core understands."""
    if isinstance(node, BeautifulSoup):
        return NodeKind.ROOT
    if isinstance(node, Tag):
        return NodeKind.ELEMENT
    if isinstance(node, Comment):
        return NodeKind.COMMENT
    if isinstance(node, ProcessingInstruction):  # includes XMLProcessingInstruction
        return NodeKind.PROCESSING_INSTRUCTION
    if isinstance(node, CData) or (isinstance(node, NavigableString) and not isinstance(node, PreformattedString)):
        return NodeKind.TEXT
    if isinstance(node, NavigableString):
        return NodeKind.OTHER_DATA
    raise TypeError(f"Not a document node: {node!r}")


def is_root(node) -> bool:
    return isinstance(node, BeautifulSoup)


def is_element(node) -> bool:
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def is_text(node) -> bool:
    return node is not None and node_kind(node) is NodeKind.TEXT


def is_character_data(node) -> bool:
    """Text, comments, processing instructions and doctypes all hold character offsets."""
    return isinstance(node, NavigableString)


def tag_name(node) -> str:
    return node.name.lower() if is_element(node) and node.name else ""


def is_html_element(node, *names: str) -> bool:
    """True if node is an element and (when names are given) its tag is one of them."""
    if not is_element(node):
        return False
    return not names or tag_name(node) in names


def get_parent(node):
    return node.parent


def get_children(node) -> List:
    return node.contents if isinstance(node, Tag) else []


def get_data(node) -> str:
    return str(node) if is_character_data(node) else ""


def get_node_length(node) -> int:
    """Number of offsets in node: characters for character data, children otherwise."""
    if is_character_data(node):
        return len(node)
    return len(node.contents)


def get_node_index(node) -> int:
    """Index of node among its parent's children, compared by identity."""
    parent = node.parent
    if parent is None:
        return 0
    for index, child in enumerate(parent.contents):
        if child is node:
            return index
    raise StructuralInconsistencyError(f"{inspect_node(node)} is not a child of {inspect_node(parent)}")


def get_child_at(node, index: int):
    """Returns the child at index or raises if the tree no longer has it."""
    children = get_children(node)
    if index < 0 or index >= len(children):
        raise StructuralInconsistencyError(f"No child node at index {index} in {inspect_node(node)}")
    return children[index]


def get_ancestors(node) -> List:
    """Ancestors from the root down to the parent of node."""
    ancestors = []
    parent = node.parent
    while parent is not None:
        ancestors.append(parent)
        parent = parent.parent
    ancestors.reverse()
    return ancestors


def get_ancestors_and_self(node) -> List:
    return get_ancestors(node) + [node]


def get_last_descendant_or_self(node):
    while get_children(node):
        node = get_children(node)[-1]
    return node


def _next_sibling(node):
    parent = node.parent
    if parent is None:
        return None
    index = get_node_index(node)
    return parent.contents[index + 1] if index + 1 < len(parent.contents) else None


def _previous_sibling(node):
    parent = node.parent
    if parent is None:
        return None
    index = get_node_index(node)
    return parent.contents[index - 1] if index > 0 else None


def next_node_descendants(node) -> Optional[object]:
    """The first node after node's whole subtree in tree order."""
    while node is not None and _next_sibling(node) is None:
        node = node.parent
    if node is None:
        return None
    return _next_sibling(node)


def next_node(node, exclude_children: bool = False) -> Optional[object]:
    """The node after node in tree order."""
    if not exclude_children and get_children(node):
        return get_children(node)[0]
    return next_node_descendants(node)


def previous_node(node) -> Optional[object]:
    """
    The node before node in tree order. Stops below the document root:
    the root itself is never returned.
    """
    previous = _previous_sibling(node)
    if previous is not None:
        return get_last_descendant_or_self(previous)
    parent = node.parent
    if parent is not None and is_element(parent):
        return parent
    return None


def inspect_node(node) -> str:
    """Short human readable description for logs and error messages."""
    if node is None:
        return "[None]"
    kind = node_kind(node)
    if kind is NodeKind.ROOT:
        return "[Document]"
    if kind is NodeKind.ELEMENT:
        ident = node.get("id")
        suffix = f"#{ident}" if ident else ""
        return f"[{node.name}{suffix}, {len(node.contents)}]"
    data = get_data(node)
    preview = data if len(data) <= 20 else data[:17] + "..."
    return f"[{kind.value}({preview!r})]"
