# src/textrange/iterators/position_iterator.py
from __future__ import annotations

from typing import Optional

from textrange.dom import tree
from textrange.dom.classifier import StyleClassifier
from textrange.iterators.base import Position, PositionIteratorBase


class PositionIterator(PositionIteratorBase):
    """
    Moves one atomic unit at a time over every position in the tree,
    visible or not. This defines the position address space.
    """

    def __init__(self, position: Optional[Position] = None) -> None:
        super().__init__(position)

    def _get_next(self, current: Position) -> Optional[Position]:
        node, offset = current.node, current.offset

        if offset == tree.get_node_length(node):
            # Move out of node, just after it in its parent
            parent = node.parent
            if parent is None:
                return None
            return Position(parent, tree.get_node_index(node) + 1)

        if tree.is_character_data(node):
            return Position(node, offset + 1)

        child = tree.get_child_at(node, offset)
        if StyleClassifier.contains_positions(child):
            return Position(child, 0)
        return Position(node, offset + 1)

    def _get_previous(self, current: Position) -> Optional[Position]:
        node, offset = current.node, current.offset

        if offset == 0:
            parent = node.parent
            if parent is None:
                return None
            return Position(parent, tree.get_node_index(node))

        if tree.is_character_data(node):
            return Position(node, offset - 1)

        child = tree.get_child_at(node, offset - 1)
        if StyleClassifier.contains_positions(child):
            return Position(child, tree.get_node_length(child))
        return Position(node, offset - 1)
