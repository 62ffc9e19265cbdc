# src/textrange/iterators/visible_iterator.py
from __future__ import annotations

from typing import Optional

from textrange.dom import tree
from textrange.dom.classifier import StyleClassifier
from textrange.iterators.base import Position, PositionIteratorBase
from textrange.iterators.position_iterator import PositionIterator


class VisiblePositionIterator(PositionIteratorBase):
    """
    Iterates over positions that lie outside every collapsed node.

    Whenever a raw step lands inside a collapsed node (hidden element, comment,
    script, collapsed whitespace...), the whole node is skipped and the check is
    repeated on the landing position, so callers never observe a position
    inside a collapsed subtree.
    """

    def __init__(self, classifier: StyleClassifier, position: Optional[Position] = None) -> None:
        self.classifier = classifier
        self._iterator = PositionIterator()
        super().__init__(position)

    def _get_next(self, current: Position) -> Optional[Position]:
        iterator = self._iterator
        iterator.set_current(current)
        position = iterator.next()
        while position is not None and self._skips(position.node):
            # Skip the node and all its descendants
            node = position.node
            position = Position(node.parent, tree.get_node_index(node) + 1)
        return position

    def _get_previous(self, current: Position) -> Optional[Position]:
        iterator = self._iterator
        iterator.set_current(current)
        position = iterator.previous()
        while position is not None and self._skips(position.node):
            node = position.node
            position = Position(node.parent, tree.get_node_index(node))
        return position

    def _skips(self, node) -> bool:
        return node.parent is not None and self.classifier.is_collapsed_node(node)
