# src/textrange/engine.py
from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel

from textrange.dom import tree
from textrange.dom.classifier import StyleClassifier
from textrange.dom.style import DefaultStyleResolver
from textrange.errors import InvalidPositionError, StyleCapabilityError
from textrange.iterators.base import Position, TextPosition
from textrange.iterators.position_iterator import PositionIterator
from textrange.iterators.text_iterator import TextPositionIterator
from textrange.iterators.visible_iterator import VisiblePositionIterator
from textrange.managers.config_manager import config_manager
from textrange.observers import IterationObserver, LoggingObserver, NullObserver

logger = logging.getLogger(__name__)


def check_style_capability(resolver) -> None:
    """Raises StyleCapabilityError unless resolver offers a callable `resolve(node)`."""
    if resolver is None or not callable(getattr(resolver, "resolve", None)):
        raise StyleCapabilityError(
            f"No means of obtaining resolved style properties: {type(resolver).__name__} has no resolve(node)."
        )


class TextRangeEngine:
    """
    Entry point for rendered text queries over a document tree.

    Bundles the style classifier and the observer, and builds the raw,
    visible and text position iterators on top of them.
    """

    def __init__(self, resolver=None, observer: Optional[IterationObserver] = None):
        if resolver is None:
            resolver = DefaultStyleResolver()
        check_style_capability(resolver)
        self.resolver = resolver
        self.classifier = StyleClassifier(resolver)

        if observer is None and config_manager.get_nested("iteration.trace", False):
            observer = LoggingObserver()
        self.observer = observer or NullObserver()

    # --- Iterator factories ---

    def position_iterator(self, position: Position) -> PositionIterator:
        return PositionIterator(position)

    def visible_position_iterator(self, position: Position) -> VisiblePositionIterator:
        return VisiblePositionIterator(self.classifier, position)

    def text_position_iterator(
            self,
            start: Optional[Position] = None,
            end: Optional[Position] = None,
            position: Optional[Position] = None,
    ) -> TextPositionIterator:
        return TextPositionIterator(self.classifier, start=start, end=end, position=position, observer=self.observer)

    # --- Rendered text ---

    def rendered_text(self, start: Position, end: Position) -> str:
        """Concatenates the rendered characters between two boundaries."""
        iterator = self.text_position_iterator(start=start, end=end)
        return "".join(position.character for position in iterator)

    def inner_text(self, node) -> str:
        """Rendered text of node's full subtree."""
        return self.rendered_text(Position.start_of(node), Position.end_of(node))

    def range_for_node_contents(self, node) -> "TextRange":
        return TextRange(start=Position.start_of(node), end=Position.end_of(node))

    # --- Offset mapping ---

    def _contents_iterator(self, root) -> TextPositionIterator:
        return self.text_position_iterator(start=Position.start_of(root), end=Position.end_of(root))

    def text_offset(self, root, position: Position) -> int:
        """
        Character offset of a boundary within the rendered text of root's contents.

        Raises:
            InvalidPositionError: If position lies outside root.
        """
        iterator = self._contents_iterator(root)
        target = iterator.adjust_position(position)
        offset = 0
        current = iterator.current
        while current != target:
            current = iterator.next()
            if current is None:
                raise InvalidPositionError(f"{position!r} is not inside {tree.inspect_node(root)}.")
            offset += 1
        return offset

    def position_at_offset(self, root, offset: int) -> TextPosition:
        """
        The text position `offset` characters into root's rendered text.

        Raises:
            InvalidPositionError: If offset is negative or past the end of the text.
        """
        if offset < 0:
            raise InvalidPositionError(f"Text offset must not be negative, got {offset}.")
        iterator = self._contents_iterator(root)
        position = iterator.current
        for _ in range(offset):
            position = iterator.next()
            if position is None:
                raise InvalidPositionError(
                    f"Text offset {offset} is past the end of the rendered text of {tree.inspect_node(root)}."
                )
        return position


class TextRange(BaseModel):
    """A pair of boundaries whose rendered text can be queried."""
    start: Position
    end: Position

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    @classmethod
    def for_node_contents(cls, node) -> "TextRange":
        return cls(start=Position.start_of(node), end=Position.end_of(node))

    @property
    def collapsed(self) -> bool:
        return self.start == self.end

    def text(self, engine: Optional[TextRangeEngine] = None) -> str:
        """Rendered text between start and end (with the default engine unless given one)."""
        return (engine or get_default_engine()).rendered_text(self.start, self.end)


class InitResult(BaseModel):
    """Outcome of the one-time capability probe."""
    ok: bool
    error: Optional[str] = None
    engine: Optional[TextRangeEngine] = None

    model_config = {"arbitrary_types_allowed": True}


def initialize(resolver=None, observer: Optional[IterationObserver] = None) -> InitResult:
    """
    Probes the style resolution capability and builds an engine.
    Never raises for a missing capability; the caller inspects `ok`.
    """
    try:
        engine = TextRangeEngine(resolver=resolver, observer=observer)
    except StyleCapabilityError as e:
        logger.error("Text range initialization failed: %s", e)
        return InitResult(ok=False, error=str(e))
    logger.debug("Text range engine initialized with %s.", type(engine.resolver).__name__)
    return InitResult(ok=True, engine=engine)


_default_engine: Optional[TextRangeEngine] = None


def get_default_engine() -> TextRangeEngine:
    """Lazily built engine using the default style resolver."""
    global _default_engine
    if _default_engine is None:
        _default_engine = TextRangeEngine()
    return _default_engine
