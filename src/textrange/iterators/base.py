# src/textrange/iterators/base.py
from __future__ import annotations

import abc
from typing import Callable, Iterator, Optional

from textrange.dom import tree
from textrange.errors import InvalidPositionError


class Position:
    """
    An immutable boundary point (node, offset).

    For character data the offset lies between characters (0..length), for
    elements and the root it lies between children (0..child count). Two
    positions are equal when they share the same node object and offset.
    """
    __slots__ = ("node", "offset")

    def __init__(self, node, offset: int) -> None:
        if node is None:
            raise InvalidPositionError("A position requires a node.")
        if isinstance(offset, bool) or not isinstance(offset, int):
            raise InvalidPositionError(f"Offset must be an integer, got {offset!r}.")
        length = tree.get_node_length(node)
        if offset < 0 or offset > length:
            raise InvalidPositionError(
                f"Offset {offset} is out of range 0..{length} for {tree.inspect_node(node)}."
            )
        object.__setattr__(self, "node", node)
        object.__setattr__(self, "offset", offset)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self.node is other.node and self.offset == other.offset

    def __hash__(self) -> int:
        return hash((id(self.node), self.offset))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({tree.inspect_node(self.node)}:{self.offset})"

    def as_position(self) -> "Position":
        """Plain Position with the same boundary (drops any annotation)."""
        return Position(self.node, self.offset)

    # --- Boundary helpers ---

    @classmethod
    def before(cls, node) -> "Position":
        """The position in node's parent immediately before node."""
        return cls(node.parent, tree.get_node_index(node))

    @classmethod
    def after(cls, node) -> "Position":
        """The position in node's parent immediately after node."""
        return cls(node.parent, tree.get_node_index(node) + 1)

    @classmethod
    def start_of(cls, node) -> "Position":
        return cls(node, 0)

    @classmethod
    def end_of(cls, node) -> "Position":
        return cls(node, tree.get_node_length(node))


class TextPosition(Position):
    """
    A visible position annotated with the rendered character that precedes it.

    `character` is "" when nothing precedes it inside the iteration range.
    `collapsible` is True when the character is a space from a collapsible run.
    """
    __slots__ = ("character", "collapsible")

    def __init__(self, node, offset: int, character: str = "", collapsible: bool = False) -> None:
        super().__init__(node, offset)
        object.__setattr__(self, "character", character)
        object.__setattr__(self, "collapsible", collapsible)

    @classmethod
    def from_position(cls, position: Position, character: str = "", collapsible: bool = False) -> "TextPosition":
        return cls(position.node, position.offset, character, collapsible)

    def __repr__(self) -> str:
        return f"TextPosition({tree.inspect_node(self.node)}:{self.offset}, {self.character!r})"


_UNSET = object()


class IteratorCursor:
    """
    Cursor state shared by every position iterator.

    Holds the current position and optional next/previous cache slots filled
    on demand from the strategy functions it was built with. Reassigning the
    cursor through `set_current` always empties both slots.
    """

    def __init__(
            self,
            get_next: Callable[[Position], Optional[Position]],
            get_previous: Callable[[Position], Optional[Position]],
            current: Optional[Position] = None,
    ) -> None:
        self._get_next = get_next
        self._get_previous = get_previous
        self.current = current
        self._next = _UNSET
        self._previous = _UNSET

    def set_current(self, position: Optional[Position]) -> None:
        self.current = position
        self._next = _UNSET
        self._previous = _UNSET

    def peek_next(self) -> Optional[Position]:
        if self._next is _UNSET:
            self._next = self._get_next(self.current) if self.current is not None else None
        return self._next

    def peek_previous(self) -> Optional[Position]:
        if self._previous is _UNSET:
            self._previous = self._get_previous(self.current) if self.current is not None else None
        return self._previous

    def next(self) -> Optional[Position]:
        """Moves forward; at the end the cursor stays put and None is returned."""
        following = self.peek_next()
        if following is not None:
            self.set_current(following)
        return following

    def previous(self) -> Optional[Position]:
        """Moves backward; at the start the cursor stays put and None is returned."""
        preceding = self.peek_previous()
        if preceding is not None:
            self.set_current(preceding)
        return preceding


class PositionIteratorBase(metaclass=abc.ABCMeta):
    """
    The iterator contract shared by raw, visible and text position iterators.

    Concrete iterators supply `_get_next` / `_get_previous`; the cursor built
    from them carries the state.
    """

    def __init__(self, position: Optional[Position] = None) -> None:
        self._cursor = IteratorCursor(self._get_next, self._get_previous, position)

    @abc.abstractmethod
    def _get_next(self, current: Position) -> Optional[Position]:
        raise NotImplementedError

    @abc.abstractmethod
    def _get_previous(self, current: Position) -> Optional[Position]:
        raise NotImplementedError

    @property
    def current(self) -> Optional[Position]:
        return self._cursor.current

    def set_current(self, position: Optional[Position]) -> None:
        self._cursor.set_current(position)

    def next(self) -> Optional[Position]:
        return self._cursor.next()

    def previous(self) -> Optional[Position]:
        return self._cursor.previous()

    def peek_next(self) -> Optional[Position]:
        return self._cursor.peek_next()

    def peek_previous(self) -> Optional[Position]:
        return self._cursor.peek_previous()

    def has_next(self) -> bool:
        return self.peek_next() is not None

    def has_previous(self) -> bool:
        return self.peek_previous() is not None

    def __iter__(self) -> Iterator[Position]:
        """Yields every following position until the iterator is exhausted."""
        while True:
            position = self.next()
            if position is None:
                return
            yield position
