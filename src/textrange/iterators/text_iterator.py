# src/textrange/iterators/text_iterator.py
"""
Iteration over rendered text positions.

Every visible step (one position to the next) is first classified into a
StepKind: a plain character, a collapsible space, a forced line break, an
implicit block newline, an implicit table-cell tab, or nothing. Whether a space,
block newline or cell tab is actually rendered depends on its neighbours, so
those are resolved with iterative look-behind/look-ahead over the step kinds:

- a space renders only between two characters, and only as the first of a run;
- a block newline renders once per run of block boundaries, only after a
  character and only before a character, line break or cell, inside the range;
- a cell tab renders only before a character, line break or another cell,
  inside the range.

A text position is the position right after a rendered character, or the
start of the range (or document). Forward and backward moves both scan
visible steps with the same resolution, which is what makes them inverses.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, FrozenSet, NamedTuple, Optional, Tuple

from textrange.dom import tree
from textrange.dom.classifier import StyleClassifier
from textrange.errors import InvalidPositionError
from textrange.iterators.base import Position, PositionIteratorBase, TextPosition
from textrange.iterators.visible_iterator import VisiblePositionIterator
from textrange.observers import IterationObserver, NullObserver

logger = logging.getLogger(__name__)


class StepKind(str, Enum):
    NONE = "none"
    CHAR = "char"
    SPACE = "space"
    BREAK = "break"
    BLOCK = "block"
    CELL = "cell"


class Step(NamedTuple):
    kind: StepKind
    character: str = ""


NO_STEP = Step(StepKind.NONE)
BREAK_STEP = Step(StepKind.BREAK, "\n")
SPACE_STEP = Step(StepKind.SPACE, " ")

_SKIP_FOR_SPACE_BEFORE: FrozenSet[StepKind] = frozenset({StepKind.NONE})
_SKIP_FOR_SPACE_AFTER: FrozenSet[StepKind] = frozenset({StepKind.NONE, StepKind.SPACE})
_SKIP_FOR_BLOCK_BEFORE: FrozenSet[StepKind] = frozenset({StepKind.NONE, StepKind.SPACE, StepKind.CELL})
_SKIP_FOR_BLOCK_AFTER: FrozenSet[StepKind] = frozenset({StepKind.NONE, StepKind.SPACE, StepKind.BLOCK})
_SKIP_FOR_CELL_AFTER: FrozenSet[StepKind] = frozenset({StepKind.NONE, StepKind.SPACE})
_SEPARATOR_FOLLOWERS: FrozenSet[StepKind] = frozenset({StepKind.CHAR, StepKind.BREAK, StepKind.CELL})


class TextPositionIterator(PositionIteratorBase):
    """
    Moves between text positions, each separated from the next by exactly one
    rendered character.

    Args:
        classifier: The style classifier answering layout questions.
        start: Optional lower bound of the iteration range.
        end: Optional upper bound of the iteration range.
        position: Initial position (defaults to start).
        observer: Optional diagnostics observer.
    """

    def __init__(
            self,
            classifier: StyleClassifier,
            start: Optional[Position] = None,
            end: Optional[Position] = None,
            position: Optional[Position] = None,
            observer: Optional[IterationObserver] = None,
    ) -> None:
        if start is None and position is None:
            raise InvalidPositionError("A text position iterator needs a start or an initial position.")
        self.classifier = classifier
        self.observer = observer or NullObserver()
        self._visible = VisiblePositionIterator(classifier)
        # Step derivations keyed by (id(node), offset) of the step's first position
        self._steps: Dict[Tuple[int, int], Tuple[Optional[Step], Optional[Position]]] = {}
        self.start: Optional[TextPosition] = None
        self.end: Optional[TextPosition] = None
        super().__init__(None)

        # Range bounds are canonicalised against the whole document,
        # the initial position against the range.
        adjusted_start = self.adjust_position(start) if start is not None else None
        adjusted_end = self.adjust_position(end) if end is not None else None
        self.start, self.end = adjusted_start, adjusted_end
        initial = self.adjust_position(position) if position is not None else self.start
        self.set_current(initial)
        logger.debug("Text iteration range %r .. %r from %r", self.start, self.end, initial)

    # --- Public derivation API ---

    def character_between(self, position: Position, next_position: Optional[Position] = None) -> Tuple[str, bool]:
        """
        Returns (character, collapsible) for the visible step starting at position.
        The character is "" when the step renders nothing.
        """
        step, following = self._step_from(position)
        if step is None:
            return "", False
        if next_position is not None and next_position != following:
            raise InvalidPositionError(f"{next_position!r} does not follow {position!r}.")
        character = self._resolve(position, step, following)
        return character, bool(character) and step.kind is StepKind.SPACE

    def adjust_position(self, position: Position) -> TextPosition:
        """
        Snaps an arbitrary boundary onto the text position grid: back to the
        previous text position, then forward again. If the forward step lands on
        the original position it was already on the grid.
        """
        preceding = self._get_previous(position)
        if preceding is None:
            if self.start is not None and position == self.start:
                return self.start
            return TextPosition.from_position(position)
        following = self._get_next(preceding)
        if following is not None and following == position:
            return following
        return preceding

    # --- Cursor strategies ---

    def _get_next(self, current: Position) -> Optional[TextPosition]:
        self.observer.on_position("next", current)
        if self.end is not None and current == self.end:
            return None

        position = current
        while True:
            step, following = self._step_from(position)
            if step is None:
                return None
            character = self._resolve(position, step, following)
            collapsible = bool(character) and step.kind is StepKind.SPACE
            self.observer.on_character(position, following, character, collapsible)
            if character:
                return TextPosition.from_position(following, character, collapsible)
            if self.end is not None and following == self.end:
                return None
            position = following

    def _get_previous(self, current: Position) -> Optional[TextPosition]:
        self.observer.on_position("previous", current)
        if self.start is not None and current == self.start:
            return None

        position = current
        first = True
        while True:
            if not first and self.start is not None and position == self.start:
                return self.start
            preceding = self._visible_previous(position)
            if preceding is None:
                return None if first else TextPosition.from_position(position)
            step, _ = self._step_from(preceding)
            character = self._resolve(preceding, step, position)
            # The step ending at current itself never counts: its end is current
            if character and not first:
                return TextPosition.from_position(position, character, step.kind is StepKind.SPACE)
            first = False
            position = preceding

    # --- Visible steps ---

    def _visible_previous(self, position: Position) -> Optional[Position]:
        self._visible.set_current(position)
        return self._visible.previous()

    def _step_from(self, position: Position):
        """The step starting at position as (Step, following position); (None, None) at the end."""
        key = (id(position.node), position.offset)
        cached = self._steps.get(key)
        if cached is None:
            self._visible.set_current(position)
            following = self._visible.next()
            step = self._classify_step(position, following) if following is not None else None
            cached = (step, following)
            self._steps[key] = cached
        return cached

    def _classify_step(self, position: Position, following: Position) -> Step:
        node, offset = following.node, following.offset

        if tree.is_text(node):
            if node is not position.node or offset != position.offset + 1:
                return NO_STEP  # entering the text node
            character = node[offset - 1]
            if character in self.classifier.collapsible_spaces(node):
                return SPACE_STEP
            if character == "\n":
                return BREAK_STEP
            return Step(StepKind.CHAR, character)

        if not (tree.is_element(node) or tree.is_root(node)):
            return NO_STEP

        if offset > 0:
            # The child just before offset was stepped over or left
            child = tree.get_child_at(node, offset - 1)
            if not tree.is_element(child) or self.classifier.is_collapsed_node(child):
                return NO_STEP
            if tree.is_html_element(child, "br"):
                return BREAK_STEP
            trailing = self.classifier.get_trailing_space(child)
            if trailing == "\n":
                return Step(StepKind.BLOCK, trailing)
            if trailing == "\t":
                return Step(StepKind.CELL, trailing)
            return NO_STEP

        if position.node is not node:
            leading = self.classifier.get_leading_space(node)
            if leading:
                return Step(StepKind.BLOCK, leading)
        return NO_STEP

    # --- Resolution ---

    def _resolve(self, position: Position, step: Step, following: Position) -> str:
        kind = step.kind
        if kind is StepKind.CHAR or kind is StepKind.BREAK:
            return step.character
        if kind is StepKind.SPACE:
            if self._kind_before(position, _SKIP_FOR_SPACE_BEFORE, bounded=False) is not StepKind.CHAR:
                return ""
            after = self._kind_after(following, _SKIP_FOR_SPACE_AFTER, bounded=False)
            return step.character if after is StepKind.CHAR else ""
        if kind is StepKind.BLOCK:
            if self._kind_before(position, _SKIP_FOR_BLOCK_BEFORE, bounded=True) is not StepKind.CHAR:
                return ""
            after = self._kind_after(following, _SKIP_FOR_BLOCK_AFTER, bounded=True)
            return step.character if after in _SEPARATOR_FOLLOWERS else ""
        if kind is StepKind.CELL:
            after = self._kind_after(following, _SKIP_FOR_CELL_AFTER, bounded=True)
            return step.character if after in _SEPARATOR_FOLLOWERS else ""
        return ""

    def _kind_before(self, position: Position, skip: FrozenSet[StepKind], bounded: bool) -> Optional[StepKind]:
        """Kind of the nearest step ending at or before position whose kind is not skipped."""
        while True:
            if bounded and self.start is not None and position == self.start:
                return None
            preceding = self._visible_previous(position)
            if preceding is None:
                return None
            step, _ = self._step_from(preceding)
            if step.kind not in skip:
                return step.kind
            position = preceding

    def _kind_after(self, position: Position, skip: FrozenSet[StepKind], bounded: bool) -> Optional[StepKind]:
        """Kind of the nearest step starting at or after position whose kind is not skipped."""
        while True:
            if bounded and self.end is not None and position == self.end:
                return None
            step, following = self._step_from(position)
            if step is None:
                return None
            if step.kind not in skip:
                return step.kind
            position = following
