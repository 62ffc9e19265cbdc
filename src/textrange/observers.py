# src/textrange/observers.py
from __future__ import annotations

import abc
import logging
from typing import Optional

from textrange.dom import tree


class IterationObserver(metaclass=abc.ABCMeta):
    """
    Receives diagnostic checkpoints from the text position iterator.
    Observers never influence control flow or output.
    """

    @abc.abstractmethod
    def on_position(self, direction: str, position) -> None:
        """Called when a next/previous derivation starts from `position`."""

    @abc.abstractmethod
    def on_character(self, position, next_position, character: str, collapsible: bool) -> None:
        """Called with the resolved character of the step position -> next_position."""


class NullObserver(IterationObserver):
    """The default observer: does nothing."""

    def on_position(self, direction: str, position) -> None:
        pass

    def on_character(self, position, next_position, character: str, collapsible: bool) -> None:
        pass


class LoggingObserver(IterationObserver):
    """Writes every checkpoint to a logger at DEBUG level."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._log = logger or logging.getLogger(__name__)

    def on_position(self, direction: str, position) -> None:
        self._log.debug("%s from %s:%d", direction, tree.inspect_node(position.node), position.offset)

    def on_character(self, position, next_position, character: str, collapsible: bool) -> None:
        self._log.debug(
            "step %s:%d -> %s:%d yields %r (collapsible=%s)",
            tree.inspect_node(position.node), position.offset,
            tree.inspect_node(next_position.node), next_position.offset,
            character, collapsible,
        )
