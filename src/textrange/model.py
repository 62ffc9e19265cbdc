# src/textrange/model.py
from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Display(str, Enum):
    INLINE = "inline"
    INLINE_BLOCK = "inline-block"
    INLINE_TABLE = "inline-table"
    BLOCK = "block"
    LIST_ITEM = "list-item"
    NONE = "none"
    TABLE = "table"
    TABLE_CAPTION = "table-caption"
    TABLE_COLUMN_GROUP = "table-column-group"
    TABLE_COLUMN = "table-column"
    TABLE_HEADER_GROUP = "table-header-group"
    TABLE_ROW_GROUP = "table-row-group"
    TABLE_FOOTER_GROUP = "table-footer-group"
    TABLE_ROW = "table-row"
    TABLE_CELL = "table-cell"
    FLEX = "flex"
    GRID = "grid"


class WhiteSpace(str, Enum):
    NORMAL = "normal"
    NOWRAP = "nowrap"
    PRE = "pre"
    PRE_WRAP = "pre-wrap"
    PRE_LINE = "pre-line"
    BREAK_SPACES = "break-spaces"


class Visibility(str, Enum):
    VISIBLE = "visible"
    HIDDEN = "hidden"
    COLLAPSE = "collapse"


class ResolvedStyle(BaseModel):
    """
    The layout-affecting subset of an element's computed style.
    Produced by a StyleResolver; the classifier only ever reads these three values.
    """
    display: Display = Display.INLINE
    white_space: WhiteSpace = WhiteSpace.NORMAL
    visibility: Visibility = Visibility.VISIBLE

    model_config = {"frozen": True}


class TextExtraction(BaseModel):
    """Result of extracting the rendered text of one document (CLI output record)."""
    source: str
    selector: Optional[str] = None
    text: str = ""
    char_count: int = 0
    line_count: int = 0
    errors: list[str] = Field(default_factory=list)

    @classmethod
    def from_text(cls, source: str, text: str, selector: Optional[str] = None) -> "TextExtraction":
        return cls(
            source=source,
            selector=selector,
            text=text,
            char_count=len(text),
            line_count=text.count("\n") + 1 if text else 0,
        )
