# src/textrange/dom/style.py
from __future__ import annotations

import abc
import logging
from typing import Dict, Optional

from textrange.dom import tree
from textrange.managers.config_manager import config_manager
from textrange.model import Display, ResolvedStyle, Visibility, WhiteSpace

logger = logging.getLogger(__name__)


class StyleResolver(metaclass=abc.ABCMeta):
    """
    Abstract source of resolved styles.

    Any object with a callable `resolve(node)` returning a ResolvedStyle can act
    as a resolver; subclassing this class is the documented way to provide one.
    """

    @abc.abstractmethod
    def resolve(self, node) -> ResolvedStyle:
        """
        Returns the resolved display, white-space and visibility of node.

        Args:
            node: An element or the document root. Character data resolves to
                  the style of its parent element.
        """
        raise NotImplementedError("Every style resolver must implement 'resolve'.")


# --- User agent defaults ---

HIDDEN_TAGS = {
    "area", "base", "basefont", "datalist", "head", "link", "meta", "noembed",
    "noframes", "noscript", "param", "rp", "script", "source", "style",
    "template", "title", "track",
}

BLOCK_TAGS = {
    "address", "article", "aside", "blockquote", "body", "center", "details",
    "dialog", "dir", "div", "dl", "dd", "dt", "fieldset", "figcaption",
    "figure", "footer", "form", "frameset", "h1", "h2", "h3", "h4", "h5", "h6",
    "header", "hgroup", "hr", "html", "legend", "listing", "main", "menu",
    "nav", "ol", "optgroup", "option", "p", "plaintext", "pre", "search",
    "section", "summary", "ul", "xmp",
}

INLINE_BLOCK_TAGS = {"button", "input", "marquee", "meter", "progress", "select", "textarea"}

TABLE_DISPLAY_FOR_TAG = {
    "table": Display.TABLE,
    "caption": Display.TABLE_CAPTION,
    "colgroup": Display.TABLE_COLUMN_GROUP,
    "col": Display.TABLE_COLUMN,
    "thead": Display.TABLE_HEADER_GROUP,
    "tbody": Display.TABLE_ROW_GROUP,
    "tfoot": Display.TABLE_FOOTER_GROUP,
    "tr": Display.TABLE_ROW,
    "td": Display.TABLE_CELL,
    "th": Display.TABLE_CELL,
}

WHITE_SPACE_FOR_TAG = {
    "pre": WhiteSpace.PRE,
    "listing": WhiteSpace.PRE,
    "plaintext": WhiteSpace.PRE,
    "xmp": WhiteSpace.PRE,
    "textarea": WhiteSpace.PRE_WRAP,
    "nobr": WhiteSpace.NOWRAP,
}

# Display values outside the enum, folded onto the one that renders text the same way.
DISPLAY_ALIASES = {
    "inline-flex": Display.INLINE_BLOCK,
    "inline-grid": Display.INLINE_BLOCK,
    "flow-root": Display.BLOCK,
    "contents": Display.INLINE,
    "run-in": Display.BLOCK,
}


def parse_inline_style(style: Optional[str]) -> Dict[str, str]:
    """
    Parses a `style` attribute into a {property: value} dict.
    Property names are lowercased; `!important` markers are dropped.
    """
    declarations: Dict[str, str] = {}
    if not style:
        return declarations
    for chunk in style.split(";"):
        name, sep, value = chunk.partition(":")
        if not sep:
            continue
        name = name.strip().lower()
        value = value.replace("!important", "").strip().lower()
        if name and value:
            declarations[name] = value
    return declarations


class DefaultStyleResolver(StyleResolver):
    """
    Resolves styles from a user agent default stylesheet plus inline `style`
    declarations and the `hidden` attribute.

    `display` is not inherited; `white-space` and `visibility` are.
    """

    def __init__(
            self,
            *,
            honor_inline_style: Optional[bool] = None,
            honor_hidden_attribute: Optional[bool] = None,
    ) -> None:
        if honor_inline_style is None:
            honor_inline_style = bool(config_manager.get_nested("style.honor_inline_style", True))
        if honor_hidden_attribute is None:
            honor_hidden_attribute = bool(config_manager.get_nested("style.honor_hidden_attribute", True))
        self.honor_inline_style = honor_inline_style
        self.honor_hidden_attribute = honor_hidden_attribute

    def resolve(self, node) -> ResolvedStyle:
        if tree.is_root(node):
            return ResolvedStyle(display=Display.BLOCK)
        if not tree.is_element(node):
            parent = node.parent
            return self.resolve(parent) if parent is not None else ResolvedStyle()
        return ResolvedStyle(
            display=self._display(node),
            white_space=self._white_space(node),
            visibility=self._visibility(node),
        )

    # --- Per-property resolution ---

    def _declared(self, el) -> Dict[str, str]:
        if not self.honor_inline_style:
            return {}
        style = el.get("style")
        if isinstance(style, list):
            style = " ".join(style)
        return parse_inline_style(style)

    def _display(self, el) -> Display:
        declared = self._declared(el).get("display")
        if declared:
            display = self._coerce_display(declared)
            if display is not None:
                return display
            logger.debug("Ignoring unsupported display value %r on %s", declared, tree.inspect_node(el))

        if self.honor_hidden_attribute and el.has_attr("hidden"):
            return Display.NONE

        name = tree.tag_name(el)
        if name in HIDDEN_TAGS:
            return Display.NONE
        if name == "input" and str(el.get("type", "")).lower() == "hidden":
            return Display.NONE
        if name in TABLE_DISPLAY_FOR_TAG:
            return TABLE_DISPLAY_FOR_TAG[name]
        if name == "li":
            return Display.LIST_ITEM
        if name in BLOCK_TAGS:
            return Display.BLOCK
        if name in INLINE_BLOCK_TAGS:
            return Display.INLINE_BLOCK
        return Display.INLINE

    @staticmethod
    def _coerce_display(value: str) -> Optional[Display]:
        # "block flow", "inline flow-root" etc.: the outer keyword decides
        keywords = value.split()
        if len(keywords) > 1:
            if keywords[0] == "inline":
                return Display.INLINE if keywords[1] == "flow" else Display.INLINE_BLOCK
            value = keywords[0]
        if value in DISPLAY_ALIASES:
            return DISPLAY_ALIASES[value]
        try:
            return Display(value)
        except ValueError:
            return None

    def _white_space(self, el) -> WhiteSpace:
        node = el
        while node is not None and tree.is_element(node):
            declared = self._declared(node).get("white-space")
            if declared:
                try:
                    return WhiteSpace(declared)
                except ValueError:
                    logger.debug("Ignoring unsupported white-space value %r", declared)
            name = tree.tag_name(node)
            if name in WHITE_SPACE_FOR_TAG:
                return WHITE_SPACE_FOR_TAG[name]
            if name in ("td", "th") and node.has_attr("nowrap"):
                return WhiteSpace.NOWRAP
            node = node.parent
        return WhiteSpace.NORMAL

    def _visibility(self, el) -> Visibility:
        node = el
        while node is not None and tree.is_element(node):
            declared = self._declared(node).get("visibility")
            if declared:
                try:
                    return Visibility(declared)
                except ValueError:
                    logger.debug("Ignoring unsupported visibility value %r", declared)
            node = node.parent
        return Visibility.VISIBLE
