# src/textrange/dom/builder.py
import logging
from pathlib import Path
from typing import Optional, Union

from bs4 import BeautifulSoup

from textrange.managers.config_manager import config_manager

logger = logging.getLogger(__name__)


class DocumentBuilder:
    """
    Builds the document trees the text range core iterates over.
    Tree construction stays outside the core; this is the collaborator
    the CLI and the tests use to turn markup into a BeautifulSoup tree.
    """

    def __init__(self, features: Optional[str] = None):
        self.features = features or config_manager.get_nested("parser.features", "html.parser")

    def parse(self, html: str) -> BeautifulSoup:
        """
        Parses raw markup into a document tree.

        Args:
            html (str): The raw HTML string.

        Returns:
            BeautifulSoup: The document root.
        """
        # Strip a leading BOM; it would otherwise become rendered text
        clean_html = (html or "").replace('\ufeff', '')
        # Whitespace-only strings are kept verbatim; the classifier decides what collapses
        soup = BeautifulSoup(clean_html, self.features, preserve_whitespace_tags={"[document]"})
        logger.debug("Parsed %d characters of markup with '%s'.", len(clean_html), self.features)
        return soup

    def parse_file(self, path: Union[str, Path]) -> BeautifulSoup:
        """Reads and parses a markup file (UTF-8, undecodable bytes replaced)."""
        text = Path(path).read_text(encoding="utf-8", errors="replace")
        return self.parse(text)

    @staticmethod
    def select_root(soup: BeautifulSoup, selector: Optional[str] = None):
        """
        Picks the node whose contents should be rendered: the first match of
        a CSS selector, else <body> when present, else the whole document.
        Returns None when the selector matches nothing.
        """
        if selector:
            return soup.select_one(selector)
        return soup.body or soup
