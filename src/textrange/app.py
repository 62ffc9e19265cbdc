from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from tqdm import tqdm

from textrange.dom.builder import DocumentBuilder
from textrange.engine import initialize
from textrange.errors import TextRangeError
from textrange.managers.config_manager import config_manager
from textrange.model import TextExtraction
from textrange.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="textrange", description="Print the rendered text of HTML documents.")
    parser.add_argument("files", metavar="FILE", nargs="+", help="HTML file(s) to read.")
    parser.add_argument("--json", action="store_true", help="Print one JSON record per file.")
    parser.add_argument("--selector", type=str, default=None,
                        help="CSS selector of the element to render (default: body).")
    parser.add_argument("--level", type=str, default=None,
                        help="Log level (default: debug.level from settings).")
    return parser


def extract_file(builder: DocumentBuilder, engine, path: str, selector: Optional[str]) -> TextExtraction:
    """
    Renders the text of a single file.

    Raises:
        OSError: If the file cannot be read.
        TextRangeError: If the selector matches nothing or iteration fails.
    """
    soup = builder.parse_file(path)
    root = builder.select_root(soup, selector)
    if root is None:
        raise TextRangeError(f"Selector '{selector}' matched nothing in {path}.")
    return TextExtraction.from_text(path, engine.inner_text(root), selector=selector)


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1

    configure_logger(
        args.level or config_manager.get_nested("debug.level", "WARNING"),
        config_manager.get_nested("debug.module_levels"),
        config_manager.get_nested("debug.silenced_loggers"),
    )

    result = initialize()
    if not result.ok:
        print(f"❌ Error: {result.error}", file=sys.stderr)
        return 1

    selector = args.selector or config_manager.get_nested("cli.default_selector") or None
    builder = DocumentBuilder()
    failures = 0

    files = args.files
    if len(files) > 1:
        files = tqdm(files, desc="Rendering", unit="file", file=sys.stderr)

    for path in files:
        try:
            extraction = extract_file(builder, result.engine, path, selector)
        except (TextRangeError, OSError) as e:
            logger.error("Failed to render %s: %s", path, e)
            failures += 1
            if args.json:
                tqdm.write(TextExtraction(source=path, selector=selector, errors=[str(e)]).model_dump_json())
            continue

        if args.json:
            tqdm.write(extraction.model_dump_json())
        else:
            tqdm.write(extraction.text)

    if failures:
        logger.warning("%d of %d file(s) failed.", failures, len(args.files))
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
