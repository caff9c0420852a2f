"""Textengine demo entry point.

Allows running via `python -m textengine` and provides the console script
defined in `pyproject.toml`. Builds a sample document, applies a few edits,
and prints the text after each edit followed by the display list.

Usage:
    textengine [--version] [--verbose] [--width N] [--pdf PATH] [TEXT]
"""

from __future__ import annotations

import importlib.metadata
import logging
import sys
from typing import Optional

from .backends import FontLoadError, MonospaceBackend, ReportLabBackend
from .constants import EngineConstants
from .cursor import Cursor
from .layout import DefaultLayoutBuilder, DisplayList, RenderBox, RenderText
from .model import Document, Frame, InfoBox, Paragraph
from .pdf_painter import PDFPainter
from .piece_table import TextEngineError
from .settings import load_settings

USAGE = "usage: textengine [--version] [--verbose] [--width N] [--pdf PATH] [TEXT]"


def get_version_string() -> str:
    try:
        return importlib.metadata.version("textengine")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def build_sample_document(text: str) -> tuple[Document, list[str]]:
    """Build the demo document and return it with the text after each edit."""
    document = Document(text)
    versions = [document.get_all_text()]

    document.insert(document.length, ", again!")
    versions.append(document.get_all_text())

    document.insert(document.length, " (no really!)")
    versions.append(document.get_all_text())

    # Before the first space, or at the end when there is none
    first_space = document.get_all_text().find(" ")
    cursor = Cursor(document)
    cursor.move_to(first_space if first_space >= 0 else len(document.get_all_text()))
    document.insert(cursor.byte_offset, " to the entire")
    versions.append(document.get_all_text())

    note = Paragraph([document.create_run("This paragraph sits inside an info box.")])
    document.root.append_block(InfoBox(Frame([note])))
    return document, versions


def format_display_list(display_list: DisplayList) -> list[str]:
    lines = []
    for command in display_list:
        if isinstance(command, RenderBox):
            rect = command.rect
            colour = command.colour.to_hex() if command.colour else "none"
            lines.append(f"RenderBox x={rect.x} y={rect.y} w={rect.w} h={rect.h} background={colour}")
        elif isinstance(command, RenderText):
            lines.append(f"RenderText x={command.x} y={command.y} width={command.width} text={command.text!r}")
    lines.append(f"Required height: {display_list.required_height}")
    return lines


def parse_args(args: list[str]) -> dict:
    # Very small arg parsing, in the spirit of the rest of the demo
    options: dict = {"version": False, "verbose": False, "width": None, "pdf": None, "text": None}
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in ("--version", "-V"):
            options["version"] = True
        elif arg in ("--verbose", "-v"):
            options["verbose"] = True
        elif arg in ("--width", "--pdf"):
            if i + 1 >= len(args):
                raise ValueError(f"{arg} needs a value")
            value = args[i + 1]
            options[arg[2:]] = int(value) if arg == "--width" else value
            i += 1
        elif arg.startswith("-"):
            raise ValueError(f"Unknown option: {arg}")
        else:
            options["text"] = arg
        i += 1
    return options


def main(argv: Optional[list[str]] = None) -> int:
    try:
        options = parse_args(sys.argv[1:] if argv is None else argv)
    except ValueError as e:
        print(f"{e}\n{USAGE}", file=sys.stderr)
        return 2

    if options["version"]:
        print(get_version_string())
        return 0
    if options["verbose"]:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    settings = load_settings()
    width = options["width"] if options["width"] is not None else settings.viewport_width
    text = options["text"] if options["text"] is not None else EngineConstants.SAMPLE_TEXT

    try:
        document, versions = build_sample_document(text)
        for number, version in enumerate(versions):
            print(f"Version {number}: {version}")

        builder = DefaultLayoutBuilder(info_box_padding=settings.info_box_padding)
        display_list = document.layout(width, MonospaceBackend(), builder)
        print("\n".join(format_display_list(display_list)))

        if options["pdf"]:
            painter = PDFPainter(ReportLabBackend(settings.font_name, settings.font_size))
            with open(options["pdf"], "wb") as f:
                f.write(painter.render_document(document, builder))
            print(f"Wrote {options['pdf']}")
    except (TextEngineError, FontLoadError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
