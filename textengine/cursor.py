"""Cursor addressing positions inside a document's runs."""

from __future__ import annotations

from enum import Enum

from .model import Document


class Unit(Enum):
    CHARACTER = "character"
    WORD = "word"
    SENTENCE = "sentence"
    PARAGRAPH = "paragraph"


class Cursor:
    """Position given as (run index, offset within run).

    Runs are counted in document order and offsets count characters
    (Unicode code points), not bytes. A position on the boundary between two
    runs is expressed as the start of the later run; the end of the document
    is the end of the last run.
    """

    def __init__(self, document: Document, run_index: int = 0, offset: int = 0):
        self.document = document
        self.run_index = run_index
        self.offset = offset

    def _run_texts(self) -> list[str]:
        return [run.text_of(self.document) for run in self.document.runs()]

    def _paragraph_extents(self) -> list[tuple[int, int]]:
        """Character ranges of the non-empty paragraphs, in document order."""
        extents = []
        position = 0
        for paragraph in self.document.paragraphs():
            length = len(paragraph.text_of(self.document))
            if length:
                extents.append((position, position + length))
                position += length
        return extents

    @property
    def index(self) -> int:
        """Character offset of the cursor in the whole-document text."""
        texts = self._run_texts()
        return sum(len(text) for text in texts[:self.run_index]) + self.offset

    @property
    def byte_offset(self) -> int:
        """Byte offset of the cursor, as accepted by ``Document.insert``."""
        texts = self._run_texts()
        before = sum(len(text.encode("utf-8")) for text in texts[:self.run_index])
        if self.run_index < len(texts):
            before += len(texts[self.run_index][:self.offset].encode("utf-8"))
        return before

    def move_to(self, index: int) -> None:
        """Place the cursor at a character offset of the whole-document text."""
        texts = self._run_texts()
        index = max(0, min(index, sum(len(text) for text in texts)))
        position = 0
        for run_index, text in enumerate(texts):
            if index < position + len(text):
                self.run_index, self.offset = run_index, index - position
                return
            position += len(text)
        self.run_index = max(len(texts) - 1, 0)
        self.offset = len(texts[-1]) if texts else 0

    def _next_word(self, index: int) -> int:
        text = self.document.get_all_text()
        for start, end in self._paragraph_extents():
            if start <= index < end:
                pos = index
                # Skip current word characters, then whitespace
                while pos < end and not text[pos].isspace():
                    pos += 1
                while pos < end and text[pos].isspace():
                    pos += 1
                return pos
        return index

    def _next_paragraph(self, index: int) -> int:
        for start, end in self._paragraph_extents():
            if start <= index < end:
                return end
        return index

    def move_forward(self, quantity: int, unit: Unit) -> None:
        """Advance by ``quantity`` units, stopping at the end of the document.

        Word boundaries are whitespace and paragraph ends.

        Raises:
            NotImplementedError: For ``Unit.SENTENCE``.
        """
        if quantity < 0:
            raise ValueError(f"Cannot move forward by {quantity}")
        if unit is Unit.SENTENCE:
            raise NotImplementedError("Sentence boundaries are not supported")

        index = self.index
        if unit is Unit.CHARACTER:
            index += quantity
        else:
            step = self._next_word if unit is Unit.WORD else self._next_paragraph
            for _ in range(quantity):
                index = step(index)
        self.move_to(index)

    def _previous_word(self, index: int) -> int:
        text = self.document.get_all_text()
        for start, end in self._paragraph_extents():
            if start < index <= end:
                pos = index
                # Skip whitespace, then the word before it
                while pos > start and text[pos - 1].isspace():
                    pos -= 1
                while pos > start and not text[pos - 1].isspace():
                    pos -= 1
                return pos
        return index

    def _previous_paragraph(self, index: int) -> int:
        for start, end in reversed(self._paragraph_extents()):
            if start < index:
                return start
        return 0

    def move_backward(self, quantity: int, unit: Unit) -> None:
        """Move back by ``quantity`` units, stopping at the start of the document.

        Word movement goes to the start of the previous word; paragraph
        movement goes to the start of the current paragraph, or of the one
        before it when already there.

        Raises:
            NotImplementedError: For ``Unit.SENTENCE``.
        """
        if quantity < 0:
            raise ValueError(f"Cannot move backward by {quantity}")
        if unit is Unit.SENTENCE:
            raise NotImplementedError("Sentence boundaries are not supported")

        index = self.index
        if unit is Unit.CHARACTER:
            index -= quantity
        else:
            step = self._previous_word if unit is Unit.WORD else self._previous_paragraph
            for _ in range(quantity):
                index = step(index)
        self.move_to(index)

    def move_first(self) -> None:
        self.move_to(0)

    def move_last(self) -> None:
        self.move_to(len(self.document.get_all_text()))
