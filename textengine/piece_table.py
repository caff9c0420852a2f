"""Piece table text storage.

Text lives in two UTF-8 buffers: the original buffer, written once when the
table is created, and the edit buffer, which only ever grows. The logical
text is the concatenation of an ordered sequence of spans (``TextRef``)
into those buffers. Inserting appends to the edit buffer and splits at most
one span, so existing text is never copied or mutated.

All offsets are byte offsets into the UTF-8 encoding and must fall on a
character boundary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence

logger = logging.getLogger(__name__)


class TextEngineError(Exception):
    """Base class for errors raised by the text engine."""


class InvalidOffset(TextEngineError, ValueError):
    """A byte offset is out of range or splits a UTF-8 sequence."""


class CorruptRun(TextEngineError):
    """A span does not address valid text in its buffer."""


class Source(Enum):
    ORIGINAL = "original"
    EDITS = "edits"


@dataclass(frozen=True)
class TextRef:
    """Half-open byte range ``[start, end)`` into one of the two buffers."""
    source: Source
    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.start > self.end:
            raise CorruptRun(f"Invalid span {self.start}..{self.end}")

    @property
    def length(self) -> int:
        return self.end - self.start


def _is_continuation_byte(byte: int) -> bool:
    return byte & 0xC0 == 0x80


def locate(refs: Iterable[TextRef], byte_offset: int) -> Optional[tuple[int, int]]:
    """Find the span containing ``byte_offset`` in logical coordinates.

    Spans are scanned in order; the span ``r`` with
    ``start <= byte_offset < start + r.length`` wins, so an offset sitting on
    the boundary between two spans belongs to the later one.

    Returns:
        ``(span_index, offset_within_span)`` or None when the offset lies at
        or past the end of all spans.
    """
    position = 0
    for index, ref in enumerate(refs):
        if position <= byte_offset < position + ref.length:
            return index, byte_offset - position
        position += ref.length
    return None


class PieceTable:
    """Original buffer, append-only edit buffer and an ordered span list."""

    def __init__(self, initial: Optional[str] = None):
        self._original = initial.encode("utf-8") if initial else b""
        self._edits = bytearray()
        self._runs: list[TextRef] = []
        if self._original:
            self._runs.append(TextRef(Source.ORIGINAL, 0, len(self._original)))

    @property
    def original(self) -> bytes:
        return self._original

    @property
    def edits(self) -> bytes:
        return bytes(self._edits)

    @property
    def runs(self) -> tuple[TextRef, ...]:
        return tuple(self._runs)

    def take_runs(self) -> tuple[TextRef, ...]:
        """Hand the run sequence to the caller, leaving this table's empty.

        Used when another structure takes over ordering the spans; the
        buffers stay with the table.
        """
        runs, self._runs = tuple(self._runs), []
        return runs

    @property
    def length(self) -> int:
        """Logical length in bytes."""
        return sum(ref.length for ref in self._runs)

    def _buffer(self, source: Source):
        return self._original if source is Source.ORIGINAL else self._edits

    def resolve(self, ref: TextRef) -> str:
        """Return the text addressed by ``ref``.

        Raises:
            CorruptRun: If the span is out of bounds or not valid UTF-8.
        """
        buffer = self._buffer(ref.source)
        if ref.end > len(buffer):
            raise CorruptRun(
                f"Span {ref.start}..{ref.end} exceeds {ref.source.value} buffer "
                f"of {len(buffer)} bytes")
        try:
            return bytes(buffer[ref.start:ref.end]).decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptRun(f"Span {ref.start}..{ref.end} is not valid UTF-8: {e}")

    def check(self, ref: TextRef) -> None:
        """Check that ``ref`` addresses whole characters of its buffer.

        Raises:
            CorruptRun: If the span is out of bounds or cuts a character.
        """
        buffer = self._buffer(ref.source)
        if ref.end > len(buffer):
            raise CorruptRun(
                f"Span {ref.start}..{ref.end} exceeds {ref.source.value} buffer "
                f"of {len(buffer)} bytes")
        for at in (ref.start, ref.end):
            if at < len(buffer) and _is_continuation_byte(buffer[at]):
                raise CorruptRun(f"Span {ref.start}..{ref.end} cuts a character at byte {at}")

    def is_boundary(self, ref: TextRef, offset: int) -> bool:
        """Whether ``offset`` (local to ``ref``) falls on a character boundary."""
        if offset < 0 or offset > ref.length:
            return False
        if offset == 0 or offset == ref.length:
            return True
        return not _is_continuation_byte(self._buffer(ref.source)[ref.start + offset])

    def append(self, text: str) -> TextRef:
        """Append ``text`` to the edit buffer and return a span for it.

        The span is not placed in the run sequence.
        """
        start = len(self._edits)
        self._edits.extend(text.encode("utf-8"))
        return TextRef(Source.EDITS, start, len(self._edits))

    def split(self, ref: TextRef, offset: int) -> tuple[TextRef, TextRef]:
        """Split ``ref`` at a local byte offset into ``[start, at)`` and ``[at, end)``.

        Raises:
            InvalidOffset: If the offset is outside the span or not on a
                character boundary.
        """
        if not self.is_boundary(ref, offset):
            raise InvalidOffset(f"Cannot split span of {ref.length} bytes at {offset}")
        at = ref.start + offset
        return TextRef(ref.source, ref.start, at), TextRef(ref.source, at, ref.end)

    def cut(self, ref: TextRef, low: int, high: int) -> list[TextRef]:
        """Return what remains of ``ref`` after removing local range ``[low, high)``."""
        low = max(low, 0)
        high = min(high, ref.length)
        if low >= high:
            return [ref]
        pieces = []
        if low > 0:
            pieces.append(self.split(ref, low)[0])
        if high < ref.length:
            pieces.append(self.split(ref, high)[1])
        return pieces

    def validate_offset(self, byte_offset: int, refs: Optional[Sequence[TextRef]] = None) -> None:
        """Check that ``byte_offset`` is a boundary within the text spanned by ``refs``.

        ``refs`` defaults to this table's own run sequence.

        Raises:
            InvalidOffset: If the offset is negative, past the end, or inside
                a multi-byte character.
        """
        refs = self._runs if refs is None else refs
        total = sum(ref.length for ref in refs)
        if byte_offset < 0 or byte_offset > total:
            raise InvalidOffset(f"Offset {byte_offset} outside text of {total} bytes")
        found = locate(refs, byte_offset)
        if found is None:
            return
        index, local = found
        if not self.is_boundary(refs[index], local):
            raise InvalidOffset(f"Offset {byte_offset} is not on a UTF-8 character boundary")

    def insert(self, byte_offset: int, text: str) -> None:
        """Insert ``text`` so that it starts at ``byte_offset``.

        Raises:
            InvalidOffset: If the offset is not a boundary within the text.
        """
        self.validate_offset(byte_offset)
        if not text:
            return
        new_ref = self.append(text)
        found = locate(self._runs, byte_offset)
        if found is None:
            self._runs.append(new_ref)
        else:
            index, local = found
            if local == 0:
                self._runs.insert(index, new_ref)
            else:
                left, right = self.split(self._runs[index], local)
                self._runs[index:index + 1] = [left, new_ref, right]
        logger.debug(f"Inserted {new_ref.length} bytes at {byte_offset}; {len(self._runs)} runs")

    def delete(self, byte_offset: int, length: int) -> None:
        """Remove ``length`` bytes starting at ``byte_offset``.

        Only the run sequence changes; both buffers keep their bytes.

        Raises:
            InvalidOffset: If either end of the range is invalid.
        """
        if length < 0:
            raise InvalidOffset(f"Negative delete length {length}")
        self.validate_offset(byte_offset)
        self.validate_offset(byte_offset + length)
        if length == 0:
            return
        end = byte_offset + length
        runs: list[TextRef] = []
        position = 0
        for ref in self._runs:
            runs.extend(self.cut(ref, byte_offset - position, end - position))
            position += ref.length
        self._runs = runs
        logger.debug(f"Deleted {length} bytes at {byte_offset}; {len(self._runs)} runs")

    def get_all_text(self) -> str:
        return "".join(self.resolve(ref) for ref in self._runs)
