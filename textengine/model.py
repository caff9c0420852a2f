"""Document tree built over a piece table.

A document is a tree of structural elements. Blocks (``Frame``,
``Paragraph``, ``InfoBox``) stack vertically; inlines (``Run``) flow inside
a paragraph. Runs are the only elements carrying text, and they carry it
as a ``TextRef`` into the document's piece table rather than as a string.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable, Iterator, Optional

from .piece_table import InvalidOffset, PieceTable, TextEngineError, TextRef, locate

if TYPE_CHECKING:
    from .layout import DisplayList, LayoutBox, LayoutBuilder, MeasurementBackend

logger = logging.getLogger(__name__)


class StructureError(TextEngineError, TypeError):
    """An element was placed where its kind is not accepted."""


class Element(ABC):
    """Node of the document tree."""

    _parent: Optional["Element"] = None

    @property
    def parent(self) -> Optional["Element"]:
        return self._parent

    @property
    def children(self) -> tuple["Element", ...]:
        return ()

    @abstractmethod
    def build(self, builder: "LayoutBuilder") -> "LayoutBox":
        """Build this element's layout subtree by calling back into ``builder``."""

    def own_text(self, document: "Document") -> str:
        return ""

    def text_of(self, document: "Document") -> str:
        """Concatenate text depth-first, children before the node itself."""
        parts = [child.text_of(document) for child in self.children]
        parts.append(self.own_text(document))
        return "".join(parts)

    def walk(self) -> Iterator["Element"]:
        """Yield this element and its descendants in document order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def _adopt(self, child: "Element") -> None:
        if child._parent is not None:
            raise StructureError(f"{type(child).__name__} already belongs to a {type(child._parent).__name__}")
        node: Optional[Element] = self
        while node is not None:
            if node is child:
                raise StructureError(f"Adding {type(child).__name__} would create a cycle")
            node = node._parent
        child._parent = self


class Block(Element):
    """Element that stacks vertically."""


class Inline(Element):
    """Element that flows horizontally inside a paragraph."""


class Frame(Block):
    """Block container of other blocks. The document root is always a Frame."""

    def __init__(self, children: Iterable[Block] = ()):
        self._children: list[Block] = []
        for child in children:
            self.append_block(child)

    @property
    def children(self) -> tuple[Block, ...]:
        return tuple(self._children)

    def append_block(self, block: Block) -> Block:
        if not isinstance(block, Block):
            raise StructureError(f"Frame cannot contain {type(block).__name__}; only blocks are allowed")
        self._adopt(block)
        self._children.append(block)
        return block

    def _remove(self, block: Block) -> None:
        self._children.remove(block)
        block._parent = None

    def build(self, builder: "LayoutBuilder") -> "LayoutBox":
        return builder.build_frame(self)


class Paragraph(Block):
    """Block restricted to inline content."""

    def __init__(self, children: Iterable[Inline] = ()):
        self._children: list[Inline] = []
        for child in children:
            self.append_inline(child)

    @property
    def children(self) -> tuple[Inline, ...]:
        return tuple(self._children)

    def append_inline(self, inline: Inline) -> Inline:
        if not isinstance(inline, Inline):
            raise StructureError(f"Paragraph cannot contain {type(inline).__name__}; only inlines are allowed")
        self._adopt(inline)
        self._children.append(inline)
        return inline

    def _replace(self, child: Inline, replacements: list[Inline]) -> None:
        # Edits split runs in place; the replaced child is released.
        index = self._children.index(child)
        child._parent = None
        for inline in replacements:
            self._adopt(inline)
        self._children[index:index + 1] = replacements

    def _insert_before(self, child: Inline, inline: Inline) -> None:
        index = self._children.index(child)
        self._adopt(inline)
        self._children.insert(index, inline)

    def _absorb(self, other: "Paragraph") -> None:
        # Moves every inline of ``other`` onto the end of this paragraph
        moved, other._children = other._children, []
        for inline in moved:
            inline._parent = None
            self.append_inline(inline)

    def build(self, builder: "LayoutBuilder") -> "LayoutBox":
        return builder.build_paragraph(self)


class InfoBox(Block):
    """Call-out region wrapping exactly one frame."""

    def __init__(self, child: Frame):
        if not isinstance(child, Frame):
            raise StructureError(f"InfoBox must wrap a Frame, not {type(child).__name__}")
        self._adopt(child)
        self._child = child

    @property
    def child(self) -> Frame:
        return self._child

    @property
    def children(self) -> tuple[Frame]:
        return (self._child,)

    def build(self, builder: "LayoutBuilder") -> "LayoutBox":
        return builder.build_info_box(self)


class Run(Inline):
    """Inline leaf referencing a span of the piece table.

    The constructor is internal: create runs with ``Document.create_run`` so
    the span is guaranteed to address text in that document's buffers.
    Document edits check every attached span first and raise ``CorruptRun``
    for one that does not.
    """

    def __init__(self, ref: TextRef):
        self.ref = ref

    def own_text(self, document: "Document") -> str:
        return document.resolve(self.ref)

    def build(self, builder: "LayoutBuilder") -> "LayoutBox":
        return builder.build_run(self)

    def __repr__(self) -> str:
        return f"Run({self.ref!r})"


class Document:
    """Piece-table buffers plus the element tree rooted at a Frame.

    The table's own run sequence only seeds the first paragraph. From then
    on the Run leaves of the tree, in document order, are the document's
    only run sequence; the table supplies the buffers, boundary checks and
    span splitting.
    """

    def __init__(self, initial: Optional[str] = None):
        self._table = PieceTable(initial)
        self._root = Frame()
        if initial is not None:
            paragraph = self._root.append_block(Paragraph())
            for ref in self._table.take_runs():
                paragraph.append_inline(Run(ref))

    @property
    def root(self) -> Frame:
        return self._root

    def resolve(self, ref: TextRef) -> str:
        return self._table.resolve(ref)

    def create_run(self, text: str) -> Run:
        """Store ``text`` in the edit buffer and return a detached Run for it."""
        return Run(self._table.append(text))

    def runs(self) -> Iterator[Run]:
        """Yield the Run leaves in document order."""
        for element in self._root.walk():
            if isinstance(element, Run):
                yield element

    def paragraphs(self) -> Iterator[Paragraph]:
        for element in self._root.walk():
            if isinstance(element, Paragraph):
                yield element

    @property
    def length(self) -> int:
        """Logical length in bytes."""
        return sum(run.ref.length for run in self.runs())

    def text_of(self, element: Element) -> str:
        return element.text_of(self)

    def get_all_text(self) -> str:
        return self._root.text_of(self)

    def _checked_runs(self) -> list[Run]:
        runs = list(self.runs())
        for run in runs:
            self._table.check(run.ref)
        return runs

    def _paragraph_end(self, paragraph: Paragraph) -> int:
        position = 0
        for element in self._root.walk():
            if element is paragraph:
                return position + len(self.text_of(paragraph).encode("utf-8"))
            if isinstance(element, Run):
                position += element.ref.length
        raise StructureError("Paragraph is not part of this document")

    def insert(self, byte_offset: int, text: str) -> None:
        """Insert ``text`` at ``byte_offset`` of the whole-document text.

        The run containing the offset is split around a new run pointing at
        the edit buffer. An offset equal to the document length appends to
        the last paragraph.

        Raises:
            InvalidOffset: If the offset is not a boundary within the text.
            CorruptRun: If an attached run does not address this
                document's buffers.
        """
        runs = self._checked_runs()
        refs = [run.ref for run in runs]
        self._table.validate_offset(byte_offset, refs)
        if not text:
            return
        new_run = self.create_run(text)
        found = locate(refs, byte_offset)
        if found is None:
            paragraphs = list(self.paragraphs())
            if paragraphs:
                paragraph = paragraphs[-1]
            else:
                paragraph = self._root.append_block(Paragraph())
            paragraph.append_inline(new_run)
        else:
            index, local = found
            target = runs[index]
            paragraph = target.parent
            if local == 0:
                paragraph._insert_before(target, new_run)
            else:
                left, right = self._table.split(target.ref, local)
                paragraph._replace(target, [Run(left), new_run, Run(right)])
        logger.debug(f"Inserted {new_run.ref.length} bytes at {byte_offset}")

    def delete(self, byte_offset: int, length: int) -> None:
        """Remove ``length`` bytes starting at ``byte_offset``.

        Runs emptied by the deletion are dropped from their paragraph. When
        the range starts in one paragraph and ends in a later one, the two
        are joined: what is left of the later paragraph moves onto the end
        of the earlier one, and the later paragraph and any paragraphs
        between them are removed.

        Raises:
            InvalidOffset: If either end of the range is invalid.
            CorruptRun: If an attached run does not address this
                document's buffers.
        """
        if length < 0:
            raise InvalidOffset(f"Negative delete length {length}")
        runs = self._checked_runs()
        refs = [run.ref for run in runs]
        self._table.validate_offset(byte_offset, refs)
        self._table.validate_offset(byte_offset + length, refs)
        if length == 0:
            return
        end = byte_offset + length
        first = runs[locate(refs, byte_offset)[0]].parent
        last = runs[locate(refs, end - 1)[0]].parent

        position = 0
        for run in runs:
            pieces = self._table.cut(run.ref, byte_offset - position, end - position)
            position += run.ref.length
            if pieces != [run.ref]:
                run.parent._replace(run, [Run(piece) for piece in pieces])

        if first is not last:
            paragraphs = list(self.paragraphs())
            # Everything strictly between the two ends was deleted
            for paragraph in paragraphs[paragraphs.index(first) + 1:paragraphs.index(last)]:
                paragraph.parent._remove(paragraph)
            first._absorb(last)
            last.parent._remove(last)
            logger.debug(f"Joined paragraphs across deletion at {byte_offset}")
        logger.debug(f"Deleted {length} bytes at {byte_offset}")

    def replace(self, byte_offset: int, length: int, text: str) -> None:
        """Replace ``length`` bytes at ``byte_offset`` with ``text``.

        The new text stays in the paragraph where the replaced range began,
        even when that range ran to the end of the paragraph.

        Raises:
            InvalidOffset: If either end of the range is invalid.
            CorruptRun: If an attached run does not address this
                document's buffers.
        """
        anchor = None
        if length > 0:
            runs = self._checked_runs()
            refs = [run.ref for run in runs]
            self._table.validate_offset(byte_offset, refs)
            found = locate(refs, byte_offset)
            if found is not None:
                anchor = runs[found[0]].parent
        self.delete(byte_offset, length)
        if anchor is not None and text and byte_offset == self._paragraph_end(anchor):
            anchor.append_inline(self.create_run(text))
        else:
            self.insert(byte_offset, text)

    def layout(self, width: int, backend: "MeasurementBackend",
               builder: Optional["LayoutBuilder"] = None) -> "DisplayList":
        from .layout import layout
        return layout(self, width, backend, builder)
