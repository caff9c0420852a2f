"""Box-model layout producing a display list.

Layout runs in two steps on every call. First the document tree is turned
into a fresh tree of ``LayoutBox`` objects by a ``LayoutBuilder`` (each
element dispatches to the builder method for its kind). Then that box tree
is walked once, top-down for widths and bottom-up for heights, emitting
paint commands in back-to-front order.

Block boxes stack their children vertically. A block whose children are
inline boxes flattens their text into one string, asks the measurement
backend how tall it is at the content width, and emits a single
``RenderText``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator, Optional, Union

from .constants import EngineConstants
from .geometry import Colour, Extents, Rectangle
from .model import StructureError
from .piece_table import TextRef

if TYPE_CHECKING:
    from .model import Document, Frame, InfoBox, Paragraph, Run

logger = logging.getLogger(__name__)


class BoxType(Enum):
    BLOCK = "block"
    INLINE = "inline"


@dataclass
class LayoutBox:
    """Geometric counterpart of a document element for one layout pass."""
    box_type: BoxType
    margins: Extents = field(default_factory=Extents)
    padding: Extents = field(default_factory=Extents)
    background: Optional[Colour] = None
    foreground: Colour = EngineConstants.DEFAULT_FOREGROUND
    children: list["LayoutBox"] = field(default_factory=list)
    text: Optional[TextRef] = None

    def __post_init__(self):
        children, self.children = self.children, []
        for child in children:
            self.add_child(child)

    def add_child(self, child: "LayoutBox") -> None:
        """Append a child box; block and inline children cannot be mixed."""
        if self.box_type is BoxType.INLINE and child.box_type is BoxType.BLOCK:
            raise StructureError("Inline box cannot contain a block box")
        if self.children and self.children[0].box_type is not child.box_type:
            raise StructureError("Block box cannot mix block and inline children")
        self.children.append(child)

    @property
    def has_inline_children(self) -> bool:
        return bool(self.children) and self.children[0].box_type is BoxType.INLINE

    def inline_text(self, document: "Document") -> str:
        """Text of this inline box followed by that of its inline children."""
        parts = [document.resolve(self.text)] if self.text is not None else []
        parts.extend(child.inline_text(document) for child in self.children)
        return "".join(parts)


@dataclass(frozen=True)
class RenderBox:
    rect: Rectangle
    colour: Optional[Colour] = None


@dataclass(frozen=True)
class RenderText:
    x: int
    y: int
    width: int
    text: str
    colour: Colour = EngineConstants.DEFAULT_FOREGROUND


RenderCommand = Union[RenderBox, RenderText]


@dataclass
class DisplayList:
    """Paint commands in back-to-front order plus the height they need."""
    commands: list[RenderCommand] = field(default_factory=list)
    required_height: int = 0

    def __iter__(self) -> Iterator[RenderCommand]:
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)

    def boxes(self) -> list[RenderBox]:
        return [c for c in self.commands if isinstance(c, RenderBox)]

    def texts(self) -> list[RenderText]:
        return [c for c in self.commands if isinstance(c, RenderText)]


class MeasurementBackend(ABC):
    """Text measurement supplied by the host."""

    @abstractmethod
    def measure_height(self, text: str, width: int) -> int:
        """Return the height ``text`` occupies when wrapped to ``width``."""


class LayoutBuilder(ABC):
    """Builds layout boxes, one method per element kind."""

    @abstractmethod
    def build_frame(self, frame: "Frame") -> LayoutBox:
        ...

    @abstractmethod
    def build_paragraph(self, paragraph: "Paragraph") -> LayoutBox:
        ...

    @abstractmethod
    def build_run(self, run: "Run") -> LayoutBox:
        ...

    @abstractmethod
    def build_info_box(self, info_box: "InfoBox") -> LayoutBox:
        ...


class DefaultLayoutBuilder(LayoutBuilder):
    """Plain boxes with no spacing, except padded and shaded info boxes."""

    def __init__(self, info_box_padding: int = EngineConstants.INFO_BOX_PADDING,
                 info_box_background: Colour = EngineConstants.INFO_BOX_BACKGROUND):
        self.info_box_padding = info_box_padding
        self.info_box_background = info_box_background

    def build_frame(self, frame: "Frame") -> LayoutBox:
        return LayoutBox(BoxType.BLOCK, children=[child.build(self) for child in frame.children])

    def build_paragraph(self, paragraph: "Paragraph") -> LayoutBox:
        return LayoutBox(BoxType.BLOCK, children=[child.build(self) for child in paragraph.children])

    def build_run(self, run: "Run") -> LayoutBox:
        return LayoutBox(BoxType.INLINE, text=run.ref)

    def build_info_box(self, info_box: "InfoBox") -> LayoutBox:
        return LayoutBox(
            BoxType.BLOCK,
            padding=Extents.uniform(self.info_box_padding),
            background=self.info_box_background,
            children=[info_box.child.build(self)],
        )


def _layout_box(box: LayoutBox, document: "Document", rect: Rectangle,
                backend: MeasurementBackend, is_root: bool = False) -> tuple[list[RenderCommand], int]:
    """Lay out ``box`` inside ``rect`` (height ignored).

    Returns:
        The commands for the box and its descendants, and the box's
        required height including its own margins and padding.
    """
    if box.box_type is BoxType.INLINE:
        # An inline box reached directly from a block flows on its own.
        box = LayoutBox(BoxType.BLOCK, children=[box])

    edges = box.margins + box.padding
    content = Rectangle(rect.x + edges.left, rect.y + edges.top, max(rect.w - edges.horizontal, 0), -1)
    commands: list[RenderCommand] = []
    height = 0

    if box.has_inline_children:
        text = "".join(child.inline_text(document) for child in box.children)
        height = backend.measure_height(text, content.w)
        commands.append(RenderText(content.x, content.y, content.w, text, box.foreground))
    else:
        for child in box.children:
            viewport = Rectangle(content.x, content.y + height, content.w, -1)
            child_commands, child_height = _layout_box(child, document, viewport, backend)
            commands.extend(child_commands)
            height += child_height

    required_height = height + edges.vertical
    if box.background is not None or is_root:
        # Backgrounds go under content
        commands.insert(0, RenderBox(Rectangle(rect.x, rect.y, rect.w, required_height), box.background))
    return commands, required_height


def layout(document: "Document", width: int, backend: MeasurementBackend,
           builder: Optional[LayoutBuilder] = None) -> DisplayList:
    """Lay out ``document`` at ``width`` and return its display list.

    Exceptions raised by ``backend`` propagate unchanged.
    """
    builder = builder or DefaultLayoutBuilder()
    root = document.root.build(builder)
    viewport = Rectangle(0, 0, max(width, 0), -1)
    commands, required_height = _layout_box(root, document, viewport, backend, is_root=True)
    logger.debug(f"Layout at width {width}: {len(commands)} commands, height {required_height}")
    return DisplayList(commands, required_height)
