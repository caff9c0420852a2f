"""Textengine - piece-table text storage, document tree and box layout."""

from .geometry import Colour, Extents, Rectangle
from .piece_table import CorruptRun, InvalidOffset, PieceTable, Source, TextEngineError, TextRef
from .model import Block, Document, Element, Frame, InfoBox, Inline, Paragraph, Run, StructureError
from .layout import (
    BoxType,
    DefaultLayoutBuilder,
    DisplayList,
    LayoutBox,
    LayoutBuilder,
    MeasurementBackend,
    RenderBox,
    RenderText,
    layout,
)
from .cursor import Cursor, Unit

__all__ = [
    'Colour',
    'Extents',
    'Rectangle',
    'CorruptRun',
    'InvalidOffset',
    'PieceTable',
    'Source',
    'TextEngineError',
    'TextRef',
    'Block',
    'Document',
    'Element',
    'Frame',
    'InfoBox',
    'Inline',
    'Paragraph',
    'Run',
    'StructureError',
    'BoxType',
    'DefaultLayoutBuilder',
    'DisplayList',
    'LayoutBox',
    'LayoutBuilder',
    'MeasurementBackend',
    'RenderBox',
    'RenderText',
    'layout',
    'Cursor',
    'Unit',
]
