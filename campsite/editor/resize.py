# campsite/editor/resize.py
"""
Pointer-driven column resize.

The math is independent of how pointer events are captured: given the
container width and a start/current x coordinate it yields a column delta.
``ResizeController`` holds at most one session at a time and always drops it
on release, even when persisting the final width fails.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Union

from .blocks import GRID_COLUMNS, BlockId, clamp_width, coerce_id

if TYPE_CHECKING:
    from .draft import SectionBlockEditor


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def column_delta(container_width: float, start_x: float, current_x: float) -> int:
    if container_width <= 0:
        return 0
    column_width = container_width / GRID_COLUMNS
    return _round_half_up((current_x - start_x) / column_width)


def resized_width(start_width: int, container_width: float, start_x: float, current_x: float) -> int:
    return clamp_width(start_width + column_delta(container_width, start_x, current_x))


@dataclass
class ResizeSession:
    block_id: BlockId
    start_x: float
    start_width: int
    width: int


class ResizeController:
    def __init__(self, editor: "SectionBlockEditor"):
        self.editor = editor
        self.session: Optional[ResizeSession] = None

    @property
    def active(self) -> bool:
        return self.session is not None

    def press(self, block_id: Union[BlockId, str], x: float) -> ResizeSession:
        block = self.editor.find(coerce_id(block_id))
        self.session = ResizeSession(block.id, x, block.width, block.width)
        return self.session

    def move(self, x: float, container_width: float) -> Optional[int]:
        session = self.session
        if session is None:
            return None
        width = resized_width(session.start_width, container_width, session.start_x, x)
        if width != session.width:
            self.editor.preview_width(session.block_id, width)
            session.width = width
        return width

    def release(self):
        session, self.session = self.session, None
        if session is None:
            return None
        return self.editor.finish_resize(session.block_id, session.start_width)
