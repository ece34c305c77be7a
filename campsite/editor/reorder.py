# campsite/editor/reorder.py
from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence, Union

from .blocks import BlockId, ContentBlock, coerce_id, renumber

if TYPE_CHECKING:
    from .draft import SectionBlockEditor


def move_index(from_index: int, target_index: int) -> Optional[int]:
    """
    Insertion position after removing the source, or None when dropping the
    block on itself or on the slot right after it.
    """
    if target_index == from_index or target_index == from_index + 1:
        return None
    return target_index - 1 if target_index > from_index else target_index


def move_block(
    blocks: Sequence[ContentBlock], from_index: int, target_index: int
) -> Optional[List[ContentBlock]]:
    target_index = max(0, min(target_index, len(blocks)))
    insert_at = move_index(from_index, target_index)
    if insert_at is None:
        return None
    items = list(blocks)
    moved = items.pop(from_index)
    items.insert(insert_at, moved)
    return renumber(items)


class DragController:
    """
    Drag-and-drop state for one section. ``drop_index`` only drives the
    insertion-point highlight.
    """

    def __init__(self, editor: "SectionBlockEditor"):
        self.editor = editor
        self.dragging_id: Optional[BlockId] = None
        self.drop_index: Optional[int] = None

    def start(self, block_id: Union[BlockId, str]) -> None:
        self.dragging_id = coerce_id(block_id)

    def over(self, index: int) -> None:
        self.drop_index = index

    def leave(self) -> None:
        self.drop_index = None

    def end(self) -> None:
        self.dragging_id = None
        self.drop_index = None

    def drop(self, index: int) -> bool:
        block_id = self.dragging_id
        self.end()
        if block_id is None:
            return False
        return self.editor.reorder(block_id, index)
