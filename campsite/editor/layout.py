# campsite/editor/layout.py
"""
Row packing for the 12-column block grid.

Blocks are walked left to right; a new row starts whenever the next width
would push the running total past 12. Rows that end with at least three free
columns get an inline "insert block here" slot while editing. Rows holding an
image or gallery only offer heading/text inline.

Nothing here is persisted, callers recompute after every mutation.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Sequence, Tuple

from .blocks import DEFAULT_ALLOWED_TYPES, GRID_COLUMNS, MEDIA_TYPES, MIN_WIDTH, TEXT_TYPES, ContentBlock


class InlineSlot(NamedTuple):
    insert_index: int
    width: int
    allowed_types: Tuple[str, ...]


@dataclass
class Row:
    start_index: int
    blocks: List[ContentBlock] = field(default_factory=list)
    width: int = 0
    has_media: bool = False
    slot: Optional[InlineSlot] = None

    @property
    def remaining_width(self) -> int:
        return GRID_COLUMNS - self.width

    @property
    def end_index(self) -> int:
        return self.start_index + len(self.blocks)

    @property
    def widths(self) -> List[int]:
        return [block.width for block in self.blocks]


def inline_types(has_media: bool, allowed_types: Sequence[str]) -> Tuple[str, ...]:
    if has_media:
        return tuple(t for t in allowed_types if t in TEXT_TYPES)
    return tuple(allowed_types)


def pack_rows(
    blocks: Sequence[ContentBlock],
    *,
    editing: bool = False,
    allowed_types: Sequence[str] = DEFAULT_ALLOWED_TYPES,
) -> List[Row]:
    rows: List[Row] = []
    current: Optional[Row] = None

    for index, block in enumerate(blocks):
        if current is None or current.width + block.width > GRID_COLUMNS:
            current = Row(start_index=index)
            rows.append(current)
        current.blocks.append(block)
        current.width += block.width
        current.has_media = current.has_media or block.type in MEDIA_TYPES

    for row in rows:
        types = inline_types(row.has_media, allowed_types)
        if editing and row.remaining_width >= MIN_WIDTH and types:
            row.slot = InlineSlot(row.end_index, row.remaining_width, types)

    return rows

