"""Tests for 12-column row packing and inline insert slots."""

from __future__ import annotations

from campsite.editor.blocks import ContentBlock, PersistedId
from campsite.editor.layout import inline_types, pack_rows

ALL_TYPES = ("heading", "text", "image", "gallery")


def blocks_of(*shapes) -> list[ContentBlock]:
    result = []
    for index, shape in enumerate(shapes, start=1):
        block_type, width = shape if isinstance(shape, tuple) else ("text", shape)
        result.append(ContentBlock(PersistedId(f"b{index}"), "s1", block_type, "x", width=width, order_index=index))
    return result


class TestPackRows:
    def test_reference_widths(self) -> None:
        rows = pack_rows(blocks_of(12, 6, 6, 4, 8), editing=True)

        assert [row.widths for row in rows] == [[12], [6, 6], [4, 8]]
        assert [row.remaining_width for row in rows] == [0, 0, 0]
        assert all(row.slot is None for row in rows)

    def test_partial_row_gets_slot_with_remaining_width(self) -> None:
        rows = pack_rows(blocks_of(12, 6), editing=True, allowed_types=ALL_TYPES)

        slot = rows[1].slot
        assert slot is not None
        assert slot.width == 6
        assert slot.insert_index == 2
        assert slot.allowed_types == ALL_TYPES

    def test_no_slot_outside_edit_mode(self) -> None:
        rows = pack_rows(blocks_of(6))

        assert rows[0].remaining_width == 6
        assert rows[0].slot is None

    def test_no_slot_below_minimum_width(self) -> None:
        rows = pack_rows(blocks_of(10), editing=True)

        assert rows[0].remaining_width == 2
        assert rows[0].slot is None

    def test_media_rows_only_offer_text_types(self) -> None:
        rows = pack_rows(blocks_of(("image", 6)), editing=True, allowed_types=ALL_TYPES)

        assert rows[0].has_media
        assert rows[0].slot.allowed_types == ("heading", "text")

    def test_media_row_without_text_types_has_no_slot(self) -> None:
        rows = pack_rows(blocks_of(("gallery", 6)), editing=True, allowed_types=("image", "gallery"))

        assert rows[0].slot is None

    def test_empty_list(self) -> None:
        assert pack_rows([], editing=True) == []

    def test_start_indexes_track_positions(self) -> None:
        rows = pack_rows(blocks_of(4, 4, 4, 6, 6, 3))

        assert [row.start_index for row in rows] == [0, 3, 5]
        assert [row.end_index for row in rows] == [3, 5, 6]


class TestInlineHelpers:
    def test_inline_types_without_media(self) -> None:
        assert inline_types(False, ALL_TYPES) == ALL_TYPES

    def test_slot_follows_the_last_block_of_a_row(self) -> None:
        first, second = pack_rows(blocks_of(3, 3, 12), editing=True)

        assert first.slot is not None
        assert (first.slot.insert_index, first.slot.width) == (2, 6)
        assert second.slot is None
