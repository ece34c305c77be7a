"""Tests for column-delta math and the resize session controller."""

from __future__ import annotations

import pytest

from campsite.editor.errors import MutationError
from campsite.editor.resize import ResizeController, column_delta, resized_width


class TestColumnMath:
    def test_one_column_per_column_width(self) -> None:
        assert column_delta(1200, 100, 200) == 1
        assert column_delta(1200, 200, 100) == -1

    def test_rounds_half_up(self) -> None:
        assert column_delta(1200, 0, 50) == 1
        assert column_delta(1200, 0, 49) == 0
        assert column_delta(1200, 0, -50) == 0

    def test_zero_container_yields_no_change(self) -> None:
        assert column_delta(0, 0, 500) == 0
        assert resized_width(7, 0, 0, 500) == 7

    @pytest.mark.parametrize("delta_px", [-100_000, -600, -1, 0, 1, 600, 100_000])
    def test_width_always_clamped(self, delta_px: int) -> None:
        for start in range(3, 13):
            assert 3 <= resized_width(start, 1200, 0, delta_px) <= 12


class TestResizeController:
    def test_view_mode_persists_once_on_release(self, make_editor, block_store) -> None:
        editor = make_editor({"type": "text", "content": "Hi", "width": 6})
        block = editor.blocks[0]
        controller = ResizeController(editor)

        controller.press(block.id, 0)
        controller.move(100, 1200)
        controller.move(200, 1200)
        assert editor.blocks[0].width == 8
        assert block_store.mutations() == []

        controller.release()

        assert block_store.mutations() == [("update_block", "b1", {"width": 8})]
        assert block_store.rows["b1"].width == 8
        assert not controller.active

    def test_edit_mode_only_touches_draft(self, make_editor, block_store) -> None:
        editor = make_editor({"type": "text", "content": "Hi", "width": 6})
        editor.start_edit()
        controller = ResizeController(editor)

        controller.press("b1", 0)
        controller.move(-1200, 1200)
        controller.release()

        assert editor.blocks[0].width == 3
        assert editor.dirty
        assert block_store.mutations() == []

    def test_release_without_change_is_silent(self, make_editor, block_store) -> None:
        editor = make_editor({"type": "text", "content": "Hi", "width": 6})
        controller = ResizeController(editor)

        controller.press("b1", 0)
        controller.move(10, 1200)
        controller.release()

        assert block_store.mutations() == []

    def test_failed_persist_restores_start_width_and_ends_session(self, make_editor, block_store) -> None:
        editor = make_editor({"type": "text", "content": "Hi", "width": 6})
        block_store.fail.add("update_block")
        controller = ResizeController(editor)

        controller.press("b1", 0)
        controller.move(300, 1200)

        with pytest.raises(MutationError):
            controller.release()

        assert not controller.active
        assert editor.blocks[0].width == 6
        assert editor.error

    def test_move_without_session_is_ignored(self, make_editor) -> None:
        controller = ResizeController(make_editor())

        assert controller.move(100, 1200) is None
        assert controller.release() is None
