"""Tests for the LCS line diff used by the history viewer."""

from __future__ import annotations

import pytest

from campsite.editor.diff import ADD, REMOVE, SAME, DiffLine, diff_lines, render_diff
from campsite.editor.snapshot import build_snapshot
from campsite.editor.blocks import ContentBlock, PersistedId


def side(lines, dropped: str) -> str:
    return "\n".join(line.text for line in lines if line.kind != dropped)


class TestDiffLines:
    def test_identical_texts_are_all_same(self) -> None:
        text = "a\nb\nc"
        lines = diff_lines(text, text)

        assert [line.kind for line in lines] == [SAME, SAME, SAME]
        assert [line.text for line in lines] == ["a", "b", "c"]

    def test_pure_addition(self) -> None:
        assert diff_lines("a\nc", "a\nb\nc") == [
            DiffLine(SAME, "a"),
            DiffLine(ADD, "b"),
            DiffLine(SAME, "c"),
        ]

    def test_pure_removal(self) -> None:
        assert diff_lines("a\nb\nc", "a\nc") == [
            DiffLine(SAME, "a"),
            DiffLine(REMOVE, "b"),
            DiffLine(SAME, "c"),
        ]

    def test_replacement_lists_removal_before_addition(self) -> None:
        # backtracking prefers the add branch, so after reversal removes come first
        assert diff_lines("x", "y") == [DiffLine(REMOVE, "x"), DiffLine(ADD, "y")]

    def test_empty_before(self) -> None:
        assert diff_lines("", "a") == [DiffLine(REMOVE, ""), DiffLine(ADD, "a")]

    @pytest.mark.parametrize(
        ("before", "after"),
        [
            ("a\nb\nc", "c\nb\na"),
            ("one\ntwo\nthree\nfour", "zero\ntwo\nfour\nfive"),
            ("", ""),
            ("same\nsame\nsame", "same"),
            ("{\n  \"title\": \"A\"\n}", "{\n  \"title\": \"B\"\n}"),
        ],
    )
    def test_replay_reconstructs_both_sides(self, before: str, after: str) -> None:
        lines = diff_lines(before, after)

        assert side(lines, REMOVE) == after
        assert side(lines, ADD) == before


class TestRenderDiff:
    def test_prefixes(self) -> None:
        lines = [DiffLine(SAME, "a"), DiffLine(ADD, "b"), DiffLine(REMOVE, "c")]

        assert render_diff(lines) == ["  a", "+ b", "- c"]

    def test_snapshot_title_change_touches_one_line(self) -> None:
        block = ContentBlock(PersistedId("b1"), "s1", "text", "<p>Hi</p>")
        before = build_snapshot("Lake day", [block])
        after = build_snapshot("Lake day!", [block])

        changed = [line for line in diff_lines(before, after) if line.kind != SAME]

        assert changed == [
            DiffLine(REMOVE, '  "title": "Lake day",'),
            DiffLine(ADD, '  "title": "Lake day!",'),
        ]
