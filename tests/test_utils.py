"""Tests for config parsing, pagination helpers and the optimistic lock."""

from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from werkzeug.exceptions import BadRequest

from campsite.config import _block_types
from campsite.editor.errors import StaleWrite, ValidationError
from campsite.utils.optimistic_lock import enforce_optimistic_lock
from campsite.utils.pagination import MAX_PAGE_SIZE, decode_cursor, encode_cursor, parse_limit


class TestBlockTypeConfig:
    def test_regions(self) -> None:
        assert _block_types("news=heading,text, image;gallery=gallery") == {
            "news": ("heading", "text", "image"),
            "gallery": ("gallery",),
        }

    def test_empty_and_malformed(self) -> None:
        assert _block_types(None) == {}
        assert _block_types("news;;") == {}


class TestPagination:
    def test_cursor_round_trip(self) -> None:
        stamp = datetime(2026, 7, 1, 9, 30, 15, 250)

        assert decode_cursor(encode_cursor(stamp, "h1")) == (stamp, "h1")

    @pytest.mark.parametrize("cursor", ["", "no-separator", "yesterday|h1"])
    def test_bad_cursor(self, cursor: str) -> None:
        with pytest.raises(BadRequest):
            decode_cursor(cursor)

    def test_limit(self) -> None:
        assert parse_limit(None, 20) == 20
        assert parse_limit("5", 20) == 5
        assert parse_limit("5000", 20) == MAX_PAGE_SIZE
        with pytest.raises(BadRequest):
            parse_limit("ten", 20)
        with pytest.raises(BadRequest):
            parse_limit("-1", 20)


class TestOptimisticLock:
    entity = SimpleNamespace(updated_at=datetime(2026, 7, 1, 12, 0, 0, 500000))

    def check(self, app, header=None):
        headers = {"If-Unmodified-Since": header} if header else {}
        with app.test_request_context(headers=headers):
            enforce_optimistic_lock(self.entity)

    def test_no_header_skips_check(self, app) -> None:
        self.check(app)

    def test_same_second_passes(self, app) -> None:
        self.check(app, "Wed, 01 Jul 2026 12:00:00 GMT")

    def test_newer_entity_conflicts(self, app) -> None:
        with pytest.raises(StaleWrite):
            self.check(app, "Wed, 01 Jul 2026 11:59:59 GMT")

    def test_precise_timestamp(self, app) -> None:
        self.check(app, datetime(2026, 7, 1, 12, 0, 0, 500000, tzinfo=timezone.utc).isoformat())
        with pytest.raises(StaleWrite):
            self.check(app, datetime(2026, 7, 1, 12, 0, 0, 100000, tzinfo=timezone.utc).isoformat())

    def test_garbage_header(self, app) -> None:
        with pytest.raises(ValidationError):
            self.check(app, "not a date")
