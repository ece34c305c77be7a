"""Tests for the SQL-backed stores, local blob storage and content invariants."""

from __future__ import annotations

import os
from datetime import datetime, timedelta
from io import BytesIO

import pytest
from werkzeug.datastructures import FileStorage

from campsite.domain.invariants.exceptions import InvariantViolation
from campsite.domain.invariants.section import assert_section
from campsite.editor.errors import BlockNotFound, SectionNotFound, StoreError, ValidationError
from campsite.extensions import db
from campsite.models.block import Block
from campsite.models.section import Section
from campsite.models.section_history import SectionHistory
from campsite.services import SqlBlockStore, SqlSectionStore
from campsite.utils.media import delete_file, media_path, save_file


def upload(name: str, data: bytes = b"\x89PNG\r\n\x1a\n0000") -> FileStorage:
    return FileStorage(stream=BytesIO(data), filename=name)


@pytest.fixture
def sections(app) -> SqlSectionStore:
    return SqlSectionStore()


@pytest.fixture
def blocks(app) -> SqlBlockStore:
    return SqlBlockStore()


@pytest.fixture
def section(sections):
    return sections.create_section(
        page_section_id="news", title="Arrival", owner_id="u-staff", owner_name="Sam Staff"
    )


# =============================================================================
# Blocks
# =============================================================================


class TestSqlBlockStore:
    def test_create_and_list_in_order(self, blocks, section) -> None:
        blocks.create_block(section.id, "text", content="second", order_index=2)
        blocks.create_block(section.id, "heading", content="first", order_index=1)

        listed = blocks.list_blocks(section.id)

        assert [b.content for b in listed] == ["first", "second"]
        assert [b.order_index for b in listed] == [1, 2]

    def test_create_in_unknown_section(self, blocks) -> None:
        with pytest.raises(SectionNotFound):
            blocks.create_block("missing", "text", content="x", order_index=1)

    def test_create_rejects_bad_shape(self, blocks, section) -> None:
        with pytest.raises(InvariantViolation):
            blocks.create_block(section.id, "video", order_index=1)
        with pytest.raises(InvariantViolation):
            blocks.create_block(section.id, "text", width=13, order_index=1)

    def test_partial_update(self, blocks, section) -> None:
        created = blocks.create_block(section.id, "text", content="a", width=12, order_index=1)

        updated = blocks.update_block(created.id.value, width=6)

        assert (updated.content, updated.width) == ("a", 6)

    def test_update_rejects_unknown_fields(self, blocks, section) -> None:
        created = blocks.create_block(section.id, "text", content="a", order_index=1)

        with pytest.raises(ValidationError):
            blocks.update_block(created.id.value, type="heading")

    def test_update_missing_block(self, blocks) -> None:
        with pytest.raises(BlockNotFound):
            blocks.update_block("missing", content="x")

    def test_delete_missing_is_noop(self, blocks, section) -> None:
        blocks.delete_block("missing")
        assert blocks.list_blocks(section.id) == []

    def test_block_changes_touch_section(self, blocks, section) -> None:
        created = blocks.create_block(section.id, "text", content="a", order_index=1)
        row = db.session.get(Section, section.id)
        row.updated_at = datetime(2020, 1, 1)
        db.session.commit()

        blocks.update_block(created.id.value, content="b")

        assert db.session.get(Section, section.id).updated_at > datetime(2020, 1, 1)

    def test_database_failure_becomes_store_error(self, blocks, section) -> None:
        db.session.close()
        Block.__table__.drop(db.engine)

        with pytest.raises(StoreError):
            blocks.list_blocks(section.id)

    def test_image_upload_and_delete(self, blocks, section) -> None:
        url = blocks.upload_image(section.id, upload("lake.png"))

        assert url.startswith(f"/uploads/{section.id}/")
        assert os.path.exists(media_path(url))

        blocks.delete_blob(url)
        assert not os.path.exists(media_path(url))

    def test_file_upload_goes_to_files_folder(self, blocks, section) -> None:
        url = blocks.upload_file(section.id, upload("packing.zip", b"PK\x03\x04"))

        assert url.startswith(f"/uploads/{section.id}/files/")
        assert url.endswith(".zip")

    def test_rejected_upload_is_validation_error(self, blocks, section) -> None:
        with pytest.raises(ValidationError):
            blocks.upload_image(section.id, upload("notes.txt"))
        with pytest.raises(ValidationError):
            blocks.upload_file(section.id, upload("photo.png"))


# =============================================================================
# Sections
# =============================================================================


class TestSqlSectionStore:
    def test_create_strips_title(self, sections) -> None:
        created = sections.create_section(
            page_section_id="news", title="  Week one ", owner_id="u1", owner_name="One"
        )

        assert created.title == "Week one"
        assert created.editor_ids == []
        assert sections.get_section(created.id).title == "Week one"

    def test_blank_title_rejected(self, sections) -> None:
        with pytest.raises(InvariantViolation):
            sections.create_section(page_section_id="news", title=" ", owner_id="u1", owner_name="One")

    def test_list_by_region_oldest_first(self, sections) -> None:
        first = sections.create_section(page_section_id="news", title="A", owner_id="u1", owner_name="One")
        sections.create_section(page_section_id="about", title="B", owner_id="u1", owner_name="One")
        third = sections.create_section(page_section_id="news", title="C", owner_id="u1", owner_name="One")

        assert [s.id for s in sections.list_sections("news")] == [first.id, third.id]

    def test_update_fields(self, sections, section) -> None:
        updated = sections.update_section(
            section.id, publish_date="2026-07-04", show_publish_date=True, editor_ids=["u-a"]
        )

        assert updated.publish_date == "2026-07-04"
        assert updated.show_publish_date is True
        assert updated.editor_ids == ["u-a"]

        assert sections.update_section(section.id, publish_date="").publish_date is None

    def test_update_rejects_bad_input(self, sections, section) -> None:
        with pytest.raises(ValidationError):
            sections.update_section(section.id, publish_date="someday soon")
        with pytest.raises(ValidationError):
            sections.update_section(section.id, owner_id="u-other")
        with pytest.raises(SectionNotFound):
            sections.update_section("missing", title="x")

    def test_delete_returns_owned_blobs(self, sections, blocks, section) -> None:
        blocks.create_block(section.id, "image", image_url="/uploads/a.png", width=6, order_index=1)
        blocks.create_block(section.id, "gallery", content='["/uploads/g1.png","/uploads/g2.png"]', order_index=2)
        blocks.create_block(section.id, "text", content="hi", order_index=3)

        urls = sections.delete_section(section.id)

        assert sorted(urls) == ["/uploads/a.png", "/uploads/g1.png", "/uploads/g2.png"]
        assert Block.query.count() == 0
        with pytest.raises(SectionNotFound):
            sections.get_section(section.id)


class TestHistory:
    def record(self, sections, section_id, n, editor_id="u-staff"):
        return sections.create_history(
            section_id=section_id,
            editor_id=editor_id,
            editor_name="Sam",
            before_snapshot=f"v{n}",
            after_snapshot=f"v{n + 1}",
        )

    def test_identical_snapshots_rejected(self, sections, section) -> None:
        with pytest.raises(ValidationError):
            sections.create_history(
                section_id=section.id, editor_id="u", editor_name="U", before_snapshot="x", after_snapshot="x"
            )

    def test_newest_first(self, sections, section) -> None:
        ids = [self.record(sections, section.id, n).id for n in range(3)]

        assert [e.id for e in sections.list_history(section.id)] == list(reversed(ids))

    def test_user_history_filters_by_editor(self, sections, section) -> None:
        self.record(sections, section.id, 1, editor_id="u-a")
        self.record(sections, section.id, 2, editor_id="u-b")

        assert [e.editor_id for e in sections.list_user_history("u-a")] == ["u-a"]

    def test_history_outlives_section(self, sections, section) -> None:
        self.record(sections, section.id, 1)

        sections.delete_section(section.id)

        assert len(sections.list_history(section.id)) == 1

    def test_rows_are_append_only(self, sections, section) -> None:
        entry = self.record(sections, section.id, 1)
        row = db.session.get(SectionHistory, entry.id)
        row.editor_name = "Someone else"

        with pytest.raises(RuntimeError):
            db.session.commit()
        db.session.rollback()

    def test_cursor_pages(self, sections, section) -> None:
        for n in range(3):
            entry = self.record(sections, section.id, n)
            # spread timestamps so ordering does not depend on ids
            db.session.execute(
                SectionHistory.__table__.update()
                .where(SectionHistory.id == entry.id)
                .values(created_at=datetime(2026, 7, 1) + timedelta(minutes=n))
            )
        db.session.commit()

        page, meta = sections.page_history(section_id=section.id, limit=2)
        assert [e.before_snapshot for e in page] == ["v2", "v1"]
        assert meta["has_more"] is True

        rest, meta = sections.page_history(section_id=section.id, cursor=meta["next_cursor"], limit=2)
        assert [e.before_snapshot for e in rest] == ["v0"]
        assert meta == {"has_more": False, "next_cursor": None}


# =============================================================================
# Media
# =============================================================================


class TestMedia:
    def test_save_names_file_uniquely(self, app) -> None:
        first = save_file(upload("My Photo.PNG"), folder="s1", extensions={"png"})
        second = save_file(upload("My Photo.PNG"), folder="s1", extensions={"png"})

        assert first != second
        assert first.startswith("/uploads/s1/") and first.endswith(".png")

    def test_save_rejects(self, app) -> None:
        with pytest.raises(ValueError):
            save_file(upload("doc.pdf"), folder="s1", extensions={"png"})
        with pytest.raises(ValueError):
            save_file(upload("big.png", b"0123456789"), folder="s1", extensions={"png"}, max_bytes=4)
        with pytest.raises(ValueError):
            save_file(None, folder="s1", extensions={"png"})

    def test_foreign_and_escaping_urls_are_ignored(self, app) -> None:
        assert media_path("https://cdn.example/a.png") is None
        assert media_path("/uploads/../config.py") is None
        assert delete_file("https://cdn.example/a.png") is False

    def test_missing_file_is_noop(self, app) -> None:
        assert delete_file("/uploads/s1/gone.png") is False

    def test_uploaded_file_is_served(self, app, client) -> None:
        url = save_file(upload("lake.png"), folder="s1", extensions={"png"})

        response = client.get(url)

        assert response.status_code == 200
        assert response.data.startswith(b"\x89PNG")


# =============================================================================
# Invariants
# =============================================================================


class TestInvariants:
    def test_owner_cannot_be_assigned_editor(self, app) -> None:
        row = Section(title="A", owner_id="u1", editor_ids=["u1"])

        with pytest.raises(InvariantViolation):
            assert_section(row)

    def test_valid_section(self, app) -> None:
        row = Section(title="A", owner_id="u1", editor_ids=["u2"])
        row.blocks = [Block(type="text", width=12, order_index=1), Block(type="image", width=6, order_index=2)]

        assert_section(row)

    def test_update_checks_the_whole_section(self, sections, section) -> None:
        with pytest.raises(InvariantViolation):
            sections.update_section(section.id, editor_ids=["u-helper", section.owner_id])

        assert sections.get_section(section.id).editor_ids == []

    def test_create_rejects_order_below_one(self, blocks, section) -> None:
        with pytest.raises(InvariantViolation):
            blocks.create_block(section.id, "text", content="x", order_index=0)

        assert blocks.list_blocks(section.id) == []
