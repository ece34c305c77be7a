# campsite/services/section_store.py
from dateutil.parser import parse

from campsite.domain.invariants.section import assert_section, assert_section_title
from campsite.editor.blocks import owned_blobs
from campsite.editor.errors import SectionNotFound, ValidationError
from campsite.editor.store import SectionStore
from campsite.extensions import db
from campsite.models.section import Section
from campsite.models.section_history import SectionHistory
from campsite.normalizers.block import block_from_row
from campsite.normalizers.section import history_from_row, section_from_row
from campsite.utils.pagination import paginate_cursor
from .base import store_call

UPDATABLE_FIELDS = {"title", "show_author", "show_publish_date", "publish_date", "editor_ids"}


def _publish_date(value):
    if value in (None, ""):
        return None
    try:
        return parse(value).date()
    except (TypeError, ValueError, OverflowError) as exc:
        raise ValidationError(f"Invalid publish date: {value!r}") from exc


class SqlSectionStore(SectionStore):
    def list_sections(self, page_section_id):
        with store_call("Listing sections"):
            rows = (
                Section.query
                .filter_by(page_section_id=page_section_id)
                .order_by(Section.created_at.asc(), Section.id.asc())
                .all()
            )
            sections = [section_from_row(row) for row in rows]
        return sections

    def get_section(self, section_id):
        with store_call("Loading section"):
            row = db.session.get(Section, section_id)
            if row is None:
                raise SectionNotFound()
            section = section_from_row(row)
        return section

    def create_section(self, *, page_section_id, title, owner_id, owner_name):
        assert_section_title(title)

        with store_call("Creating section"):
            section = Section()
            section.page_section_id = page_section_id
            section.title = title.strip()
            section.owner_id = owner_id
            section.owner_name = owner_name
            section.editor_ids = []
            db.session.add(section)

        return section_from_row(section)

    def update_section(self, section_id, **fields):
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields not updatable: {', '.join(sorted(unknown))}")
        if "title" in fields:
            assert_section_title(fields["title"])
            fields["title"] = fields["title"].strip()
        if "publish_date" in fields:
            fields["publish_date"] = _publish_date(fields["publish_date"])
        if "editor_ids" in fields:
            fields["editor_ids"] = [str(i) for i in fields["editor_ids"]]

        with store_call("Updating section"):
            section = db.session.get(Section, section_id)
            if section is None:
                raise SectionNotFound()
            for field, value in fields.items():
                setattr(section, field, value)
            assert_section(section)

        return section_from_row(section)

    def delete_section(self, section_id):
        with store_call("Deleting section"):
            section = db.session.get(Section, section_id)
            if section is None:
                raise SectionNotFound()
            urls = [url for row in section.blocks for url in owned_blobs(block_from_row(row))]
            db.session.delete(section)
        return urls

    # ------------------------
    # History
    # ------------------------
    def list_history(self, section_id):
        with store_call("Listing history"):
            rows = self._history_query(section_id=section_id).order_by(
                SectionHistory.created_at.desc(), SectionHistory.id.desc()
            ).all()
            entries = [history_from_row(row) for row in rows]
        return entries

    def list_user_history(self, editor_id):
        with store_call("Listing history"):
            rows = self._history_query(editor_id=editor_id).order_by(
                SectionHistory.created_at.desc(), SectionHistory.id.desc()
            ).all()
            entries = [history_from_row(row) for row in rows]
        return entries

    def page_history(self, *, section_id=None, editor_id=None, cursor=None, limit=20):
        """Cursor-paginated variant of list_history / list_user_history."""
        with store_call("Listing history"):
            rows, meta = paginate_cursor(
                self._history_query(section_id=section_id, editor_id=editor_id),
                model=SectionHistory,
                cursor=cursor,
                limit=limit,
            )
            entries = [history_from_row(row) for row in rows]
        return entries, meta

    def _history_query(self, *, section_id=None, editor_id=None):
        query = SectionHistory.query
        if section_id is not None:
            query = query.filter_by(section_id=section_id)
        if editor_id is not None:
            query = query.filter_by(editor_id=editor_id)
        return query

    def create_history(self, *, section_id, editor_id, editor_name, before_snapshot, after_snapshot):
        if before_snapshot == after_snapshot:
            raise ValidationError("History entries must record a change.")

        with store_call("Recording history"):
            entry = SectionHistory()
            entry.section_id = section_id
            entry.editor_id = editor_id
            entry.editor_name = editor_name
            entry.before_snapshot = before_snapshot
            entry.after_snapshot = after_snapshot
            db.session.add(entry)

        return history_from_row(entry)
