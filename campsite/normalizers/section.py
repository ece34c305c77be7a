# campsite/normalizers/section.py
from campsite.editor.sections import ContentSection, SectionHistoryEntry
from .block import normalize_block


def section_from_row(row) -> ContentSection:
    return ContentSection(
        id=row.id,
        page_section_id=row.page_section_id,
        title=row.title,
        owner_id=row.owner_id,
        owner_name=row.owner_name,
        editor_ids=list(row.editor_ids or []),
        show_author=bool(row.show_author),
        show_publish_date=bool(row.show_publish_date),
        publish_date=row.publish_date.isoformat() if row.publish_date else None,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def history_from_row(row) -> SectionHistoryEntry:
    return SectionHistoryEntry(
        id=row.id,
        section_id=row.section_id,
        editor_id=row.editor_id,
        editor_name=row.editor_name,
        before_snapshot=row.before_snapshot,
        after_snapshot=row.after_snapshot,
        created_at=row.created_at,
    )


def normalize_section(section: ContentSection, blocks=None, can_edit=None):
    data = {
        "id": section.id,
        "page_section_id": section.page_section_id,
        "title": section.title,
        "owner_id": section.owner_id,
        "owner_name": section.owner_name,
        "editor_ids": list(section.editor_ids),
        "show_author": section.show_author,
        "show_publish_date": section.show_publish_date,
        "publish_date": section.publish_date,
        "created_at": section.created_at.isoformat() if section.created_at else None,
        "updated_at": section.updated_at.isoformat() if section.updated_at else None,
    }

    if can_edit is not None:
        data["can_edit"] = can_edit

    if blocks is not None:
        data["blocks"] = [normalize_block(b) for b in blocks]

    return data
