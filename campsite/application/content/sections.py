# campsite/application/content/sections.py
from typing import Any, Dict, Iterable, List

from campsite.editor.errors import ValidationError
from campsite.editor.sections import Actor, ContentSection
from campsite.models.user import User
from campsite.utils.optimistic_lock import enforce_optimistic_lock
from .panel import panel_for, panel_for_section

ALLOWED_UPDATE_FIELDS = ("title", "show_author", "show_publish_date", "publish_date")


def list_sections(*, actor: Actor, page_section_id: str) -> List[Dict[str, Any]]:
    """
    Sections of a page region with their blocks and the caller's edit right.
    """
    panel = panel_for(actor, page_section_id)
    return [
        {
            "section": section,
            "blocks": panel.editor(section.id).blocks,
            "can_edit": panel.can_edit(section),
        }
        for section in panel.sections
    ]


def get_section(*, actor: Actor, section_id: str) -> Dict[str, Any]:
    panel, section = panel_for_section(actor, section_id)
    editor = panel.editor(section.id)
    return {
        "section": section,
        "blocks": editor.blocks,
        "rows": editor.rows(),
        "can_edit": panel.can_edit(section),
        "allowed_types": list(panel.allowed_block_types),
    }


def create_section(*, actor: Actor, page_section_id: str, title: str) -> ContentSection:
    panel = panel_for(actor, page_section_id)
    return panel.add_section(title)


def update_section(*, actor: Actor, section_id: str, data: Dict[str, Any]) -> ContentSection:
    """
    Save section metadata outside of a block edit session.

    Responsibilities:
    - Reject writes against a stale copy (If-Unmodified-Since)
    - Send only the fields that changed
    - Record the title change in the section history
    """
    panel, section = panel_for_section(actor, section_id)
    enforce_optimistic_lock(section)

    fields = {field: data[field] for field in ALLOWED_UPDATE_FIELDS if field in data}
    if not fields:
        raise ValidationError("No valid fields provided for update")

    panel.start_edit(section.id)
    panel.commit_edit(section.id, **fields)
    return panel.section(section.id)


def delete_section(*, actor: Actor, section_id: str) -> None:
    panel, section = panel_for_section(actor, section_id)
    panel.delete_section(section.id)


def assign_editors(*, actor: Actor, section_id: str, editor_ids: Iterable[str]) -> ContentSection:
    if isinstance(editor_ids, str) or not all(isinstance(i, str) for i in editor_ids):
        raise ValidationError("editor_ids must be a list of user ids")

    editor_ids = list(editor_ids)
    known = {user.id for user in User.query.filter(User.id.in_(editor_ids)).all()} if editor_ids else set()
    unknown = [i for i in editor_ids if i not in known]
    if unknown:
        raise ValidationError(f"Unknown users: {', '.join(unknown)}")

    panel, section = panel_for_section(actor, section_id)
    return panel.assign_editors(section.id, editor_ids)
