# campsite/application/content/history.py
from typing import List, Optional, Tuple

from campsite.editor.errors import LoadError, StoreError
from campsite.editor.panel import HistoryView
from campsite.editor.sections import Actor
from campsite.services import SqlSectionStore
from campsite.utils.pagination import CursorMeta
from .panel import panel_for_section


def _page(**query) -> Tuple[List[HistoryView], CursorMeta]:
    try:
        entries, meta = SqlSectionStore().page_history(**query)
    except StoreError as exc:
        raise LoadError("History could not be loaded.") from exc
    return [HistoryView(entry) for entry in entries], meta


def section_history(
    *, actor: Actor, section_id: str, cursor: Optional[str], limit: int
) -> Tuple[List[HistoryView], CursorMeta]:
    """Newest-first history of a section, visible to anyone who may edit it."""
    panel, section = panel_for_section(actor, section_id)
    panel.require_edit(section.id)
    return _page(section_id=section.id, cursor=cursor, limit=limit)


def user_history(*, actor: Actor, cursor: Optional[str], limit: int) -> Tuple[List[HistoryView], CursorMeta]:
    return _page(editor_id=actor.id, cursor=cursor, limit=limit)
