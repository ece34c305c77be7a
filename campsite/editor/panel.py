# campsite/editor/panel.py
"""
Section panel: the list of content sections of one page region together with
their block editors, edit rights and revision history.

Responsibilities:
- Resolve who may add, edit, delete and assign sections
- Keep one SectionBlockEditor per section, wired to the history log
- Turn "save" into a partial section update followed by a block commit
- Render history entries as line diffs
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from .blocks import DEFAULT_ALLOWED_TYPES
from .diff import DiffLine, diff_lines, render_diff
from .draft import CommitOutcome, SectionBlockEditor
from .errors import (
    LoadError,
    MutationError,
    PermissionDenied,
    SectionNotFound,
    StoreError,
    ValidationError,
)
from .sections import Actor, ContentSection, SectionHistoryEntry
from .store import BlockStore, SectionStore

log = logging.getLogger(__name__)

_UNSET = object()


@dataclass
class SectionDraft:
    title: str
    show_author: bool = False
    show_publish_date: bool = False
    publish_date: Optional[str] = None

    @classmethod
    def of(cls, section: ContentSection) -> "SectionDraft":
        return cls(
            title=section.title,
            show_author=section.show_author,
            show_publish_date=section.show_publish_date,
            publish_date=section.publish_date,
        )

    def changes_against(self, section: ContentSection) -> dict:
        changes = {}
        for name in ("title", "show_author", "show_publish_date", "publish_date"):
            value = getattr(self, name)
            if value != getattr(section, name):
                changes[name] = value
        return changes


@dataclass(frozen=True)
class HistoryView:
    entry: SectionHistoryEntry

    @property
    def lines(self) -> List[DiffLine]:
        return diff_lines(self.entry.before_snapshot, self.entry.after_snapshot)

    @property
    def rendered(self) -> List[str]:
        return render_diff(self.lines)


class SectionPanel:
    def __init__(
        self,
        page_section_id: str,
        block_store: BlockStore,
        section_store: SectionStore,
        user: Actor,
        allowed_block_types: Sequence[str] = DEFAULT_ALLOWED_TYPES,
    ):
        self.page_section_id = page_section_id
        self.block_store = block_store
        self.section_store = section_store
        self.user = user
        self.allowed_block_types = tuple(allowed_block_types)

        self.sections: List[ContentSection] = []
        self.editors: Dict[str, SectionBlockEditor] = {}
        self.drafts: Dict[str, SectionDraft] = {}
        self.load_error: Optional[str] = None
        self._commit_signals: Dict[str, int] = {}

    # ------------------------
    # Loading
    # ------------------------
    def load(self) -> List[ContentSection]:
        try:
            sections = self.section_store.list_sections(self.page_section_id)
        except StoreError as exc:
            self.load_error = LoadError.default_message
            log.warning("Loading sections of %s failed: %s", self.page_section_id, exc)
            raise LoadError(self.load_error) from exc
        self.load_error = None
        self.sections = list(sections)
        return list(self.sections)

    def section(self, section_id: str) -> ContentSection:
        for section in self.sections:
            if section.id == section_id:
                return section
        raise SectionNotFound()

    def editor(self, section_id: str) -> SectionBlockEditor:
        """Block editor of a section, created and loaded on first use."""
        editor = self.editors.get(section_id)
        if editor is None or editor.load_error:
            section = self.section(section_id)
            editor = SectionBlockEditor(
                section.id,
                self.block_store,
                title=section.title,
                allowed_types=self.allowed_block_types,
                on_history=lambda before, after: self.record_history(section.id, before, after),
            )
            self.editors[section_id] = editor
            editor.load()
        return editor

    # ------------------------
    # Permissions
    # ------------------------
    def can_edit(self, section: ContentSection) -> bool:
        return (
            self.user.is_admin
            or section.owner_id == self.user.id
            or self.user.id in section.editor_ids
        )

    def require_edit(self, section_id: str) -> ContentSection:
        section = self.section(section_id)
        if not self.can_edit(section):
            raise PermissionDenied("You may not edit this section.")
        return section

    # ------------------------
    # Section lifecycle
    # ------------------------
    def add_section(self, title: str) -> ContentSection:
        if not self.user.is_staff:
            raise PermissionDenied("Only staff may add sections.")
        title = (title or "").strip()
        if not title:
            raise ValidationError("Title is required.")

        try:
            created = self.section_store.create_section(
                page_section_id=self.page_section_id,
                title=title,
                owner_id=self.user.id,
                owner_name=self.user.name,
            )
        except StoreError as exc:
            log.warning("Creating section in %s failed: %s", self.page_section_id, exc)
            raise MutationError("Section could not be created.") from exc

        self.sections.append(created)
        return created

    def delete_section(self, section_id: str) -> None:
        section = self.section(section_id)
        if not (self.user.is_admin or section.owner_id == self.user.id):
            raise PermissionDenied("Only the owner or an admin may delete a section.")

        try:
            urls = self.section_store.delete_section(section.id)
        except StoreError as exc:
            log.warning("Deleting section %s failed: %s", section.id, exc)
            raise MutationError("Section could not be deleted.") from exc

        self.sections = [s for s in self.sections if s.id != section.id]
        self.editors.pop(section.id, None)
        self.drafts.pop(section.id, None)

        for url in dict.fromkeys(urls):
            try:
                self.block_store.delete_blob(url)
            except StoreError as exc:
                log.warning("Deleting blob %s of section %s failed: %s", url, section.id, exc)

    def assign_editors(self, section_id: str, editor_ids: Iterable[str]) -> ContentSection:
        section = self.section(section_id)
        if not self.user.is_admin:
            raise PermissionDenied("Only admins may assign editors.")
        ids = list(dict.fromkeys(i for i in editor_ids if i and i != section.owner_id))
        return self._update_section(section, editor_ids=ids)

    # ------------------------
    # Editing
    # ------------------------
    def start_edit(self, section_id: str) -> SectionDraft:
        section = self.require_edit(section_id)
        editor = self.editor(section.id)
        editor.title = section.title
        editor.start_edit()
        draft = self.drafts.get(section.id)
        if draft is None:
            draft = self.drafts[section.id] = SectionDraft.of(section)
        return draft

    def cancel_edit(self, section_id: str) -> None:
        editor = self.editors.get(section_id)
        if editor is not None:
            editor.cancel_edit()
        self.drafts.pop(section_id, None)

    def commit_edit(
        self,
        section_id: str,
        *,
        title=_UNSET,
        show_author=_UNSET,
        show_publish_date=_UNSET,
        publish_date=_UNSET,
    ) -> Optional[CommitOutcome]:
        """
        Save an edit session: changed section fields first, then the block
        draft. A failed block commit leaves the session open for a retry.
        """
        section = self.require_edit(section_id)
        editor = self.editors.get(section.id)
        draft = self.drafts.get(section.id)
        if editor is None or draft is None or not editor.editing:
            raise ValidationError("Section is not being edited.")

        if title is not _UNSET and not isinstance(title, str):
            raise ValidationError("title must be a string")
        for flag, value in (("show_author", show_author), ("show_publish_date", show_publish_date)):
            if value is not _UNSET and not isinstance(value, bool):
                raise ValidationError(f"{flag} must be a boolean")
        if publish_date not in (_UNSET, None) and not isinstance(publish_date, str):
            raise ValidationError("publish_date must be a string")

        for name, value in (
            ("title", title),
            ("show_author", show_author),
            ("show_publish_date", show_publish_date),
            ("publish_date", publish_date),
        ):
            if value is not _UNSET:
                setattr(draft, name, value)

        draft.title = (draft.title or "").strip()
        if not draft.title:
            raise ValidationError("Title is required.")

        changes = draft.changes_against(section)
        if changes:
            self._update_section(section, **changes)

        signal = self._commit_signals.get(section.id, 0) + 1
        self._commit_signals[section.id] = signal
        outcome = editor.commit(signal, title=draft.title)
        self.drafts.pop(section.id, None)
        return outcome

    def _update_section(self, section: ContentSection, **changes) -> ContentSection:
        try:
            updated = self.section_store.update_section(section.id, **changes)
        except StoreError as exc:
            log.warning("Updating section %s failed: %s", section.id, exc)
            raise MutationError("Section could not be saved.") from exc
        self.sections = [updated if s.id == updated.id else s for s in self.sections]
        return updated

    # ------------------------
    # History
    # ------------------------
    def record_history(self, section_id: str, before_snapshot: str, after_snapshot: str):
        # history is advisory, a failed write never fails the edit
        try:
            return self.section_store.create_history(
                section_id=section_id,
                editor_id=self.user.id,
                editor_name=self.user.name,
                before_snapshot=before_snapshot,
                after_snapshot=after_snapshot,
            )
        except StoreError as exc:
            log.warning("Recording history of section %s failed: %s", section_id, exc)
            return None

    def history(self, section_id: str) -> List[HistoryView]:
        section = self.require_edit(section_id)
        try:
            entries = self.section_store.list_history(section.id)
        except StoreError as exc:
            raise LoadError("History could not be loaded.") from exc
        return [HistoryView(entry) for entry in entries]

    def user_history(self) -> List[HistoryView]:
        try:
            entries = self.section_store.list_user_history(self.user.id)
        except StoreError as exc:
            raise LoadError("History could not be loaded.") from exc
        return [HistoryView(entry) for entry in entries]
