# campsite/editor/sections.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

STAFF_ROLES = {"admin", "staff"}


@dataclass
class ContentSection:
    id: str
    page_section_id: str
    title: str
    owner_id: str
    owner_name: str
    editor_ids: List[str] = field(default_factory=list)
    show_author: bool = False
    show_publish_date: bool = False
    publish_date: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class SectionHistoryEntry:
    id: str
    section_id: str
    editor_id: str
    editor_name: str
    before_snapshot: str
    after_snapshot: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Actor:
    """The signed-in user an editing surface acts for."""

    id: str
    name: str
    role: str = "member"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES
