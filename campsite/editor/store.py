# campsite/editor/store.py
"""
Remote store contract consumed by the editor.

Implementations must fail as a unit: a call either fully applies or raises
``StoreError`` (``BlockNotFound`` / ``SectionNotFound`` for unknown ids,
``ValidationError`` for rejected input).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from .blocks import ContentBlock
from .sections import ContentSection, SectionHistoryEntry


class BlockStore(ABC):
    @abstractmethod
    def list_blocks(self, section_id: str) -> List[ContentBlock]:
        """Blocks of a section ordered by order_index ascending."""

    @abstractmethod
    def create_block(
        self,
        section_id: str,
        type: str,
        *,
        content: Optional[str] = None,
        image_url: Optional[str] = None,
        width: int = 12,
        order_index: int,
    ) -> ContentBlock:
        ...

    @abstractmethod
    def update_block(self, block_id: str, **fields) -> ContentBlock:
        """Apply a partial update (content, image_url, width, order_index)."""

    @abstractmethod
    def delete_block(self, block_id: str) -> None:
        ...

    @abstractmethod
    def upload_image(self, section_id: str, file) -> str:
        ...

    @abstractmethod
    def upload_file(self, section_id: str, file) -> str:
        ...

    @abstractmethod
    def delete_blob(self, url: str) -> None:
        ...


class SectionStore(ABC):
    @abstractmethod
    def list_sections(self, page_section_id: str) -> List[ContentSection]:
        ...

    @abstractmethod
    def get_section(self, section_id: str) -> ContentSection:
        ...

    @abstractmethod
    def create_section(
        self, *, page_section_id: str, title: str, owner_id: str, owner_name: str
    ) -> ContentSection:
        ...

    @abstractmethod
    def update_section(self, section_id: str, **fields) -> ContentSection:
        ...

    @abstractmethod
    def delete_section(self, section_id: str) -> List[str]:
        """Delete a section with its blocks; returns the blob URLs they owned."""

    @abstractmethod
    def list_history(self, section_id: str) -> List[SectionHistoryEntry]:
        """Newest first."""

    @abstractmethod
    def list_user_history(self, editor_id: str) -> List[SectionHistoryEntry]:
        """Newest first."""

    @abstractmethod
    def create_history(
        self,
        *,
        section_id: str,
        editor_id: str,
        editor_name: str,
        before_snapshot: str,
        after_snapshot: str,
    ) -> SectionHistoryEntry:
        ...
