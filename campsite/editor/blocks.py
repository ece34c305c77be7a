# campsite/editor/blocks.py
"""
Block data contract shared by the editor, the layout engine and the stores.

Identifiers are a tagged union: ``PersistedId`` for rows the store knows
about, ``DraftId`` for blocks that only exist in an edit session. The commit
step matches on the type instead of inspecting the string.
"""
from __future__ import annotations

import json
import re
import secrets
import time
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Union

BLOCK_TYPES = ("heading", "text", "image", "link", "file", "gallery")
MEDIA_TYPES = frozenset({"image", "gallery"})
TEXT_TYPES = ("heading", "text")

# Offered by the type picker when a page region does not configure its own list
DEFAULT_ALLOWED_TYPES = ("heading", "text", "image")

GRID_COLUMNS = 12
MIN_WIDTH = 3
MAX_WIDTH = 12

_TAG_RE = re.compile(r"<[^>]*>")


@dataclass(frozen=True)
class PersistedId:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class DraftId:
    value: str

    @classmethod
    def new(cls) -> "DraftId":
        return cls(f"{int(time.time() * 1000)}-{secrets.token_hex(4)}")

    def __str__(self) -> str:
        return f"draft-{self.value}"


BlockId = Union[PersistedId, DraftId]


@dataclass
class ContentBlock:
    id: BlockId
    section_id: str
    type: str
    content: Optional[str] = None
    image_url: Optional[str] = None
    width: int = GRID_COLUMNS
    order_index: int = 1

    @property
    def is_draft(self) -> bool:
        return isinstance(self.id, DraftId)


def coerce_id(value: Union[BlockId, str]) -> BlockId:
    if isinstance(value, (PersistedId, DraftId)):
        return value
    return PersistedId(str(value))


def clamp_width(value: int) -> int:
    return min(MAX_WIDTH, max(MIN_WIDTH, int(value)))


def default_width(block_type: str) -> int:
    return 6 if block_type == "image" else GRID_COLUMNS


def parse_gallery(value: Optional[str]) -> List[str]:
    """
    Decode gallery content. Malformed payloads count as an empty gallery.
    """
    if not value:
        return []
    try:
        parsed = json.loads(value)
    except (TypeError, ValueError):
        return []
    if not isinstance(parsed, list):
        return []
    return [item for item in parsed if isinstance(item, str) and item.strip()]


def serialize_gallery(images: Iterable[str]) -> str:
    # Compact separators, stored payloads round-trip unchanged
    return json.dumps(list(images), separators=(",", ":"), ensure_ascii=False)


def plain_text(value: Optional[str]) -> str:
    return _TAG_RE.sub("", value or "").replace("&nbsp;", " ").strip()


def is_empty(block: ContentBlock) -> bool:
    if block.type == "image":
        return not block.image_url
    if block.type == "gallery":
        return not parse_gallery(block.content)
    if block.type in ("link", "file"):
        return not (block.content or "").strip() and not (block.image_url or "").strip()
    return not plain_text(block.content)


def owned_blobs(block: ContentBlock) -> List[str]:
    urls = []
    if block.image_url:
        urls.append(block.image_url)
    if block.type == "gallery":
        urls.extend(parse_gallery(block.content))
    return urls


def renumber(blocks: Sequence[ContentBlock]) -> List[ContentBlock]:
    """Re-assigns sequential order values (1..N) by list position."""
    return [
        block if block.order_index == index else replace(block, order_index=index)
        for index, block in enumerate(blocks, start=1)
    ]


def block_changes(original: ContentBlock, current: ContentBlock):
    """
    Field-level diff of a persisted block against its edited version.

    Returns ``(fields, stale_urls)``: the partial update to send (empty when
    nothing changed) and the blob URLs the edit stopped referencing.
    """
    fields = {}
    stale: List[str] = []

    if (original.content or "") != (current.content or ""):
        fields["content"] = current.content
        if current.type == "gallery":
            kept = set(parse_gallery(current.content))
            stale.extend(url for url in parse_gallery(original.content) if url not in kept)

    if (original.image_url or "") != (current.image_url or ""):
        fields["image_url"] = current.image_url
        if original.image_url:
            stale.append(original.image_url)

    if original.width != current.width:
        fields["width"] = current.width

    if original.order_index != current.order_index:
        fields["order_index"] = current.order_index

    return fields, stale
