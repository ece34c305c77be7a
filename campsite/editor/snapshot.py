# campsite/editor/snapshot.py
import json
from typing import Sequence

from .blocks import ContentBlock


def snapshot_blocks(blocks: Sequence[ContentBlock]):
    # Key order is part of the format: the diff works on literal lines
    return [
        {
            "type": block.type,
            "content": block.content,
            "imageUrl": block.image_url,
            "width": block.width,
            "orderIndex": block.order_index,
        }
        for block in blocks
    ]


def build_snapshot(title: str, blocks: Sequence[ContentBlock]) -> str:
    """
    Canonical ``{title, blocks}`` rendering, two-space indented. History
    rows store this text verbatim and the diff view compares it line by line.
    """
    return json.dumps(
        {"title": title, "blocks": snapshot_blocks(blocks)},
        indent=2,
        ensure_ascii=False,
    )
