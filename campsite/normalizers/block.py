# campsite/normalizers/block.py
from campsite.editor.blocks import ContentBlock, PersistedId


def block_from_row(row) -> ContentBlock:
    return ContentBlock(
        id=PersistedId(row.id),
        section_id=row.section_id,
        type=row.type,
        content=row.content,
        image_url=row.image_url,
        width=row.width,
        order_index=row.order_index,
    )


def normalize_block(block: ContentBlock):
    return {
        "id": str(block.id),
        "section_id": block.section_id,
        "type": block.type,
        "content": block.content,
        "image_url": block.image_url,
        "width": block.width,
        "order_index": block.order_index,
        "draft": block.is_draft,
    }


def normalize_rows(rows):
    """Packed grid rows as rendered by the editor."""
    return [
        {
            "start_index": row.start_index,
            "width": row.width,
            "remaining_width": row.remaining_width,
            "has_media": row.has_media,
            "block_ids": [str(block.id) for block in row.blocks],
            "inline_slot": (
                {
                    "insert_index": row.slot.insert_index,
                    "width": row.slot.width,
                    "allowed_types": list(row.slot.allowed_types),
                }
                if row.slot
                else None
            ),
        }
        for row in rows
    ]
