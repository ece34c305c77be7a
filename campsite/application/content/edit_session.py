# campsite/application/content/edit_session.py
"""
Batched edit session: start editing, replay a list of draft operations, then
commit the draft in one go.

Operation shapes (``block`` is ``{"id": <persisted id>}`` or ``{"ref": <name>}``
where ``ref`` names a block inserted earlier in the same batch):

    {"op": "insert", "type": "text", "index": 0, "width": 6, "image_url": None, "ref": "a"}
    {"op": "content", "block": {...}, "value": "<p>Hi</p>"}
    {"op": "link", "block": {...}, "label": "Packing list", "url": "https://..."}
    {"op": "width", "block": {...}, "value": 6}
    {"op": "image", "block": {...}, "url": "/uploads/..."}
    {"op": "gallery", "block": {...}, "images": ["/uploads/..."]}
    {"op": "delete", "block": {...}}
    {"op": "move", "block": {...}, "index": 2}
"""
from typing import Any, Dict, List, Optional

from campsite.editor.blocks import BlockId, PersistedId
from campsite.editor.draft import CommitOutcome, SectionBlockEditor
from campsite.editor.errors import EditorError, ValidationError
from campsite.editor.sections import Actor
from .panel import panel_for_section
from .sections import ALLOWED_UPDATE_FIELDS

OPERATIONS = ("insert", "content", "link", "width", "image", "gallery", "delete", "move")


def _resolve(ref: Any, refs: Dict[str, BlockId]) -> BlockId:
    if not isinstance(ref, dict):
        raise ValidationError("block must be an object with 'id' or 'ref'")
    if "ref" in ref:
        if ref["ref"] not in refs:
            raise ValidationError(f"Unknown block ref '{ref['ref']}'")
        return refs[ref["ref"]]
    if "id" in ref:
        return PersistedId(str(ref["id"]))
    raise ValidationError("block must be an object with 'id' or 'ref'")


def _apply(editor: SectionBlockEditor, operation: Dict[str, Any], refs: Dict[str, BlockId]) -> None:
    op = operation.get("op")
    if op not in OPERATIONS:
        raise ValidationError(f"Unknown operation '{op}'")

    if op == "insert":
        index = operation.get("index", len(editor.blocks))
        block = editor.insert(
            operation.get("type"),
            index,
            image_url=operation.get("image_url"),
            width=operation.get("width"),
        )
        if operation.get("ref"):
            refs[operation["ref"]] = block.id
        return

    block_id = _resolve(operation.get("block"), refs)
    if op == "content":
        editor.update_content(block_id, operation.get("value"))
    elif op == "link":
        editor.update_link(block_id, operation.get("label", ""), operation.get("url", ""))
    elif op == "width":
        editor.update_width(block_id, operation.get("value"))
    elif op == "image":
        editor.replace_image(block_id, operation.get("url"))
    elif op == "gallery":
        editor.set_gallery_images(block_id, operation.get("images") or [])
    elif op == "delete":
        editor.delete(block_id)
    elif op == "move":
        editor.reorder(block_id, operation.get("index"))


def commit_session(
    *,
    actor: Actor,
    section_id: str,
    operations: List[Dict[str, Any]],
    section_fields: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Responsibilities:
    - Open an edit session on the section (edit rights required)
    - Replay draft operations; a bad operation discards the whole batch
    - Commit section fields and the block draft, recording one history entry
    """
    if not isinstance(operations, list):
        raise ValidationError("operations must be a list")
    if section_fields is not None and not isinstance(section_fields, dict):
        raise ValidationError("section must be an object")

    panel, section = panel_for_section(actor, section_id)
    panel.start_edit(section.id)
    editor = panel.editor(section.id)

    refs: Dict[str, BlockId] = {}
    try:
        for operation in operations:
            if not isinstance(operation, dict):
                raise ValidationError("Each operation must be an object")
            _apply(editor, operation, refs)
    except (EditorError, TypeError, ValueError) as exc:
        panel.cancel_edit(section.id)
        if isinstance(exc, EditorError):
            raise
        raise ValidationError(f"Invalid operation: {exc}") from exc

    fields = {k: v for k, v in (section_fields or {}).items() if k in ALLOWED_UPDATE_FIELDS}
    outcome: Optional[CommitOutcome] = panel.commit_edit(section.id, **fields)

    return {
        "section": panel.section(section.id),
        "blocks": editor.blocks,
        "outcome": outcome,
    }
