# campsite/application/content/blocks.py
"""
Immediate (view mode) block mutations. Each call is persisted on its own and
recorded in the section history.
"""
from typing import Any, Dict, List, Optional

from campsite.editor.blocks import ContentBlock
from campsite.editor.draft import SectionBlockEditor
from campsite.editor.errors import ValidationError
from campsite.editor.sections import Actor
from .panel import panel_for_section, section_id_of_block

UPLOAD_TARGETS = ("image", "replace", "file", "gallery", "blob")


def _editor(actor: Actor, section_id: str) -> SectionBlockEditor:
    panel, section = panel_for_section(actor, section_id)
    panel.require_edit(section.id)
    return panel.editor(section.id)


def _int(data: Dict[str, Any], key: str, default: Optional[int] = None) -> Optional[int]:
    value = data.get(key, default)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{key} must be an integer")
    return value


def add_block(*, actor: Actor, section_id: str, data: Dict[str, Any]) -> ContentBlock:
    editor = _editor(actor, section_id)
    block_type = data.get("type")
    if not block_type:
        raise ValidationError("type is required")

    index = _int(data, "index", len(editor.blocks))
    return editor.insert(block_type, index, image_url=data.get("image_url"), width=_int(data, "width"))


def update_block(*, actor: Actor, block_id: str, data: Dict[str, Any]) -> ContentBlock:
    """
    Apply the given changes to one block. Accepted keys: content, label + url
    (link/file), width, image_url, images (gallery).
    """
    editor = _editor(actor, section_id_of_block(block_id))
    block = editor.find(block_id)

    if not any(key in data for key in ("content", "label", "url", "width", "image_url", "images")):
        raise ValidationError("No valid fields provided for update")

    if "label" in data or "url" in data:
        block = editor.update_link(
            block.id,
            data.get("label", block.content or ""),
            data.get("url", block.image_url or ""),
        )
    if "content" in data:
        block = editor.update_content(block.id, data["content"])
    if "image_url" in data:
        block = editor.replace_image(block.id, data["image_url"])
    if "images" in data:
        images = data["images"]
        if not isinstance(images, list) or not all(isinstance(i, str) for i in images):
            raise ValidationError("images must be a list of URLs")
        block = editor.set_gallery_images(block.id, images)
    if "width" in data:
        block = editor.update_width(block.id, _int(data, "width"))
    return block


def delete_block(*, actor: Actor, block_id: str) -> None:
    editor = _editor(actor, section_id_of_block(block_id))
    editor.delete(block_id)


def reorder_block(*, actor: Actor, section_id: str, block_id: str, index: int) -> List[ContentBlock]:
    editor = _editor(actor, section_id)
    if isinstance(index, bool) or not isinstance(index, int):
        raise ValidationError("index must be an integer")
    editor.reorder(block_id, index)
    return editor.blocks


def upload(
    *,
    actor: Actor,
    section_id: str,
    target: str,
    files: List[Any],
    block_id: Optional[str] = None,
    index: Optional[int] = None,
    width: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Upload files into a section.

    Targets:
    - image: new image block at ``index``
    - replace: new image for ``block_id``
    - file: zip attachment for the link/file block ``block_id``
    - gallery: append to gallery ``block_id`` or create one at ``index``
    - blob: store only, return the URL (for batched edit sessions)
    """
    if target not in UPLOAD_TARGETS:
        raise ValidationError(f"Unknown upload target '{target}'")
    if not files:
        raise ValidationError("No file provided")
    if target in ("replace", "file") and not block_id:
        raise ValidationError("block_id is required")

    editor = _editor(actor, section_id)
    position = len(editor.blocks) if index is None else index

    if target == "gallery":
        return {"block": editor.upload_gallery(files, block_id=block_id, index=position, width=width)}
    if len(files) != 1:
        raise ValidationError("Exactly one file expected")

    file = files[0]
    if target == "image":
        return {"block": editor.insert_image_file(file, position, width=width)}
    if target == "replace":
        return {"block": editor.replace_image_file(block_id, file)}
    if target == "file":
        return {"block": editor.attach_file(block_id, file)}
    return {"url": editor.store.upload_image(section_id, file)}
