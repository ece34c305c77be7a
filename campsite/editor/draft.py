# campsite/editor/draft.py
"""
Draft editing engine for the blocks of one section.

Two modes:
- VIEW: every mutation is persisted right away and the in-memory mirror is
  replaced with what the store returned.
- EDIT: mutations only touch the draft. Nothing reaches the store until
  ``commit()``, which diffs the draft against the last persisted state and
  issues the minimal set of create/update/delete calls.

``blocks`` always resolves to whichever list the current mode displays.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Union

from .blocks import (
    BLOCK_TYPES,
    DEFAULT_ALLOWED_TYPES,
    BlockId,
    ContentBlock,
    DraftId,
    block_changes,
    clamp_width,
    coerce_id,
    default_width,
    is_empty,
    owned_blobs,
    parse_gallery,
    renumber,
    serialize_gallery,
)
from .errors import (
    BlockNotFound,
    CommitInProgress,
    LoadError,
    MutationError,
    StoreError,
    ValidationError,
)
from .layout import Row, pack_rows
from .reorder import move_block
from .snapshot import build_snapshot
from .store import BlockStore

log = logging.getLogger(__name__)

HistorySink = Callable[[str, str], None]


class EditorMode(str, Enum):
    VIEW = "view"
    EDIT = "edit"


@dataclass
class CommitOutcome:
    created: int = 0
    updated: int = 0
    deleted: int = 0
    blobs_deleted: int = 0
    history_recorded: bool = False

    @property
    def calls(self) -> int:
        return self.created + self.updated + self.deleted


class SectionBlockEditor:
    def __init__(
        self,
        section_id: str,
        store: BlockStore,
        *,
        title: str = "",
        allowed_types: Sequence[str] = DEFAULT_ALLOWED_TYPES,
        on_history: Optional[HistorySink] = None,
    ):
        self.section_id = section_id
        self.store = store
        self.title = title
        self.allowed_types = tuple(allowed_types)
        self.on_history = on_history

        self.mode = EditorMode.VIEW
        self.dirty = False
        self.load_error: Optional[str] = None
        self.error: Optional[str] = None

        self._persisted: List[ContentBlock] = []
        self._draft: List[ContentBlock] = []
        self._commit_in_flight = False
        self._last_signal: Optional[int] = None

    # ------------------------
    # State
    # ------------------------
    @property
    def editing(self) -> bool:
        return self.mode is EditorMode.EDIT

    @property
    def blocks(self) -> List[ContentBlock]:
        return list(self._draft if self.editing else self._persisted)

    @property
    def persisted(self) -> List[ContentBlock]:
        return list(self._persisted)

    def rows(self) -> List[Row]:
        return pack_rows(self.blocks, editing=self.editing, allowed_types=self.allowed_types)

    def find(self, block_id: Union[BlockId, str]) -> ContentBlock:
        current = self._draft if self.editing else self._persisted
        return current[self._index_of(coerce_id(block_id), current)]

    @staticmethod
    def _index_of(block_id: BlockId, blocks: Sequence[ContentBlock]) -> int:
        for index, block in enumerate(blocks):
            if block.id == block_id:
                return index
        raise BlockNotFound(f"Block {block_id} not found.")

    def load(self) -> List[ContentBlock]:
        try:
            blocks = self.store.list_blocks(self.section_id)
        except StoreError as exc:
            self.load_error = LoadError.default_message
            log.warning("Loading blocks of section %s failed: %s", self.section_id, exc)
            raise LoadError(self.load_error) from exc

        self.load_error = None
        self._persisted = list(blocks)
        if not self.editing:
            self._draft = list(blocks)
            self.dirty = False
        return self.blocks

    def _ensure_loaded(self) -> None:
        if self.load_error:
            raise LoadError(self.load_error)

    # ------------------------
    # Mode transitions
    # ------------------------
    def start_edit(self) -> None:
        self._ensure_loaded()
        if self.editing:
            return
        self._draft = list(self._persisted)
        self.dirty = False
        self.error = None
        self.mode = EditorMode.EDIT

    def cancel_edit(self) -> None:
        self.mode = EditorMode.VIEW
        self._draft = list(self._persisted)
        self.dirty = False

    # ------------------------
    # Mutations
    # ------------------------
    def insert(
        self,
        block_type: str,
        index: int,
        image_url: Optional[str] = None,
        width: Optional[int] = None,
    ) -> ContentBlock:
        if block_type == "image":
            content, url = None, image_url
        elif block_type == "gallery":
            content, url = serialize_gallery([]), None
        else:
            content, url = "", None
        return self._insert(block_type, index, content=content, image_url=url, width=width)

    def update_content(self, block_id: Union[BlockId, str], value: Optional[str]) -> ContentBlock:
        return self._apply(block_id, content=value)

    def update_link(self, block_id: Union[BlockId, str], label: str, url: str) -> ContentBlock:
        return self._apply(block_id, content=label, image_url=url)

    def update_width(self, block_id: Union[BlockId, str], value: int) -> ContentBlock:
        return self._apply(block_id, width=clamp_width(value))

    def replace_image(self, block_id: Union[BlockId, str], url: str) -> ContentBlock:
        return self._apply(block_id, image_url=url)

    def set_gallery_images(self, block_id: Union[BlockId, str], images: Iterable[str]) -> ContentBlock:
        target = self.find(block_id)
        if target.type != "gallery":
            raise ValidationError("Only gallery blocks hold image lists.")
        return self._apply(target.id, content=serialize_gallery(images))

    def remove_gallery_image(self, block_id: Union[BlockId, str], position: int) -> ContentBlock:
        images = parse_gallery(self.find(block_id).content)
        if not 0 <= position < len(images):
            raise ValidationError("Gallery image index out of range.")
        del images[position]
        return self.set_gallery_images(block_id, images)

    def delete(self, block_id: Union[BlockId, str]) -> None:
        self._ensure_loaded()
        target = self.find(block_id)

        if self.editing:
            self._touch(renumber([b for b in self._draft if b.id != target.id]))
            return

        before = list(self._persisted)
        try:
            self.store.delete_block(target.id.value)
        except StoreError as exc:
            raise self._mutation_failed("Block could not be removed.", exc) from exc

        remaining = [b for b in before if b.id != target.id]
        after = self._persist_order(remaining, {b.id: b.order_index for b in remaining})
        self._persisted = after
        self._record(before, after)
        self._delete_blobs(owned_blobs(target), keep=after, strict=False)

    def reorder(self, block_id: Union[BlockId, str], to_index: int) -> bool:
        """Move a block to a drop position. Returns False for no-op drops."""
        self._ensure_loaded()
        current = self.blocks
        from_index = self._index_of(coerce_id(block_id), current)
        moved = move_block(current, from_index, to_index)
        if moved is None:
            return False

        if self.editing:
            self._touch(moved)
            return True

        before = list(self._persisted)
        after = self._persist_order(moved, {b.id: b.order_index for b in before})
        self._persisted = after
        self._record(before, after)
        return True

    # ------------------------
    # Resize hooks (see resize.ResizeController)
    # ------------------------
    def preview_width(self, block_id: Union[BlockId, str], width: int) -> ContentBlock:
        width = clamp_width(width)
        if self.editing:
            return self._patch(coerce_id(block_id), width=width)
        index = self._index_of(coerce_id(block_id), self._persisted)
        self._persisted[index] = replace(self._persisted[index], width=width)
        return self._persisted[index]

    def finish_resize(self, block_id: Union[BlockId, str], start_width: int) -> ContentBlock:
        block = self.find(block_id)
        if self.editing or block.width == start_width:
            return block

        before = [replace(b, width=start_width) if b.id == block.id else b for b in self._persisted]
        try:
            updated = self.store.update_block(block.id.value, width=block.width)
        except StoreError as exc:
            self._persisted = before
            raise self._mutation_failed("Width could not be saved.", exc) from exc

        after = [updated if b.id == updated.id else b for b in self._persisted]
        self._persisted = after
        self._record(before, after)
        return updated

    # ------------------------
    # Uploads
    # ------------------------
    def insert_image_file(self, file, index: int, width: Optional[int] = None) -> ContentBlock:
        url = self._upload(self.store.upload_image, file, "Image")
        try:
            return self.insert("image", index, image_url=url, width=width)
        except (MutationError, ValidationError):
            self._discard_uploads([url])
            raise

    def replace_image_file(self, block_id: Union[BlockId, str], file) -> ContentBlock:
        target = self.find(block_id)
        url = self._upload(self.store.upload_image, file, "Image")
        try:
            return self.replace_image(target.id, url)
        except MutationError:
            self._discard_uploads([url])
            raise

    def attach_file(self, block_id: Union[BlockId, str], file) -> ContentBlock:
        target = self.find(block_id)
        url = self._upload(self.store.upload_file, file, "File")
        try:
            return self._apply(target.id, image_url=url)
        except MutationError:
            self._discard_uploads([url])
            raise

    def upload_gallery(
        self,
        files: Iterable,
        *,
        block_id: Union[BlockId, str, None] = None,
        index: Optional[int] = None,
        width: Optional[int] = None,
    ) -> Optional[ContentBlock]:
        """
        Upload a batch of images, then either append them to an existing
        gallery or create a new gallery block. State is only touched once
        every upload of the batch has succeeded.
        """
        files = list(files)
        if not files:
            return None
        target = self.find(block_id) if block_id is not None else None
        if target is not None and target.type != "gallery":
            raise ValidationError("Only gallery blocks hold image lists.")

        urls: List[str] = []
        try:
            for file in files:
                urls.append(self.store.upload_image(self.section_id, file))
        except ValidationError:
            self._discard_uploads(urls)
            raise
        except StoreError as exc:
            self._discard_uploads(urls)
            raise self._mutation_failed("Images could not be uploaded.", exc) from exc

        try:
            if target is not None:
                return self.set_gallery_images(target.id, parse_gallery(target.content) + urls)
            position = len(self.blocks) if index is None else index
            return self._insert(
                "gallery", position, content=serialize_gallery(urls), image_url=None, width=width
            )
        except (MutationError, ValidationError):
            self._discard_uploads(urls)
            raise

    # ------------------------
    # Commit
    # ------------------------
    def commit(self, signal: Optional[int] = None, *, title: Optional[str] = None) -> Optional[CommitOutcome]:
        """
        Persist the draft. ``signal`` is the caller's monotonically increasing
        commit counter: a value already seen is ignored (returns None).
        On failure the editor stays in edit mode with the draft intact.
        """
        if signal is not None:
            if signal == self._last_signal:
                return None
            self._last_signal = signal
        if self._commit_in_flight:
            raise CommitInProgress()
        if not self.editing:
            return CommitOutcome()
        self._ensure_loaded()

        before_title = self.title
        after_title = self.title if title is None else title
        draft = renumber([block for block in self._draft if not is_empty(block)])

        if not self.dirty:
            outcome = CommitOutcome()
            outcome.history_recorded = self._record(
                self._persisted, self._persisted, before_title, after_title
            )
            self._finish(after_title)
            return outcome

        self._commit_in_flight = True
        self.error = None
        before = list(self._persisted)
        try:
            outcome = self._write_draft(before, draft)
            refreshed = self.store.list_blocks(self.section_id)
        except StoreError as exc:
            self._resync()
            raise self._mutation_failed("Saving failed.", exc) from exc
        finally:
            self._commit_in_flight = False

        self._persisted = list(refreshed)
        outcome.history_recorded = self._record(before, refreshed, before_title, after_title)
        self._finish(after_title)
        return outcome

    def _write_draft(self, before: List[ContentBlock], draft: List[ContentBlock]) -> CommitOutcome:
        persisted = {block.id: block for block in before}
        kept = {block.id for block in draft}
        removed = [block for block in before if block.id not in kept]
        garbage = [url for block in removed for url in owned_blobs(block)]
        outcome = CommitOutcome()

        for block in draft:
            if isinstance(block.id, DraftId):
                created = self.store.create_block(
                    self.section_id,
                    block.type,
                    content=block.content,
                    image_url=block.image_url,
                    width=block.width,
                    order_index=block.order_index,
                )
                # a retry after a later failure must update this row, not create it again
                self._adopt_id(block.id, created.id)
                outcome.created += 1
                continue

            original = persisted.get(block.id)
            if original is None:
                continue
            fields, stale = block_changes(original, block)
            garbage.extend(stale)
            if fields:
                self.store.update_block(block.id.value, **fields)
                outcome.updated += 1

        # rows before blobs, a failed blob delete must not leave a dangling row
        for block in removed:
            self.store.delete_block(block.id.value)
            outcome.deleted += 1

        outcome.blobs_deleted = self._delete_blobs(garbage, keep=draft, strict=True)
        return outcome

    def _adopt_id(self, draft_id: DraftId, persisted_id: BlockId) -> None:
        for index, block in enumerate(self._draft):
            if block.id == draft_id:
                self._draft[index] = replace(block, id=persisted_id)
                return

    def _finish(self, title: str) -> None:
        self.title = title
        self.mode = EditorMode.VIEW
        self._draft = list(self._persisted)
        self.dirty = False

    # ------------------------
    # Internals
    # ------------------------
    def _insert(
        self,
        block_type: str,
        index: int,
        *,
        content: Optional[str],
        image_url: Optional[str],
        width: Optional[int],
    ) -> ContentBlock:
        self._ensure_loaded()
        if block_type not in BLOCK_TYPES or block_type not in self.allowed_types:
            raise ValidationError(f"Block type '{block_type}' is not allowed here.")

        current = self.blocks
        index = max(0, min(int(index), len(current)))
        width = clamp_width(width if width is not None else default_width(block_type))

        if self.editing:
            block = ContentBlock(
                id=DraftId.new(),
                section_id=self.section_id,
                type=block_type,
                content=content,
                image_url=image_url,
                width=width,
                order_index=index + 1,
            )
            draft = list(self._draft)
            draft.insert(index, block)
            self._touch(renumber(draft))
            return self._draft[index]

        before = list(self._persisted)
        try:
            created = self.store.create_block(
                self.section_id,
                block_type,
                content=content,
                image_url=image_url,
                width=width,
                order_index=index + 1,
            )
        except StoreError as exc:
            raise self._mutation_failed("Block could not be created.", exc) from exc

        following = list(before)
        following.insert(index, created)
        orders = {b.id: b.order_index for b in before}
        orders[created.id] = created.order_index
        after = self._persist_order(following, orders)
        self._persisted = after
        self._record(before, after)
        return after[index]

    def _apply(self, block_id: Union[BlockId, str], **fields) -> ContentBlock:
        self._ensure_loaded()
        block_id = coerce_id(block_id)
        if self.editing:
            return self._patch(block_id, **fields)
        return self._persist_fields(block_id, **fields)

    def _patch(self, block_id: BlockId, **fields) -> ContentBlock:
        index = self._index_of(block_id, self._draft)
        self._draft[index] = replace(self._draft[index], **fields)
        self.dirty = True
        return self._draft[index]

    def _touch(self, draft: List[ContentBlock]) -> None:
        self._draft = list(draft)
        self.dirty = True

    def _persist_fields(self, block_id: BlockId, **fields) -> ContentBlock:
        original = self.find(block_id)
        changes, stale = block_changes(original, replace(original, **fields))
        if not changes:
            return original

        before = list(self._persisted)
        try:
            updated = self.store.update_block(original.id.value, **changes)
        except StoreError as exc:
            raise self._mutation_failed(MutationError.default_message, exc) from exc

        after = [updated if b.id == updated.id else b for b in before]
        self._persisted = after
        self._record(before, after)
        self._delete_blobs(stale, keep=after, strict=False)
        return updated

    def _persist_order(self, blocks: Sequence[ContentBlock], original_orders) -> List[ContentBlock]:
        """Renumber and persist only the blocks whose order_index moved."""
        result = []
        try:
            for block in renumber(blocks):
                if original_orders.get(block.id) != block.order_index:
                    block = self.store.update_block(block.id.value, order_index=block.order_index)
                result.append(block)
        except StoreError as exc:
            self._resync()
            raise self._mutation_failed("Order could not be saved.", exc) from exc
        return result

    def _delete_blobs(self, urls: Iterable[str], *, keep: Sequence[ContentBlock], strict: bool) -> int:
        referenced = {url for block in keep for url in owned_blobs(block)}
        deleted = 0
        for url in dict.fromkeys(urls):
            if url in referenced:
                continue
            try:
                self.store.delete_blob(url)
            except StoreError as exc:
                if strict:
                    raise
                self.error = "File could not be removed."
                log.warning("Deleting blob %s failed: %s", url, exc)
                continue
            deleted += 1
        return deleted

    def _upload(self, upload, file, what: str) -> str:
        try:
            return upload(self.section_id, file)
        except StoreError as exc:
            raise self._mutation_failed(f"{what} could not be uploaded.", exc) from exc

    def _discard_uploads(self, urls: Iterable[str]) -> None:
        for url in urls:
            try:
                self.store.delete_blob(url)
            except StoreError as exc:
                log.warning("Cleaning up upload %s failed: %s", url, exc)

    def _resync(self) -> None:
        try:
            self._persisted = list(self.store.list_blocks(self.section_id))
        except StoreError as exc:
            log.warning("Reloading blocks of section %s failed: %s", self.section_id, exc)

    def _mutation_failed(self, message: str, exc: Exception) -> MutationError:
        self.error = message
        log.warning("Section %s: %s (%s)", self.section_id, message, exc)
        return MutationError(message)

    def _record(
        self,
        before: Sequence[ContentBlock],
        after: Sequence[ContentBlock],
        before_title: Optional[str] = None,
        after_title: Optional[str] = None,
    ) -> bool:
        if self.on_history is None:
            return False
        before_snapshot = build_snapshot(self.title if before_title is None else before_title, before)
        after_snapshot = build_snapshot(self.title if after_title is None else after_title, after)
        if before_snapshot == after_snapshot:
            return False
        self.on_history(before_snapshot, after_snapshot)
        return True
