# campsite/services/block_store.py
from flask import current_app

from campsite.domain.invariants.block import assert_block, assert_block_width
from campsite.editor.errors import BlockNotFound, SectionNotFound, StoreError, ValidationError
from campsite.editor.store import BlockStore
from campsite.extensions import db
from campsite.models.base import utc_now
from campsite.models.block import Block
from campsite.models.section import Section
from campsite.normalizers.block import block_from_row
from campsite.utils.media import FILE_EXTENSIONS, IMAGE_EXTENSIONS, delete_file, save_file
from .base import store_call

UPDATABLE_FIELDS = {"content", "image_url", "width", "order_index"}


class SqlBlockStore(BlockStore):
    """
    Blocks in the database, blobs on the upload folder.

    Every block mutation also bumps the owning section's ``updated_at`` so
    If-Unmodified-Since checks on the section see block edits.
    """

    def list_blocks(self, section_id):
        with store_call("Listing blocks"):
            rows = (
                Block.query
                .filter_by(section_id=section_id)
                .order_by(Block.order_index.asc(), Block.created_at.asc())
                .all()
            )
            blocks = [block_from_row(row) for row in rows]
        return blocks

    def create_block(self, section_id, type, *, content=None, image_url=None, width=12, order_index):
        with store_call("Creating block"):
            section = db.session.get(Section, section_id)
            if section is None:
                raise SectionNotFound()

            block = Block()
            block.section_id = section.id
            block.type = type
            block.content = content
            block.image_url = image_url
            block.width = width
            block.order_index = order_index
            assert_block(block)

            db.session.add(block)
            section.updated_at = utc_now()

        return block_from_row(block)

    def update_block(self, block_id, **fields):
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields not updatable: {', '.join(sorted(unknown))}")
        if "width" in fields:
            assert_block_width(fields["width"])

        with store_call("Updating block"):
            block = db.session.get(Block, block_id)
            if block is None:
                raise BlockNotFound()

            for field, value in fields.items():
                setattr(block, field, value)
            block.section.updated_at = utc_now()

        return block_from_row(block)

    def delete_block(self, block_id):
        with store_call("Deleting block"):
            block = db.session.get(Block, block_id)
            if block is None:
                return
            block.section.updated_at = utc_now()
            db.session.delete(block)

    # ------------------------
    # Blobs
    # ------------------------
    def upload_image(self, section_id, file):
        max_bytes = current_app.config.get("MAX_IMAGE_MB", 10) * 1024 * 1024
        return self._save(file, folder=section_id, extensions=IMAGE_EXTENSIONS, max_bytes=max_bytes)

    def upload_file(self, section_id, file):
        max_bytes = current_app.config.get("MAX_FILE_MB", 50) * 1024 * 1024
        return self._save(file, folder=f"{section_id}/files", extensions=FILE_EXTENSIONS, max_bytes=max_bytes)

    def _save(self, file, **options):
        try:
            return save_file(file, **options)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        except OSError as exc:
            current_app.logger.error(f"Upload failed: {exc}")
            raise StoreError("Upload failed") from exc

    def delete_blob(self, url):
        try:
            delete_file(url)
        except OSError as exc:
            raise StoreError(f"Could not delete {url}") from exc
