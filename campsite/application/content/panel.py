# campsite/application/content/panel.py
from typing import Tuple

from flask import current_app

from campsite.editor.blocks import DEFAULT_ALLOWED_TYPES
from campsite.editor.errors import BlockNotFound
from campsite.editor.panel import SectionPanel
from campsite.editor.sections import Actor, ContentSection
from campsite.extensions import db
from campsite.models.block import Block
from campsite.services import SqlBlockStore, SqlSectionStore


def allowed_block_types(page_section_id: str):
    regions = current_app.config.get("PAGE_SECTION_BLOCK_TYPES") or {}
    default = current_app.config.get("DEFAULT_BLOCK_TYPES") or DEFAULT_ALLOWED_TYPES
    return tuple(regions.get(page_section_id) or default)


def panel_for(actor: Actor, page_section_id: str) -> SectionPanel:
    """A loaded panel for one page region, acting as ``actor``."""
    panel = SectionPanel(
        page_section_id,
        SqlBlockStore(),
        SqlSectionStore(),
        actor,
        allowed_block_types=allowed_block_types(page_section_id),
    )
    panel.load()
    return panel


def panel_for_section(actor: Actor, section_id: str) -> Tuple[SectionPanel, ContentSection]:
    section = SqlSectionStore().get_section(section_id)
    panel = panel_for(actor, section.page_section_id)
    return panel, panel.section(section.id)


def section_id_of_block(block_id: str) -> str:
    block = db.session.get(Block, block_id)
    if block is None:
        raise BlockNotFound()
    return block.section_id
