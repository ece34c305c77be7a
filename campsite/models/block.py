# campsite/models/block.py
from campsite.extensions import db
from .base import BaseModel


class Block(BaseModel):
    __tablename__ = "content_blocks"

    section_id = db.Column(
        db.String(36),
        db.ForeignKey("content_sections.id", ondelete="CASCADE"),
        nullable=False,
    )
    type = db.Column(db.String(20), nullable=False)  # heading, text, image, link, file, gallery
    content = db.Column(db.Text, nullable=True)  # HTML, link label or gallery JSON
    image_url = db.Column(db.String(512), nullable=True)  # image, link target or attachment
    width = db.Column(db.Integer, nullable=False, default=12)
    order_index = db.Column(db.Integer, nullable=False, default=1)

    section = db.relationship("Section", back_populates="blocks")

    # No unique (section_id, order_index): a commit passes through duplicate orders
    __table_args__ = (
        db.Index("idx_block_section_order", "section_id", "order_index"),
    )
