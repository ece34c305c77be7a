# campsite/models/section.py
from campsite.extensions import db
from .base import BaseModel


class Section(BaseModel):
    __tablename__ = "content_sections"

    page_section_id = db.Column(db.String(100), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)

    owner_id = db.Column(db.String(36), nullable=False, index=True)
    owner_name = db.Column(db.String(200), nullable=False)
    editor_ids = db.Column(db.JSON, nullable=False, default=list)

    show_author = db.Column(db.Boolean, nullable=False, default=False)
    show_publish_date = db.Column(db.Boolean, nullable=False, default=False)
    publish_date = db.Column(db.Date, nullable=True)

    blocks = db.relationship(
        "Block",
        back_populates="section",
        order_by="Block.order_index",
        cascade="all, delete-orphan",
    )
