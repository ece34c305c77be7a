# campsite/models/section_history.py
from campsite.extensions import db
from .base import BaseModel
from sqlalchemy import event


class SectionHistory(BaseModel):
    __tablename__ = "content_section_history"

    __table_args__ = (
        db.Index("ix_history_section_cursor", "section_id", "created_at", "id"),
        db.Index("ix_history_editor_cursor", "editor_id", "created_at", "id"),
    )

    # Plain column: history outlives the section it describes
    section_id = db.Column(db.String(36), nullable=False, index=True)
    editor_id = db.Column(db.String(36), nullable=False, index=True)
    editor_name = db.Column(db.String(200), nullable=False)

    before_snapshot = db.Column(db.Text, nullable=False)
    after_snapshot = db.Column(db.Text, nullable=False)


@event.listens_for(SectionHistory, "before_update")
@event.listens_for(SectionHistory, "before_delete")
def prevent_history_mutation(mapper, connection, target):
    raise RuntimeError("Section history is append-only")
