"""Tags attachable to lesson comments."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint, Uuid

from app.db.session import Base


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, unique=True)
    color = Column(String(7), nullable=False)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)


class CommentTag(Base):
    __tablename__ = "comment_tags"
    __table_args__ = (UniqueConstraint("comment_id", "tag_id", name="uq_comment_tag"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    comment_id = Column(Uuid(as_uuid=True), ForeignKey("comments.id", ondelete="CASCADE"), nullable=False)
    tag_id = Column(Uuid(as_uuid=True), ForeignKey("tags.id", ondelete="CASCADE"), nullable=False)
