"""Lesson comment. visible_to_student controls what the public student portal returns."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import relationship

from app.db.session import Base


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    lesson_id = Column(Uuid(as_uuid=True), ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    visible_to_student = Column(Integer, nullable=False, default=0)  # 0 | 1
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)
    last_edited = Column(DateTime(timezone=True), nullable=True)

    lesson = relationship("Lesson", back_populates="comments")
    tags = relationship("Tag", secondary="comment_tags", order_by="Tag.name")
