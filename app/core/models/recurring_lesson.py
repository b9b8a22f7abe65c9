"""Recurring lesson marker: links a template lesson to a frequency and end date."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from app.db.session import Base


class RecurringLesson(Base):
    __tablename__ = "recurring_lessons"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    template_lesson_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("lessons.id", ondelete="CASCADE"),
        nullable=False,
    )
    frequency = Column(String(20), nullable=False)  # weekly | biweekly
    end_date = Column(DateTime(timezone=True), nullable=True)

    template_lesson = relationship("Lesson")
