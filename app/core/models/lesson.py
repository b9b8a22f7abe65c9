"""Lesson: a single scheduled session. Recurring series share series_id (when stamped) or day/time/student."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db.session import Base


class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    subject = Column(Text, nullable=False)
    date_time = Column(DateTime(timezone=True), nullable=False, index=True)
    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    lesson_link = Column(Text, nullable=True)
    price_per_hour = Column(Numeric(10, 2), nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    payment_status = Column(String(20), nullable=False, default="pending")  # pending | paid | unpaid | free | cancelled | overdue
    # RecurringLesson.id of the series this lesson was created for; null for one-off lessons.
    # No FK: the marker may be removed while instances are kept.
    series_id = Column(Uuid(as_uuid=True), nullable=True, index=True)

    student = relationship("Student", back_populates="lessons")
    comments = relationship("Comment", back_populates="lesson", passive_deletes=True)
