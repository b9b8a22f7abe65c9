"""Student with default lesson attributes. student_id is the public 6-digit identifier."""

import uuid

from sqlalchemy import Column, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db.session import Base

DEFAULT_STUDENT_COLOR = "#3b82f6"


class Student(Base):
    __tablename__ = "students"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Public 6-digit id shared with the student for the read-only portal; never used for joins
    student_id = Column(String(6), nullable=False, unique=True, index=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text, nullable=True)
    email = Column(String(255), nullable=True, unique=True)
    phone_number = Column(String(50), nullable=True)
    default_subject = Column(Text, nullable=False)
    default_rate = Column(Numeric(10, 2), nullable=False)
    default_link = Column(Text, nullable=False)
    default_color = Column(String(7), nullable=False, default=DEFAULT_STUDENT_COLOR)
    parent_id = Column(Uuid(as_uuid=True), ForeignKey("parents.id", ondelete="SET NULL"), nullable=True)

    parent = relationship("Parent", back_populates="students")
    lessons = relationship("Lesson", back_populates="student", passive_deletes=True)
    notes = relationship("Note", back_populates="student", passive_deletes=True)
