"""Parent: optional payer grouping one or more students."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db.session import Base


class Parent(Base):
    __tablename__ = "parents"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    email = Column(String(255), nullable=True, unique=True)
    phone_number = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    students = relationship("Student", back_populates="parent", passive_deletes=True)
