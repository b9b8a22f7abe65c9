"""Payment from a student or parent, linked to the lessons it covers."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.db.session import Base


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    payer_type = Column(String(20), nullable=False)  # student | parent
    # students.id or parents.id depending on payer_type
    payer_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_date = Column(DateTime(timezone=True), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    lesson_links = relationship("PaymentLesson", back_populates="payment", cascade="all, delete-orphan", passive_deletes=True)


class PaymentLesson(Base):
    __tablename__ = "payment_lessons"
    __table_args__ = (UniqueConstraint("payment_id", "lesson_id", name="uq_payment_lesson"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    payment_id = Column(Uuid(as_uuid=True), ForeignKey("payments.id", ondelete="CASCADE"), nullable=False, index=True)
    lesson_id = Column(Uuid(as_uuid=True), ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False)

    payment = relationship("Payment", back_populates="lesson_links")
