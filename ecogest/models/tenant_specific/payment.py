# ecogest/models/tenant_specific/payment.py
import enum
from sqlalchemy import Column, String, Text, Numeric, Date, Boolean, ForeignKey, Uuid, Index
from sqlalchemy.orm import relationship
from ..base import Base


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    WAVE = "wave"
    ORANGE_MONEY = "orange_money"
    FREE_MONEY = "free_money"
    BANK_TRANSFER = "bank_transfer"
    CHEQUE = "cheque"


class PaymentCategory(Base):
    __tablename__ = "payment_categories"

    school_id = Column(Uuid(as_uuid=True), ForeignKey("schools.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False, default=0)
    due_date = Column(Date)
    is_recurring = Column(Boolean, nullable=False, default=False)
    description = Column(Text)


class Payment(Base):
    __tablename__ = "payments"

    school_id = Column(Uuid(as_uuid=True), ForeignKey("schools.id"), nullable=False, index=True)
    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id"), nullable=False, index=True)

    amount = Column(Numeric(12, 2), nullable=False)
    payment_type = Column(String(50), nullable=False, default="tuition")
    payment_method = Column(String(20), nullable=False, default=PaymentMethod.CASH.value)
    payment_month = Column(String(20))
    payment_date = Column(Date, nullable=False)
    paid_by = Column(String(200))
    phone_number = Column(String(20))

    student = relationship("Student", lazy="selectin")

    __table_args__ = (
        Index("idx_payment_student_date", "student_id", "payment_date"),
    )
