# ecogest/models/shared/subscription.py
import enum
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Uuid, JSON, Index
from sqlalchemy.orm import relationship
from ..base import Base


class SubscriptionStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    CANCELED = "canceled"
    EXPIRED = "expired"


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


class SubscriptionPlan(Base):
    __tablename__ = "subscription_plans"

    code = Column(String(50), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False)
    price = Column(Integer, nullable=False)  # centimes, divided by 100 for checkout
    currency = Column(String(3), nullable=False, default="XOF")
    period = Column(String(10), nullable=False, default="monthly")
    max_students = Column(Integer)
    max_classes = Column(Integer)
    features = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)


class Subscription(Base):
    __tablename__ = "subscriptions"

    school_id = Column(Uuid(as_uuid=True), ForeignKey("schools.id"), nullable=False, index=True)
    plan_id = Column(Uuid(as_uuid=True), ForeignKey("subscription_plans.id"), nullable=False)
    status = Column(String(20), nullable=False, default=SubscriptionStatus.PENDING.value, index=True)
    amount = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False, default="XOF")
    start_date = Column(DateTime(timezone=True))
    end_date = Column(DateTime(timezone=True), index=True)
    gateway_reference = Column(String(100), index=True)

    plan = relationship("SubscriptionPlan", lazy="selectin")
    transactions = relationship("PaymentTransaction", back_populates="subscription")


class PaymentTransaction(Base):
    __tablename__ = "payment_transactions"

    school_id = Column(Uuid(as_uuid=True), ForeignKey("schools.id"), nullable=False, index=True)
    subscription_id = Column(Uuid(as_uuid=True), ForeignKey("subscriptions.id"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False, default="XOF")
    status = Column(String(20), nullable=False, default=TransactionStatus.PENDING.value)
    gateway_reference = Column(String(100))
    gateway_token = Column(String(200))
    gateway_response = Column(JSON)

    subscription = relationship("Subscription", back_populates="transactions")

    __table_args__ = (
        Index("idx_transaction_reference", "gateway_reference"),
    )
