# ecogest/schemas/finance_schemas.py
from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

PAYMENT_METHOD_PATTERN = r'^(cash|wave|orange_money|free_money|bank_transfer|cheque)$'


class PaymentCategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(..., ge=0)
    due_date: Optional[date] = None
    is_recurring: bool = False
    description: Optional[str] = None


class PaymentCategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    amount: Optional[float] = Field(default=None, ge=0)
    due_date: Optional[date] = None
    is_recurring: Optional[bool] = None
    description: Optional[str] = None


class PaymentCreate(BaseModel):
    student_id: UUID
    amount: float = Field(..., gt=0)
    payment_type: str = Field(default="tuition", max_length=50)
    payment_method: str = Field(default="cash", pattern=PAYMENT_METHOD_PATTERN)
    payment_month: Optional[str] = Field(default=None, max_length=20)
    payment_date: Optional[date] = None
    paid_by: Optional[str] = Field(default=None, max_length=200)
    phone_number: Optional[str] = Field(default=None, max_length=20)


class PaymentUpdate(BaseModel):
    amount: Optional[float] = Field(default=None, gt=0)
    payment_type: Optional[str] = Field(default=None, max_length=50)
    payment_method: Optional[str] = Field(default=None, pattern=PAYMENT_METHOD_PATTERN)
    payment_month: Optional[str] = Field(default=None, max_length=20)
    payment_date: Optional[date] = None
    paid_by: Optional[str] = Field(default=None, max_length=200)
    phone_number: Optional[str] = Field(default=None, max_length=20)


class CheckoutRequest(BaseModel):
    plan_code: str = Field(..., min_length=1, max_length=50)
