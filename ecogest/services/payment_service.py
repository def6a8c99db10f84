# ecogest/services/payment_service.py
import logging
from datetime import date
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError, ValidationError
from ..models import Payment, PaymentCategory, Student
from .base_service import BaseService

logger = logging.getLogger(__name__)


class PaymentCategoryService(BaseService[PaymentCategory]):
    resource_name = "Payment category"

    def __init__(self, db: AsyncSession):
        super().__init__(PaymentCategory, db)


class PaymentService(BaseService[Payment]):
    resource_name = "Payment"

    def __init__(self, db: AsyncSession):
        super().__init__(Payment, db)

    async def record_payment(self, school_id: UUID, data: Dict[str, Any]) -> Payment:
        if float(data["amount"]) <= 0:
            raise ValidationError("Amount must be greater than zero", field="amount")
        student = await self.db.execute(
            select(Student.id).where(Student.id == data["student_id"], Student.school_id == school_id)
        )
        if student.scalar_one_or_none() is None:
            raise NotFoundError("Student", data["student_id"])

        data.setdefault("payment_date", date.today())
        payment = await self.create({**data, "school_id": school_id})
        logger.info("Recorded payment %s of %s for student %s", payment.id, payment.amount, payment.student_id)
        return payment

    async def summary(self, school_id: UUID, student_id: Optional[UUID] = None,
                      payment_month: Optional[str] = None) -> Dict[str, Any]:
        """Totals by payment type."""
        stmt = select(Payment.payment_type, func.count(), func.sum(Payment.amount)).where(
            Payment.school_id == school_id, Payment.is_deleted.is_(False)
        )
        if student_id:
            stmt = stmt.where(Payment.student_id == student_id)
        if payment_month:
            stmt = stmt.where(Payment.payment_month == payment_month)
        rows = (await self.db.execute(stmt.group_by(Payment.payment_type))).all()

        by_type = {ptype: {"count": count, "total": float(total or 0)} for ptype, count, total in rows}
        return {
            "by_type": by_type,
            "count": sum(v["count"] for v in by_type.values()),
            "total": sum(v["total"] for v in by_type.values()),
        }
