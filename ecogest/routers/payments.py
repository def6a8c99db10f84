# ecogest/routers/payments.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError
from ..models import Payment, PaymentCategory, Profile, School
from ..schemas.finance_schemas import PaymentCreate, PaymentUpdate, PaymentCategoryCreate, PaymentCategoryUpdate
from ..services.payment_service import PaymentService, PaymentCategoryService
from ..utils.bulletin_pdf import payment_receipt_pdf
from .deps import get_current_school, require_admin
from .results import pdf_response, school_header

router = APIRouter(prefix="/api/v1/payments", tags=["Payments"])


def format_payment(payment: Payment) -> dict:
    return {
        "id": str(payment.id),
        "student_id": str(payment.student_id),
        "amount": float(payment.amount),
        "payment_type": payment.payment_type,
        "payment_method": payment.payment_method,
        "payment_month": payment.payment_month,
        "payment_date": payment.payment_date.isoformat() if payment.payment_date else None,
        "paid_by": payment.paid_by,
        "phone_number": payment.phone_number,
    }


def format_category(category: PaymentCategory) -> dict:
    return {
        "id": str(category.id),
        "name": category.name,
        "amount": float(category.amount),
        "due_date": category.due_date.isoformat() if category.due_date else None,
        "is_recurring": category.is_recurring,
        "description": category.description,
    }


# Categories are declared before /{payment_id} so the path is not captured
@router.get("/categories", response_model=dict)
async def get_categories(admin: Profile = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    categories = await PaymentCategoryService(db).get_multi(admin.school_id, limit=500)
    return {"items": [format_category(c) for c in categories]}


@router.post("/categories", response_model=dict, status_code=201)
async def create_category(
    data: PaymentCategoryCreate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    category = await PaymentCategoryService(db).create({**data.model_dump(), "school_id": admin.school_id})
    return {"message": "Payment category created successfully", "category": format_category(category)}


@router.put("/categories/{category_id}", response_model=dict)
async def update_category(
    category_id: UUID,
    data: PaymentCategoryUpdate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    category = await PaymentCategoryService(db).update(category_id, data.model_dump(exclude_unset=True), admin.school_id)
    if not category:
        raise NotFoundError("Payment category", category_id)
    return {"message": "Payment category updated successfully", "category": format_category(category)}


@router.delete("/categories/{category_id}", response_model=dict)
async def delete_category(category_id: UUID, admin: Profile = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    if not await PaymentCategoryService(db).soft_delete(category_id, admin.school_id):
        raise NotFoundError("Payment category", category_id)
    return {"message": "Payment category deleted successfully"}


@router.get("/summary", response_model=dict)
async def payment_summary(
    student_id: Optional[UUID] = None,
    payment_month: Optional[str] = None,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await PaymentService(db).summary(admin.school_id, student_id, payment_month)


@router.get("/", response_model=dict)
async def get_payments(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    student_id: Optional[UUID] = None,
    payment_month: Optional[str] = None,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await PaymentService(db).get_paginated(
        admin.school_id, page=page, size=size, order_by="payment_date", sort="desc",
        student_id=student_id, payment_month=payment_month,
    )
    return {**result, "items": [format_payment(p) for p in result["items"]]}


@router.post("/", response_model=dict, status_code=201)
async def create_payment(data: PaymentCreate, admin: Profile = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    payment = await PaymentService(db).record_payment(admin.school_id, data.model_dump(exclude_unset=True))
    return {"message": "Payment recorded successfully", "payment": format_payment(payment)}


@router.put("/{payment_id}", response_model=dict)
async def update_payment(
    payment_id: UUID,
    data: PaymentUpdate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    payment = await PaymentService(db).update(payment_id, data.model_dump(exclude_unset=True), admin.school_id)
    if not payment:
        raise NotFoundError("Payment", payment_id)
    return {"message": "Payment updated successfully", "payment": format_payment(payment)}


@router.delete("/{payment_id}", response_model=dict)
async def delete_payment(payment_id: UUID, admin: Profile = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    if not await PaymentService(db).soft_delete(payment_id, admin.school_id):
        raise NotFoundError("Payment", payment_id)
    return {"message": "Payment deleted successfully"}


@router.get("/{payment_id}/receipt.pdf")
async def payment_receipt(
    payment_id: UUID,
    admin: Profile = Depends(require_admin),
    school: School = Depends(get_current_school),
    db: AsyncSession = Depends(get_db),
):
    payment = await PaymentService(db).get_or_404(payment_id, admin.school_id)
    student = payment.student
    content = payment_receipt_pdf(
        school_header(school),
        format_payment(payment),
        {"name": student.full_name, "student_number": student.student_number},
    )
    return pdf_response(content, f"receipt_{payment.id}.pdf")
