# ecogest/routers/teachers.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError
from ..models import Profile, School, Teacher
from ..schemas.people_schemas import TeacherCreate, TeacherUpdate
from ..services.teacher_service import TeacherService
from .deps import get_current_school, require_admin, require_staff

router = APIRouter(prefix="/api/v1/teachers", tags=["Teachers"])


def format_teacher(teacher: Teacher) -> dict:
    return {
        "id": str(teacher.id),
        "user_id": str(teacher.user_id) if teacher.user_id else None,
        "employee_number": teacher.employee_number,
        "first_name": teacher.first_name,
        "last_name": teacher.last_name,
        "phone": teacher.phone,
        "address": teacher.address,
        "specialization": teacher.specialization,
        "hire_date": teacher.hire_date.isoformat() if teacher.hire_date else None,
        "is_active": teacher.is_active,
    }


@router.get("/", response_model=dict)
async def get_teachers(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    is_active: Optional[bool] = None,
    staff: Profile = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    result = await TeacherService(db).get_paginated(
        staff.school_id, page=page, size=size, order_by="last_name", is_active=is_active
    )
    return {**result, "items": [format_teacher(t) for t in result["items"]]}


@router.post("/", response_model=dict, status_code=201)
async def create_teacher(
    data: TeacherCreate,
    admin: Profile = Depends(require_admin),
    school: School = Depends(get_current_school),
    db: AsyncSession = Depends(get_db),
):
    teacher, warnings = await TeacherService(db).create_teacher(school, data.model_dump(exclude_unset=True))
    return {"message": "Teacher created successfully", "teacher": format_teacher(teacher), "warnings": warnings}


@router.get("/{teacher_id}", response_model=dict)
async def get_teacher(teacher_id: UUID, staff: Profile = Depends(require_staff), db: AsyncSession = Depends(get_db)):
    return format_teacher(await TeacherService(db).get_or_404(teacher_id, staff.school_id))


@router.put("/{teacher_id}", response_model=dict)
async def update_teacher(
    teacher_id: UUID,
    data: TeacherUpdate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    teacher = await TeacherService(db).update_teacher(admin.school_id, teacher_id, data.model_dump(exclude_unset=True))
    return {"message": "Teacher updated successfully", "teacher": format_teacher(teacher)}


@router.delete("/{teacher_id}", response_model=dict)
async def delete_teacher(teacher_id: UUID, admin: Profile = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    if not await TeacherService(db).soft_delete(teacher_id, admin.school_id):
        raise NotFoundError("Teacher", teacher_id)
    return {"message": "Teacher deleted successfully"}
