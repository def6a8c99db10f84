# ecogest/routers/students.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError, PermissionDenied
from ..models import Profile, School, Student, UserRole
from ..schemas.people_schemas import StudentCreate, StudentUpdate
from ..services.student_service import StudentService
from .deps import get_current_profile, get_current_school, require_admin, require_staff

router = APIRouter(prefix="/api/v1/students", tags=["Students"])


def format_student(student: Student) -> dict:
    return {
        "id": str(student.id),
        "class_id": str(student.class_id) if student.class_id else None,
        "user_id": str(student.user_id) if student.user_id else None,
        "student_number": student.student_number,
        "first_name": student.first_name,
        "last_name": student.last_name,
        "date_of_birth": student.date_of_birth.isoformat() if student.date_of_birth else None,
        "place_of_birth": student.place_of_birth,
        "gender": student.gender,
        "address": student.address,
        "phone": student.phone,

        # Parent
        "parent_first_name": student.parent_first_name,
        "parent_last_name": student.parent_last_name,
        "parent_phone": student.parent_phone,
        "parent_email": student.parent_email,
        "parent_matricule": student.parent_matricule,

        "enrollment_date": student.enrollment_date.isoformat() if student.enrollment_date else None,
        "is_active": student.is_active,
        "created_at": student.created_at.isoformat() if student.created_at else None,
    }


@router.get("/", response_model=dict)
async def get_students(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    class_id: Optional[UUID] = None,
    is_active: Optional[bool] = None,
    staff: Profile = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    """Get paginated students of the caller's school"""
    result = await StudentService(db).get_paginated(
        staff.school_id, page=page, size=size, order_by="last_name", class_id=class_id, is_active=is_active
    )
    return {**result, "items": [format_student(s) for s in result["items"]]}


@router.get("/search", response_model=dict)
async def search_students(
    q: str = Query(..., min_length=1),
    staff: Profile = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    students = await StudentService(db).search(staff.school_id, q)
    return {"items": [format_student(s) for s in students]}


@router.post("/", response_model=dict, status_code=201)
async def create_student(
    data: StudentCreate,
    admin: Profile = Depends(require_admin),
    school: School = Depends(get_current_school),
    db: AsyncSession = Depends(get_db),
):
    """Create a student; the login (and the parent's) follow the school settings."""
    student, warnings = await StudentService(db).create_student(school, data.model_dump(exclude_unset=True))
    return {
        "message": "Student created successfully",
        "student": format_student(student),
        "warnings": warnings,
    }


@router.get("/{student_id}", response_model=dict)
async def get_student(
    student_id: UUID,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    student = await StudentService(db).get_or_404(student_id, profile.school_id)
    if profile.role == UserRole.STUDENT.value and student.user_id != profile.id:
        raise PermissionDenied("Students can only view their own record")
    if profile.role == UserRole.PARENT.value and student.parent_matricule != profile.matricule:
        raise NotFoundError("Student", student_id)
    return format_student(student)


@router.put("/{student_id}", response_model=dict)
async def update_student(
    student_id: UUID,
    data: StudentUpdate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    student = await StudentService(db).update_student(admin.school_id, student_id, data.model_dump(exclude_unset=True))
    return {"message": "Student updated successfully", "student": format_student(student)}


@router.delete("/{student_id}", response_model=dict)
async def delete_student(student_id: UUID, admin: Profile = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    """Soft delete student"""
    if not await StudentService(db).soft_delete(student_id, admin.school_id):
        raise NotFoundError("Student", student_id)
    return {"message": "Student deleted successfully"}
