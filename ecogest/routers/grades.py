# ecogest/routers/grades.py
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError, PermissionDenied
from ..models import Grade, Profile, UserRole
from ..schemas.academic_schemas import GradeCreate, GradeUpdate, GradeBulk
from ..services.grade_service import GradeService
from ..services.student_service import StudentService
from .deps import get_current_profile, require_staff

router = APIRouter(prefix="/api/v1/grades", tags=["Grades"])


def format_grade(grade: Grade) -> dict:
    return {
        "id": str(grade.id),
        "student_id": str(grade.student_id),
        "subject_id": str(grade.subject_id),
        "exam_id": str(grade.exam_id) if grade.exam_id else None,
        "exam_type": grade.exam_type,
        "semester": grade.semester,
        "grade_value": float(grade.grade_value),
        "max_grade": float(grade.max_grade),
        "coefficient": float(grade.coefficient) if grade.coefficient is not None else None,
    }


async def readable_student_ids(profile: Profile, db: AsyncSession) -> Optional[List[UUID]]:
    """Students whose grades the caller may read; None means the whole school."""
    service = StudentService(db)
    if profile.role == UserRole.STUDENT.value:
        student = await service.get_by_user(profile.school_id, profile.id)
        return [student.id] if student else []
    if profile.role == UserRole.PARENT.value:
        children = await service.get_children(profile.school_id, profile.matricule)
        return [child.id for child in children]
    return None


@router.get("/", response_model=dict)
async def get_grades(
    student_id: Optional[UUID] = None,
    subject_id: Optional[UUID] = None,
    exam_id: Optional[UUID] = None,
    semester: Optional[str] = None,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    allowed = await readable_student_ids(profile, db)
    if student_id:
        if allowed is not None and student_id not in allowed:
            raise PermissionDenied("You cannot view this student's grades")
        student_ids = [student_id]
    else:
        student_ids = allowed

    grades = await GradeService(db).list_grades(
        profile.school_id, profile.role, student_ids=student_ids,
        subject_id=subject_id, exam_id=exam_id, semester=semester,
    )
    return {"items": [format_grade(g) for g in grades], "total": len(grades)}


@router.post("/", response_model=dict, status_code=201)
async def create_grade(data: GradeCreate, staff: Profile = Depends(require_staff), db: AsyncSession = Depends(get_db)):
    grade = await GradeService(db).create_grade(staff.school_id, data.model_dump(), created_by=staff.id)
    return {"message": "Grade saved successfully", "grade": format_grade(grade)}


@router.post("/bulk", response_model=dict)
async def save_grades(data: GradeBulk, staff: Profile = Depends(require_staff), db: AsyncSession = Depends(get_db)):
    """Save a grade sheet; existing entries are overwritten."""
    rows = [g.model_dump() for g in data.grades]
    return await GradeService(db).bulk_upsert(staff.school_id, rows, created_by=staff.id)


@router.put("/{grade_id}", response_model=dict)
async def update_grade(
    grade_id: UUID,
    data: GradeUpdate,
    staff: Profile = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    grade = await GradeService(db).update_grade(staff.school_id, grade_id, data.model_dump(exclude_unset=True))
    return {"message": "Grade updated successfully", "grade": format_grade(grade)}


@router.delete("/{grade_id}", response_model=dict)
async def delete_grade(grade_id: UUID, staff: Profile = Depends(require_staff), db: AsyncSession = Depends(get_db)):
    if not await GradeService(db).soft_delete(grade_id, staff.school_id):
        raise NotFoundError("Grade", grade_id)
    return {"message": "Grade deleted successfully"}
