# ecogest/routers/exams.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError
from ..models import Exam, Profile
from ..schemas.academic_schemas import ExamCreate, ExamUpdate
from ..services.exam_service import ExamService
from ..utils.visibility import sees_only_published
from .deps import get_current_profile, require_staff

router = APIRouter(prefix="/api/v1/exams", tags=["Exams"])


def format_exam(exam: Exam) -> dict:
    return {
        "id": str(exam.id),
        "class_id": str(exam.class_id),
        "subject_id": str(exam.subject_id) if exam.subject_id else None,
        "teacher_id": str(exam.teacher_id) if exam.teacher_id else None,
        "title": exam.title,
        "description": exam.description,
        "exam_date": exam.exam_date.isoformat() if exam.exam_date else None,
        "semester": exam.semester,
        "total_points": exam.total_points,
        "is_published": exam.is_published,
    }


@router.get("/", response_model=dict)
async def get_exams(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    class_id: Optional[UUID] = None,
    semester: Optional[str] = None,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    filters = {"class_id": class_id, "semester": semester}
    if sees_only_published(profile.role):
        filters["is_published"] = True
    result = await ExamService(db).get_paginated(
        profile.school_id, page=page, size=size, order_by="exam_date", sort="desc", **filters
    )
    return {**result, "items": [format_exam(e) for e in result["items"]]}


@router.post("/", response_model=dict, status_code=201)
async def create_exam(data: ExamCreate, staff: Profile = Depends(require_staff), db: AsyncSession = Depends(get_db)):
    exam = await ExamService(db).create({**data.model_dump(), "school_id": staff.school_id})
    return {"message": "Exam created successfully", "exam": format_exam(exam)}


@router.put("/{exam_id}", response_model=dict)
async def update_exam(
    exam_id: UUID,
    data: ExamUpdate,
    staff: Profile = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    exam = await ExamService(db).update(exam_id, data.model_dump(exclude_unset=True), staff.school_id)
    if not exam:
        raise NotFoundError("Exam", exam_id)
    return {"message": "Exam updated successfully", "exam": format_exam(exam)}


@router.post("/{exam_id}/publish", response_model=dict)
async def publish_exam(exam_id: UUID, staff: Profile = Depends(require_staff), db: AsyncSession = Depends(get_db)):
    """Make the exam's grades visible to students and parents."""
    exam = await ExamService(db).set_published(staff.school_id, exam_id, True)
    return {"message": "Exam published", "exam": format_exam(exam)}


@router.post("/{exam_id}/unpublish", response_model=dict)
async def unpublish_exam(exam_id: UUID, staff: Profile = Depends(require_staff), db: AsyncSession = Depends(get_db)):
    exam = await ExamService(db).set_published(staff.school_id, exam_id, False)
    return {"message": "Exam unpublished", "exam": format_exam(exam)}


@router.delete("/{exam_id}", response_model=dict)
async def delete_exam(exam_id: UUID, staff: Profile = Depends(require_staff), db: AsyncSession = Depends(get_db)):
    if not await ExamService(db).soft_delete(exam_id, staff.school_id):
        raise NotFoundError("Exam", exam_id)
    return {"message": "Exam deleted successfully"}
