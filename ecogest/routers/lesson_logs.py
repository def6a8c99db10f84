# ecogest/routers/lesson_logs.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError, PermissionDenied
from ..models import LessonLog, Profile, UserRole
from ..schemas.academic_schemas import LessonLogCreate, LessonLogUpdate
from ..services.schedule_service import LessonLogService
from ..services.teacher_service import TeacherService
from .deps import require_staff

router = APIRouter(prefix="/api/v1/lesson-logs", tags=["Lesson logs"])


def format_log(log: LessonLog) -> dict:
    return {
        "id": str(log.id),
        "class_id": str(log.class_id),
        "subject_id": str(log.subject_id),
        "teacher_id": str(log.teacher_id) if log.teacher_id else None,
        "lesson_date": log.lesson_date.isoformat(),
        "start_time": log.start_time.strftime("%H:%M") if log.start_time else None,
        "end_time": log.end_time.strftime("%H:%M") if log.end_time else None,
        "topic": log.topic,
        "content": log.content,
        "homework": log.homework,
        "resources": log.resources,
    }


async def _own_teacher_id(staff: Profile, db: AsyncSession) -> Optional[UUID]:
    if staff.role != UserRole.TEACHER.value:
        return None
    teacher = await TeacherService(db).get_by_user(staff.school_id, staff.id)
    if not teacher:
        raise PermissionDenied("No teacher record attached to this account")
    return teacher.id


@router.get("/", response_model=dict)
async def get_lesson_logs(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    class_id: Optional[UUID] = None,
    subject_id: Optional[UUID] = None,
    staff: Profile = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    result = await LessonLogService(db).get_paginated(
        staff.school_id, page=page, size=size, order_by="lesson_date", sort="desc",
        class_id=class_id, subject_id=subject_id,
    )
    return {**result, "items": [format_log(log) for log in result["items"]]}


@router.post("/", response_model=dict, status_code=201)
async def create_lesson_log(data: LessonLogCreate, staff: Profile = Depends(require_staff), db: AsyncSession = Depends(get_db)):
    values = data.model_dump()
    teacher_id = await _own_teacher_id(staff, db)
    if teacher_id:
        values["teacher_id"] = teacher_id
    log = await LessonLogService(db).create_log(staff.school_id, values)
    return {"message": "Lesson log created successfully", "lesson_log": format_log(log)}


@router.put("/{log_id}", response_model=dict)
async def update_lesson_log(
    log_id: UUID,
    data: LessonLogUpdate,
    staff: Profile = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    service = LessonLogService(db)
    log = await service.get_or_404(log_id, staff.school_id)
    teacher_id = await _own_teacher_id(staff, db)
    if teacher_id and log.teacher_id != teacher_id:
        raise PermissionDenied("You can only edit your own lesson logs")
    log = await service.update(log_id, data.model_dump(exclude_unset=True), staff.school_id)
    return {"message": "Lesson log updated successfully", "lesson_log": format_log(log)}


@router.delete("/{log_id}", response_model=dict)
async def delete_lesson_log(log_id: UUID, staff: Profile = Depends(require_staff), db: AsyncSession = Depends(get_db)):
    service = LessonLogService(db)
    log = await service.get_or_404(log_id, staff.school_id)
    teacher_id = await _own_teacher_id(staff, db)
    if teacher_id and log.teacher_id != teacher_id:
        raise PermissionDenied("You can only delete your own lesson logs")
    if not await service.soft_delete(log_id, staff.school_id):
        raise NotFoundError("Lesson log", log_id)
    return {"message": "Lesson log deleted successfully"}
