# ecogest/routers/subjects.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError
from ..models import Profile, Subject
from ..schemas.academic_schemas import SubjectCreate, SubjectUpdate
from ..services.subject_service import SubjectService
from .deps import get_current_profile, require_admin

router = APIRouter(prefix="/api/v1/subjects", tags=["Subjects"])


def format_subject(subject: Subject) -> dict:
    return {
        "id": str(subject.id),
        "class_id": str(subject.class_id) if subject.class_id else None,
        "name": subject.name,
        "abbreviation": subject.abbreviation,
        "code": subject.code,
        "coefficient": float(subject.coefficient) if subject.coefficient is not None else 1.0,
        "max_score": subject.max_score,
        "hours_per_week": subject.hours_per_week,
        "color": subject.color,
    }


@router.get("/", response_model=dict)
async def get_subjects(
    class_id: Optional[UUID] = None,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    service = SubjectService(db)
    if class_id:
        subjects = await service.for_class(profile.school_id, class_id)
    else:
        subjects = await service.get_multi(profile.school_id, limit=500)
    return {"items": [format_subject(s) for s in subjects]}


@router.post("/", response_model=dict, status_code=201)
async def create_subject(data: SubjectCreate, admin: Profile = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    subject = await SubjectService(db).create({**data.model_dump(), "school_id": admin.school_id})
    return {"message": "Subject created successfully", "subject": format_subject(subject)}


@router.put("/{subject_id}", response_model=dict)
async def update_subject(
    subject_id: UUID,
    data: SubjectUpdate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    subject = await SubjectService(db).update(subject_id, data.model_dump(exclude_unset=True), admin.school_id)
    if not subject:
        raise NotFoundError("Subject", subject_id)
    return {"message": "Subject updated successfully", "subject": format_subject(subject)}


@router.delete("/{subject_id}", response_model=dict)
async def delete_subject(subject_id: UUID, admin: Profile = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    if not await SubjectService(db).soft_delete(subject_id, admin.school_id):
        raise NotFoundError("Subject", subject_id)
    return {"message": "Subject deleted successfully"}
