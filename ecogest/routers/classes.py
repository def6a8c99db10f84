# ecogest/routers/classes.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError
from ..models import ClassModel, Profile
from ..schemas.academic_schemas import ClassCreate, ClassUpdate
from ..services.class_service import ClassService
from .deps import require_admin, require_staff

router = APIRouter(prefix="/api/v1/classes", tags=["Classes"])


def format_class(class_obj: ClassModel, effectif: Optional[int] = None) -> dict:
    return {
        "id": str(class_obj.id),
        "name": class_obj.name,
        "level": class_obj.level,
        "section": class_obj.section,
        "capacity": class_obj.capacity,
        "academic_year": class_obj.academic_year,
        "effectif": effectif,
    }


@router.get("/", response_model=dict)
async def get_classes(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=100),
    academic_year: Optional[str] = None,
    staff: Profile = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    service = ClassService(db)
    result = await service.get_paginated(staff.school_id, page=page, size=size, order_by="name",
                                         academic_year=academic_year)
    counts = await service.headcounts(staff.school_id, [c.id for c in result["items"]])
    return {**result, "items": [format_class(c, counts.get(c.id, 0)) for c in result["items"]]}


@router.post("/", response_model=dict, status_code=201)
async def create_class(data: ClassCreate, admin: Profile = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    class_obj = await ClassService(db).create({**data.model_dump(), "school_id": admin.school_id})
    return {"message": "Class created successfully", "class": format_class(class_obj, 0)}


@router.get("/{class_id}", response_model=dict)
async def get_class(class_id: UUID, staff: Profile = Depends(require_staff), db: AsyncSession = Depends(get_db)):
    result = await ClassService(db).get_with_headcount(staff.school_id, class_id)
    return format_class(result["class"], result["effectif"])


@router.put("/{class_id}", response_model=dict)
async def update_class(
    class_id: UUID,
    data: ClassUpdate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    class_obj = await ClassService(db).update(class_id, data.model_dump(exclude_unset=True), admin.school_id)
    if not class_obj:
        raise NotFoundError("Class", class_id)
    return {"message": "Class updated successfully", "class": format_class(class_obj)}


@router.delete("/{class_id}", response_model=dict)
async def delete_class(class_id: UUID, admin: Profile = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    if not await ClassService(db).soft_delete(class_id, admin.school_id):
        raise NotFoundError("Class", class_id)
    return {"message": "Class deleted successfully"}
