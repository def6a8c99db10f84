# ecogest/routers/schedules.py
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError, ValidationError
from ..models import Profile, Schedule
from ..schemas.academic_schemas import ScheduleCreate, ScheduleUpdate
from ..services.schedule_service import ScheduleService
from .deps import get_current_profile, require_admin

router = APIRouter(prefix="/api/v1/schedules", tags=["Schedules"])

DAY_NAMES = {1: "Lundi", 2: "Mardi", 3: "Mercredi", 4: "Jeudi", 5: "Vendredi", 6: "Samedi", 7: "Dimanche"}


def format_slot(slot: Schedule) -> dict:
    return {
        "id": str(slot.id),
        "class_id": str(slot.class_id),
        "subject_id": str(slot.subject_id) if slot.subject_id else None,
        "teacher_id": str(slot.teacher_id) if slot.teacher_id else None,
        "day_of_week": slot.day_of_week,
        "day_name": DAY_NAMES.get(slot.day_of_week),
        "start_time": slot.start_time.strftime("%H:%M"),
        "end_time": slot.end_time.strftime("%H:%M"),
        "room": slot.room,
        "activity_name": slot.activity_name,
    }


@router.get("/classes/{class_id}", response_model=dict)
async def class_week(class_id: UUID, profile: Profile = Depends(get_current_profile), db: AsyncSession = Depends(get_db)):
    """Weekly timetable of a class, grouped by day."""
    slots = await ScheduleService(db).week_for_class(profile.school_id, class_id)
    days = {}
    for slot in slots:
        days.setdefault(slot.day_of_week, []).append(format_slot(slot))
    return {"class_id": str(class_id), "days": days, "total": len(slots)}


@router.post("/", response_model=dict, status_code=201)
async def create_slot(data: ScheduleCreate, admin: Profile = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    slot = await ScheduleService(db).create_slot(admin.school_id, data.model_dump())
    return {"message": "Schedule slot created successfully", "slot": format_slot(slot)}


@router.put("/{slot_id}", response_model=dict)
async def update_slot(
    slot_id: UUID,
    data: ScheduleUpdate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    service = ScheduleService(db)
    slot = await service.get_or_404(slot_id, admin.school_id)
    changes = data.model_dump(exclude_unset=True)

    merged = {
        "class_id": slot.class_id,
        "day_of_week": changes.get("day_of_week", slot.day_of_week),
        "start_time": changes.get("start_time", slot.start_time),
        "end_time": changes.get("end_time", slot.end_time),
    }
    if merged["end_time"] <= merged["start_time"]:
        raise ValidationError("end_time must be after start_time", field="end_time")
    clash = await service.find_clash(admin.school_id, merged)
    if clash and clash.id != slot.id:
        raise ValidationError("Class already has a slot at this time", field="start_time")

    slot = await service.update(slot_id, changes, admin.school_id)
    return {"message": "Schedule slot updated successfully", "slot": format_slot(slot)}


@router.delete("/{slot_id}", response_model=dict)
async def delete_slot(slot_id: UUID, admin: Profile = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    if not await ScheduleService(db).soft_delete(slot_id, admin.school_id):
        raise NotFoundError("Schedule", slot_id)
    return {"message": "Schedule slot deleted successfully"}
