# ecogest/services/schedule_service.py
from typing import Any, Dict
from uuid import UUID

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ValidationError
from ..models import Schedule, LessonLog
from .base_service import BaseService


def _check_times(data: Dict[str, Any]):
    start, end = data.get("start_time"), data.get("end_time")
    if start and end and end <= start:
        raise ValidationError("end_time must be after start_time", field="end_time")


class ScheduleService(BaseService[Schedule]):
    resource_name = "Schedule"

    def __init__(self, db: AsyncSession):
        super().__init__(Schedule, db)

    async def create_slot(self, school_id: UUID, data: Dict[str, Any]) -> Schedule:
        _check_times(data)
        clash = await self.find_clash(school_id, data)
        if clash:
            raise ValidationError("Class already has a slot at this time", field="start_time")
        return await self.create({**data, "school_id": school_id})

    async def find_clash(self, school_id: UUID, data: Dict[str, Any]):
        stmt = select(Schedule).where(
            Schedule.school_id == school_id,
            Schedule.class_id == data["class_id"],
            Schedule.day_of_week == data["day_of_week"],
            Schedule.is_deleted.is_(False),
            and_(Schedule.start_time < data["end_time"], Schedule.end_time > data["start_time"]),
        )
        return (await self.db.execute(stmt)).scalars().first()

    async def week_for_class(self, school_id: UUID, class_id: UUID):
        stmt = select(Schedule).where(
            Schedule.school_id == school_id, Schedule.class_id == class_id, Schedule.is_deleted.is_(False)
        ).order_by(Schedule.day_of_week, Schedule.start_time)
        return (await self.db.execute(stmt)).scalars().all()


class LessonLogService(BaseService[LessonLog]):
    resource_name = "Lesson log"

    def __init__(self, db: AsyncSession):
        super().__init__(LessonLog, db)

    async def create_log(self, school_id: UUID, data: Dict[str, Any]) -> LessonLog:
        _check_times(data)
        return await self.create({**data, "school_id": school_id})
