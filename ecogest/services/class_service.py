# ecogest/services/class_service.py
from typing import Any, Dict, List
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import ClassModel, Student
from .base_service import BaseService


class ClassService(BaseService[ClassModel]):
    resource_name = "Class"

    def __init__(self, db: AsyncSession):
        super().__init__(ClassModel, db)

    async def headcounts(self, school_id: UUID, class_ids: List[UUID]) -> Dict[UUID, int]:
        """Active students per class (the class "effectif")."""
        if not class_ids:
            return {}
        stmt = (
            select(Student.class_id, func.count())
            .where(
                Student.school_id == school_id,
                Student.class_id.in_(class_ids),
                Student.is_active.is_(True),
                Student.is_deleted.is_(False),
            )
            .group_by(Student.class_id)
        )
        counts = {class_id: count for class_id, count in (await self.db.execute(stmt)).all()}
        return {class_id: counts.get(class_id, 0) for class_id in class_ids}

    async def get_with_headcount(self, school_id: UUID, class_id: UUID) -> Dict[str, Any]:
        class_obj = await self.get_or_404(class_id, school_id)
        counts = await self.headcounts(school_id, [class_obj.id])
        return {"class": class_obj, "effectif": counts[class_obj.id]}
