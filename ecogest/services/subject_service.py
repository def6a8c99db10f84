# ecogest/services/subject_service.py
from uuid import UUID

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Subject
from .base_service import BaseService


class SubjectService(BaseService[Subject]):
    resource_name = "Subject"

    def __init__(self, db: AsyncSession):
        super().__init__(Subject, db)

    async def for_class(self, school_id: UUID, class_id: UUID):
        """Subjects of a class plus the school-wide ones (no class)."""
        stmt = select(Subject).where(
            Subject.school_id == school_id,
            Subject.is_deleted.is_(False),
            or_(Subject.class_id == class_id, Subject.class_id.is_(None)),
        ).order_by(Subject.name)
        return (await self.db.execute(stmt)).scalars().all()
