# ecogest/services/exam_service.py
import logging
from typing import Set
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Exam
from .base_service import BaseService

logger = logging.getLogger(__name__)


class ExamService(BaseService[Exam]):
    resource_name = "Exam"

    def __init__(self, db: AsyncSession):
        super().__init__(Exam, db)

    async def set_published(self, school_id: UUID, exam_id: UUID, published: bool) -> Exam:
        exam = await self.get_or_404(exam_id, school_id)
        exam.is_published = published
        await self._commit()
        await self.db.refresh(exam)
        logger.info("Exam %s %s", exam_id, "published" if published else "unpublished")
        return exam

    async def published_ids(self, school_id: UUID) -> Set[UUID]:
        stmt = select(Exam.id).where(
            Exam.school_id == school_id, Exam.is_published.is_(True), Exam.is_deleted.is_(False)
        )
        return set((await self.db.execute(stmt)).scalars().all())
