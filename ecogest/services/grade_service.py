# ecogest/services/grade_service.py
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError, ValidationError
from ..models import Grade, Student, Subject
from ..utils.grade_utils import validate_grade_value
from ..utils.visibility import filter_published, sees_only_published
from .base_service import BaseService
from .exam_service import ExamService

logger = logging.getLogger(__name__)


class GradeService(BaseService[Grade]):
    resource_name = "Grade"

    def __init__(self, db: AsyncSession):
        super().__init__(Grade, db)

    def _validate(self, data: Dict[str, Any]):
        max_grade = float(data.get("max_grade") or 20)
        error = validate_grade_value(float(data["grade_value"]), max_grade)
        if error:
            raise ValidationError(error, field="grade_value")

    async def _check_refs(self, school_id: UUID, student_id: UUID, subject_id: UUID):
        student = await self.db.execute(
            select(Student.id).where(Student.id == student_id, Student.school_id == school_id)
        )
        if student.scalar_one_or_none() is None:
            raise NotFoundError("Student", student_id)
        subject = await self.db.execute(
            select(Subject.id).where(Subject.id == subject_id, Subject.school_id == school_id)
        )
        if subject.scalar_one_or_none() is None:
            raise NotFoundError("Subject", subject_id)

    async def create_grade(self, school_id: UUID, data: Dict[str, Any], created_by: Optional[UUID] = None) -> Grade:
        self._validate(data)
        await self._check_refs(school_id, data["student_id"], data["subject_id"])
        return await self.create({**data, "school_id": school_id, "created_by": created_by})

    async def update_grade(self, school_id: UUID, grade_id: UUID, changes: Dict[str, Any]) -> Grade:
        grade = await self.get_or_404(grade_id, school_id)
        merged = {
            "grade_value": changes.get("grade_value", grade.grade_value),
            "max_grade": changes.get("max_grade", grade.max_grade),
        }
        self._validate(merged)
        return await self.update(grade_id, changes, school_id)

    async def bulk_upsert(self, school_id: UUID, rows: List[Dict[str, Any]], created_by: Optional[UUID] = None) -> Dict[str, int]:
        """Save a grid of grades, replacing the value of an existing
        (student, subject, exam, exam_type, semester) entry."""
        created, updated = 0, 0
        for data in rows:
            self._validate(data)
            await self._check_refs(school_id, data["student_id"], data["subject_id"])
            stmt = select(Grade).where(
                Grade.school_id == school_id,
                Grade.student_id == data["student_id"],
                Grade.subject_id == data["subject_id"],
                Grade.exam_type == data.get("exam_type", "devoir"),
                Grade.is_deleted.is_(False),
            )
            for key in ("exam_id", "semester"):
                value = data.get(key)
                column = getattr(Grade, key)
                stmt = stmt.where(column.is_(None) if value is None else column == value)
            existing = (await self.db.execute(stmt)).scalars().first()

            if existing:
                for key, value in data.items():
                    setattr(existing, key, value)
                updated += 1
            else:
                self.db.add(Grade(**data, school_id=school_id, created_by=created_by))
                created += 1

        await self._commit()
        logger.info("Saved %d new and %d updated grades for school %s", created, updated, school_id)
        return {"created": created, "updated": updated}

    async def list_grades(
        self,
        school_id: UUID,
        role: str,
        student_ids: Optional[List[UUID]] = None,
        subject_id: Optional[UUID] = None,
        exam_id: Optional[UUID] = None,
        semester: Optional[str] = None,
    ) -> List[Grade]:
        """Grades matching the filters; students and parents only get
        grades of published exams."""
        stmt = select(Grade).where(Grade.school_id == school_id, Grade.is_deleted.is_(False))
        if student_ids is not None:
            stmt = stmt.where(Grade.student_id.in_(student_ids))
        if subject_id:
            stmt = stmt.where(Grade.subject_id == subject_id)
        if exam_id:
            stmt = stmt.where(Grade.exam_id == exam_id)
        if semester:
            stmt = stmt.where(Grade.semester == semester)
        grades = (await self.db.execute(stmt.order_by(Grade.created_at))).scalars().all()

        if sees_only_published(role):
            published = await ExamService(self.db).published_ids(school_id)
            grades = filter_published(grades, published)
        return list(grades)
