# ecogest/services/teacher_service.py
import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import EcoGestException, NotFoundError, ValidationError
from ..core.logging import sanitize_for_log
from ..models import School, Teacher
from ..utils.identifiers import build_display_email
from .account_service import AccountService
from .base_service import BaseService

logger = logging.getLogger(__name__)


class TeacherService(BaseService[Teacher]):
    resource_name = "Teacher"

    def __init__(self, db: AsyncSession):
        super().__init__(Teacher, db)
        self.accounts = AccountService(db)

    async def create_teacher(self, school: School, data: Dict[str, Any]) -> Tuple[Teacher, List[str]]:
        auto = school.auto_generates("teacher")
        if not data.get("employee_number"):
            if not auto:
                raise ValidationError("employee_number is required when matricules are not auto-generated",
                                      field="employee_number")
            issued = await self.accounts.identifiers.issue(school, "teacher", source="teacher_creation")
            data["employee_number"] = issued["matricule"]

        teacher = await self.create({**data, "school_id": school.id})
        warnings = []
        if auto:
            warning = await self._open_account(school, teacher)
            if warning:
                warnings.append(warning)
        return teacher, warnings

    async def _open_account(self, school: School, teacher: Teacher) -> Optional[str]:
        teacher_id = teacher.id
        try:
            profile = await self.accounts.create_account(
                school,
                build_display_email(teacher.employee_number, school.school_suffix),
                school.default_password("teacher"),
                "teacher",
                teacher.first_name,
                teacher.last_name,
                phone=teacher.phone,
                commit=False,
            )
            teacher.user_id = profile.id
            await self.db.commit()
        except (EcoGestException, SQLAlchemyError) as e:
            await self.db.rollback()
            await self.db.refresh(school)
            await self.db.refresh(teacher)
            detail = e.detail if isinstance(e, EcoGestException) else "database error"
            logger.warning("Teacher %s saved without account: %s", teacher_id, sanitize_for_log(detail))
            return f"Teacher saved but the login account could not be created: {detail}"
        return None

    async def update_teacher(self, school_id: UUID, teacher_id: UUID, changes: Dict[str, Any]) -> Teacher:
        teacher = await self.update(teacher_id, changes, school_id)
        if not teacher:
            raise NotFoundError("Teacher", teacher_id)
        return teacher

    async def get_by_user(self, school_id: UUID, user_id: UUID) -> Optional[Teacher]:
        stmt = select(Teacher).where(Teacher.school_id == school_id, Teacher.user_id == user_id,
                                     Teacher.is_deleted.is_(False))
        return (await self.db.execute(stmt)).scalar_one_or_none()
