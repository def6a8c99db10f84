# ecogest/services/student_service.py
import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import EcoGestException, NotFoundError, ValidationError
from ..core.logging import sanitize_for_log
from ..models import School, Student, ClassModel
from ..utils.identifiers import build_display_email
from .account_service import AccountService
from .base_service import BaseService

logger = logging.getLogger(__name__)


class StudentService(BaseService[Student]):
    resource_name = "Student"

    def __init__(self, db: AsyncSession):
        super().__init__(Student, db)
        self.accounts = AccountService(db)

    async def create_student(self, school: School, data: Dict[str, Any]) -> Tuple[Student, List[str]]:
        """Save a student, then open its login and its parent's login.

        Account failures do not undo the student; they come back as warnings.
        """
        if data.get("class_id"):
            await self._check_class(school.id, data["class_id"])

        auto = school.auto_generates("student")
        if not data.get("student_number"):
            if not auto:
                raise ValidationError("student_number is required when matricules are not auto-generated",
                                      field="student_number")
            issued = await self.accounts.identifiers.issue(school, "student", source="student_creation")
            data["student_number"] = issued["matricule"]

        student = await self.create({**data, "school_id": school.id})
        warnings = []

        if auto:
            warning = await self._open_student_account(school, student)
            if warning:
                warnings.append(warning)

        if student.has_parent_details and school.auto_generates("parent") and not student.parent_matricule:
            warning = await self._open_parent_account(school, student)
            if warning:
                warnings.append(warning)

        await self.db.refresh(student)
        return student, warnings

    async def _open_student_account(self, school: School, student: Student) -> Optional[str]:
        student_id = student.id
        try:
            profile = await self.accounts.create_account(
                school,
                build_display_email(student.student_number, school.school_suffix),
                school.default_password("student"),
                "student",
                student.first_name,
                student.last_name,
                phone=student.phone,
                commit=False,
            )
            student.user_id = profile.id
            await self.db.commit()
        except (EcoGestException, SQLAlchemyError) as e:
            await self.db.rollback()
            await self.db.refresh(school)
            await self.db.refresh(student)
            detail = e.detail if isinstance(e, EcoGestException) else "database error"
            logger.warning("Student %s saved without account: %s", student_id, sanitize_for_log(detail))
            return f"Student saved but the login account could not be created: {detail}"
        return None

    async def _open_parent_account(self, school: School, student: Student) -> Optional[str]:
        student_id = student.id
        try:
            issued = await self.accounts.issue_account(
                school, "parent", student.parent_first_name, student.parent_last_name,
                phone=student.parent_phone, source="student_creation",
            )
            student.parent_matricule = issued["matricule"]
            await self.db.commit()
        except (EcoGestException, SQLAlchemyError) as e:
            await self.db.rollback()
            await self.db.refresh(school)
            detail = e.detail if isinstance(e, EcoGestException) else "database error"
            logger.warning("Parent account failed for student %s: %s", student_id, sanitize_for_log(detail))
            return f"Student saved but the parent account could not be created: {detail}"
        return None

    async def _check_class(self, school_id: UUID, class_id: UUID):
        stmt = select(ClassModel.id).where(
            ClassModel.id == class_id, ClassModel.school_id == school_id, ClassModel.is_deleted.is_(False)
        )
        if (await self.db.execute(stmt)).scalar_one_or_none() is None:
            raise NotFoundError("Class", class_id)

    async def update_student(self, school_id: UUID, student_id: UUID, changes: Dict[str, Any]) -> Student:
        if changes.get("class_id"):
            await self._check_class(school_id, changes["class_id"])
        student = await self.update(student_id, changes, school_id)
        if not student:
            raise NotFoundError("Student", student_id)
        return student

    async def search(self, school_id: UUID, term: str, limit: int = 20):
        pattern = f"%{term.strip()}%"
        stmt = select(Student).where(
            Student.school_id == school_id,
            Student.is_deleted.is_(False),
            or_(
                Student.first_name.ilike(pattern),
                Student.last_name.ilike(pattern),
                Student.student_number.ilike(pattern),
            ),
        ).order_by(Student.last_name).limit(limit)
        return (await self.db.execute(stmt)).scalars().all()

    async def list_for_class(self, school_id: UUID, class_id: UUID, active_only: bool = True):
        stmt = select(Student).where(
            Student.school_id == school_id,
            Student.class_id == class_id,
            Student.is_deleted.is_(False),
        ).order_by(Student.last_name, Student.first_name)
        if active_only:
            stmt = stmt.where(Student.is_active.is_(True))
        return (await self.db.execute(stmt)).scalars().all()

    async def get_by_user(self, school_id: UUID, user_id: UUID) -> Optional[Student]:
        stmt = select(Student).where(Student.school_id == school_id, Student.user_id == user_id,
                                     Student.is_deleted.is_(False))
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def get_children(self, school_id: UUID, parent_matricule: str):
        stmt = select(Student).where(Student.school_id == school_id, Student.parent_matricule == parent_matricule,
                                     Student.is_deleted.is_(False))
        return (await self.db.execute(stmt)).scalars().all()
