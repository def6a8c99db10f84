# ecogest/services/school_service.py
import logging
from datetime import date, timedelta
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.exceptions import DuplicateError, SchoolNotFound
from ..core.logging import sanitize_for_log
from ..models import School, Profile, UserRole
from .auth_service import AuthService
from .base_service import BaseService
from .identifier_sync_service import IdentifierSyncService

logger = logging.getLogger(__name__)

MATRICULE_SETTING_FIELDS = (
    "student_matricule_format", "teacher_matricule_format", "parent_matricule_format",
    "default_student_password", "default_teacher_password", "default_parent_password",
    "auto_generate_student_matricule", "auto_generate_teacher_matricule", "auto_generate_parent_matricule",
)


class SchoolService(BaseService[School]):
    resource_name = "School"

    def __init__(self, db: AsyncSession):
        super().__init__(School, db)

    async def get_or_404(self, id: Any, school_id: Optional[UUID] = None) -> School:
        school = await self.get(id)
        if not school:
            raise SchoolNotFound(id)
        return school

    async def get_by_suffix(self, school_suffix: str) -> Optional[School]:
        stmt = select(School).where(School.school_suffix == school_suffix, School.is_deleted.is_(False))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def register(self, school_data: Dict[str, Any], admin_data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a school in trial and its administrator account."""
        if await self.get_by_suffix(school_data["school_suffix"]):
            raise DuplicateError("school_suffix", school_data["school_suffix"], "school")

        school_data.setdefault("trial_end_date", date.today() + timedelta(days=settings.default_trial_days))
        school = School(**school_data, subscription_status="trial")
        self.db.add(school)
        await self.db.flush()

        admin_email = admin_data["email"].strip().lower()
        user = await AuthService(self.db).create_user(
            admin_email,
            admin_data["password"],
            user_metadata={
                "role": UserRole.SCHOOL_ADMIN.value,
                "first_name": admin_data["first_name"],
                "last_name": admin_data["last_name"],
                "school_id": str(school.id),
            },
        )
        self.db.add(Profile(
            id=user.id,
            school_id=school.id,
            email=admin_email,
            first_name=admin_data["first_name"],
            last_name=admin_data["last_name"],
            phone=admin_data.get("phone"),
            role=UserRole.SCHOOL_ADMIN.value,
        ))
        school.created_by = user.id
        await self._commit()
        await self.db.refresh(school)

        logger.info("Registered school %s (%s)", school.id, sanitize_for_log(school.school_suffix))
        return {"school": school, "admin_id": user.id}

    async def update_school(self, school_id: UUID, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Apply changes; a new school_suffix triggers the identifier sync."""
        school = await self.get_or_404(school_id)
        old_suffix = school.school_suffix
        new_suffix = changes.get("school_suffix")

        if new_suffix and new_suffix != old_suffix:
            existing = await self.get_by_suffix(new_suffix)
            if existing and existing.id != school.id:
                raise DuplicateError("school_suffix", new_suffix, "school")

        for key, value in changes.items():
            setattr(school, key, value)
        await self._commit()
        await self.db.refresh(school)

        sync_result = None
        if new_suffix and new_suffix != old_suffix:
            sync_result = await IdentifierSyncService(self.db).sync(school.id, old_suffix, new_suffix)
            await self.db.refresh(school)
        return {"school": school, "sync": sync_result}

    async def get_matricule_settings(self, school_id: UUID) -> Dict[str, Any]:
        school = await self.get_or_404(school_id)
        return {field: getattr(school, field) for field in MATRICULE_SETTING_FIELDS}

    async def update_matricule_settings(self, school_id: UUID, changes: Dict[str, Any]) -> Dict[str, Any]:
        school = await self.get_or_404(school_id)
        for key, value in changes.items():
            if key in MATRICULE_SETTING_FIELDS:
                setattr(school, key, value)
        await self._commit()
        await self.db.refresh(school)
        return {field: getattr(school, field) for field in MATRICULE_SETTING_FIELDS}
