# ecogest/services/school_deletion_service.py
"""Password-confirmed, permanent deletion of a school and all its data."""
import logging
from typing import Any, Dict
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.cache import cache_manager
from ..core.exceptions import AuthenticationError, DatabaseError, PermissionDenied, SchoolNotFound
from ..core.security import verify_password
from ..models import (
    AuditLog, AuthUser, Profile, School, UserRole,
    Payment, Grade, LessonLog, Exam, Schedule, Announcement, Subject, Student, Teacher,
    ClassModel, PaymentCategory, SchoolUserCounter, MatriculeGenerationLog,
    PaymentTransaction, Subscription,
)

logger = logging.getLogger(__name__)

# Children before parents
DELETION_ORDER = (
    Payment,
    Grade,
    LessonLog,
    Exam,
    Schedule,
    Announcement,
    Subject,
    Student,
    Teacher,
    ClassModel,
    PaymentCategory,
    SchoolUserCounter,
    MatriculeGenerationLog,
    PaymentTransaction,
    Subscription,
)


class SchoolDeletionService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def delete_school(self, school_id: UUID, admin: Profile, admin_password: str) -> Dict[str, Any]:
        if admin.role != UserRole.SCHOOL_ADMIN.value:
            raise PermissionDenied("Only school administrators can delete a school")
        if admin.school_id != school_id:
            raise PermissionDenied("You can only delete your own school")

        auth_user = await self.db.get(AuthUser, admin.id)
        if not auth_user or not verify_password(admin_password, auth_user.password_hash):
            raise AuthenticationError("Incorrect password")

        school = await self.db.get(School, school_id)
        if not school:
            raise SchoolNotFound(school_id)
        school_name = school.name
        admin_id, admin_email = admin.id, admin.email

        logger.warning("Deleting school %s (%s)", school_id, school_name)
        try:
            for model in DELETION_ORDER:
                result = await self.db.execute(delete(model).where(model.school_id == school_id))
                logger.info("Deleted %d rows from %s", result.rowcount, model.__tablename__)

            user_ids = (await self.db.execute(
                select(Profile.id).where(Profile.school_id == school_id)
            )).scalars().all()
            if user_ids:
                await self.db.execute(delete(Profile).where(Profile.id.in_(user_ids)))
                await self.db.execute(delete(AuthUser).where(AuthUser.id.in_(user_ids)))
            logger.info("Deleted %d users", len(user_ids))

            await self.db.execute(delete(School).where(School.id == school_id))

            self.db.add(AuditLog(
                category="security",
                level="warn",
                message=f"School deleted: {school_name}",
                user_id=admin_id,
                school_id=school_id,
                details={
                    "admin_email": admin_email,
                    "school_name": school_name,
                    "action": "school_deletion",
                    "users_deleted": len(user_ids),
                },
            ))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("School deletion failed for %s: %s", school_id, e)
            raise DatabaseError("School deletion failed")

        await cache_manager.delete_pattern(f"*:{school_id}")

        return {
            "success": True,
            "message": f'School "{school_name}" and all of its data were permanently deleted.',
        }
