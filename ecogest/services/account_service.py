# ecogest/services/account_service.py
"""Login account creation for students, teachers and parents."""
import logging
from typing import Any, Dict, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import BadRequestError, DatabaseError, EcoGestException, IdentifierNotAllowed
from ..core.logging import sanitize_for_log
from ..models import School, Profile, Student, Teacher, UserRole, MATRICULE_ROLES
from ..utils.identifiers import build_auth_email, build_display_email, split_login
from .auth_service import AuthService
from .identifier_service import IdentifierService

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.auth = AuthService(db)
        self.identifiers = IdentifierService(db)

    async def create_account(
        self,
        school: School,
        email: str,
        password: str,
        role: str,
        first_name: str,
        last_name: str,
        phone: Optional[str] = None,
        commit: bool = True,
    ) -> Profile:
        """Create the login and profile for ``matricule@suffix``.

        The auth store receives ``matricule@suffix-with-hyphens.<domain>``
        while the matricule@suffix form is kept for display.
        """
        if not email or not password or not role or not first_name or not last_name:
            raise BadRequestError("Missing required fields")
        if role == UserRole.SCHOOL_ADMIN.value:
            raise IdentifierNotAllowed()
        if role not in MATRICULE_ROLES:
            raise BadRequestError(f"Unknown role '{role}'")
        try:
            matricule, school_suffix = split_login(email)
        except ValueError as e:
            raise BadRequestError(str(e))
        if school_suffix != school.school_suffix:
            raise BadRequestError("Identifier suffix does not match the school")

        auth_email = build_auth_email(matricule, school_suffix)
        logger.info("Creating user with auth email: %s", auth_email)

        user = await self.auth.create_user(
            auth_email,
            password,
            user_metadata={
                "role": role,
                "first_name": first_name,
                "last_name": last_name,
                "school_id": str(school.id),
                "matricule": matricule,
                "display_email": build_display_email(matricule, school_suffix),
                "school_suffix": school_suffix,
            },
        )
        profile = Profile(
            id=user.id,
            school_id=school.id,
            email=auth_email,
            matricule=matricule,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            role=role,
        )
        self.db.add(profile)
        if commit:
            try:
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.error("Account creation failed for %s: %s", auth_email, sanitize_for_log(e))
                raise DatabaseError("Could not create user account")
        return profile

    async def issue_account(
        self,
        school: School,
        role: str,
        first_name: str,
        last_name: str,
        password: Optional[str] = None,
        phone: Optional[str] = None,
        source: str = "api",
    ) -> Dict[str, Any]:
        """Issue the next matricule for the role and open its account."""
        # Committed on its own so a failed account leaves a gap in the sequence
        issued = await self.identifiers.issue(school, role, source=source)
        password = password or school.default_password(role)
        profile = await self.create_account(
            school, issued["identifier"], password, role, first_name, last_name, phone=phone
        )
        return {
            "user_id": profile.id,
            "matricule": issued["matricule"],
            "identifier": issued["identifier"],
            "auth_email": issued["auth_email"],
            "initial_password": password,
        }

    async def backfill(self, school: School, role: str, password: Optional[str] = None) -> Dict[str, Any]:
        """Open accounts for active students or teachers created without one."""
        if role not in (UserRole.STUDENT.value, UserRole.TEACHER.value):
            raise BadRequestError("Backfill only applies to students and teachers")

        model, number_field = (Student, "student_number") if role == "student" else (Teacher, "employee_number")
        password = password or school.default_password(role)
        result = {"success": 0, "errors": 0, "details": []}

        stmt = select(model).where(
            model.school_id == school.id,
            model.user_id.is_(None),
            model.is_active.is_(True),
            model.is_deleted.is_(False),
        )
        # Plain tuples survive the rollback of a failed row
        rows = [
            (row.id, getattr(row, number_field), row.first_name, row.last_name)
            for row in (await self.db.execute(stmt)).scalars().all()
        ]
        if not rows:
            result["details"].append(f"No {role} without an account")
            return result

        for row_id, number, first_name, last_name in rows:
            name = f"{first_name} {last_name}"
            try:
                profile = await self.create_account(
                    school, build_display_email(number, school.school_suffix),
                    password, role, first_name, last_name, commit=False,
                )
                await self.db.execute(update(model).where(model.id == row_id).values(user_id=profile.id))
                await self.db.commit()
                result["success"] += 1
                result["details"].append(f"{name}: {profile.email}")
            except (EcoGestException, SQLAlchemyError) as e:
                await self.db.rollback()
                await self.db.refresh(school)
                detail = e.detail if isinstance(e, EcoGestException) else "database error"
                logger.warning("Backfill failed for %s %s: %s", role, row_id, sanitize_for_log(detail))
                result["errors"] += 1
                result["details"].append(f"{name}: {detail}")

        return result
