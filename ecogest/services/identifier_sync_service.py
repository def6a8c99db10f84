# ecogest/services/identifier_sync_service.py
"""Rewrite login identifiers after a school suffix change.

Each user is renamed independently: the auth record and the profile are
committed one after the other and failures are tallied, never rolled back.
"""
import logging
from typing import Any, Dict
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import BadRequestError, EcoGestException, NotFoundError
from ..core.logging import sanitize_for_log
from ..models import Profile, UserRole
from ..utils.identifiers import build_display_email, suffix_to_domain
from .auth_service import AuthService

logger = logging.getLogger(__name__)


class IdentifierSyncService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.auth = AuthService(db)

    async def sync(self, school_id: UUID, old_suffix: str, new_suffix: str) -> Dict[str, Any]:
        if not old_suffix or not new_suffix or not school_id:
            raise BadRequestError("Missing required parameters")

        logger.info("Syncing identifiers %s -> %s for school %s", old_suffix, new_suffix, school_id)
        old_domain = suffix_to_domain(old_suffix)
        new_domain = suffix_to_domain(new_suffix)

        # Admins keep their personal email
        stmt = select(Profile.id, Profile.email).where(
            Profile.school_id == school_id,
            Profile.role != UserRole.SCHOOL_ADMIN.value,
        )
        profiles = (await self.db.execute(stmt)).all()
        logger.info("%d profiles to sync", len(profiles))

        success, errors, error_details = 0, 0, []
        for profile_id, email in profiles:
            parts = email.split('@')
            if len(parts) != 2:
                logger.warning("Invalid email format for profile %s: %s", profile_id, sanitize_for_log(email))
                continue

            matricule, email_domain = parts
            if old_domain not in email_domain and old_suffix not in email_domain:
                logger.debug("Email not concerned: %s", email)
                continue

            new_email = f"{matricule}@{new_domain}"
            try:
                await self.auth.update_email(profile_id, new_email, {
                    "school_suffix": new_suffix,
                    "display_email": build_display_email(matricule, new_suffix),
                })
                await self.db.commit()
            except (EcoGestException, SQLAlchemyError) as e:
                await self.db.rollback()
                error_details.append(f"{email}: {self._describe(e)}")
                errors += 1
                logger.error("Auth update failed for %s: %s", profile_id, sanitize_for_log(self._describe(e)))
                continue

            try:
                profile = await self.db.get(Profile, profile_id, populate_existing=True)
                if profile is None:
                    raise NotFoundError("Profile", profile_id)
                profile.email = new_email
                await self.db.commit()
            except (EcoGestException, SQLAlchemyError) as e:
                await self.db.rollback()
                error_details.append(f"{email}: {self._describe(e)}")
                errors += 1
                logger.error("Profile update failed for %s: %s", profile_id, sanitize_for_log(self._describe(e)))
                continue

            success += 1

        result = {
            "success": True,
            "message": f"Sync finished: {success} succeeded, {errors} errors",
            "stats": {"total": len(profiles), "success": success, "errors": errors},
            "error_details": error_details,
        }
        logger.info("Identifier sync result for school %s: %s", school_id, result["stats"])
        return result

    @staticmethod
    def _describe(exc: Exception) -> str:
        if isinstance(exc, EcoGestException):
            return str(exc.detail)
        return exc.__class__.__name__
