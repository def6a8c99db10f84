# ecogest/routers/deps.py
"""Request dependencies: current user, role checks and school scoping."""
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import AuthenticationError, PermissionDenied, SchoolNotFound
from ..core.security import decode_access_token
from ..models import Profile, School, UserRole

bearer_scheme = HTTPBearer(auto_error=False)

STAFF_ROLES = (UserRole.SCHOOL_ADMIN.value, UserRole.TEACHER.value)


async def get_current_profile(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Profile:
    if not credentials:
        raise AuthenticationError("Not authenticated")
    payload = decode_access_token(credentials.credentials)
    try:
        user_id = UUID(payload["sub"])
    except (KeyError, ValueError):
        raise AuthenticationError("Invalid token")

    profile = await db.get(Profile, user_id)
    if not profile or not profile.is_active or profile.is_deleted:
        raise AuthenticationError("Account not found or disabled")
    return profile


async def get_current_school(
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
) -> School:
    if not profile.school_id:
        raise PermissionDenied("No school attached to this account")
    school = await db.get(School, profile.school_id)
    if not school or school.is_deleted:
        raise SchoolNotFound(profile.school_id)
    return school


def require_admin(profile: Profile = Depends(get_current_profile)) -> Profile:
    if profile.role != UserRole.SCHOOL_ADMIN.value:
        raise PermissionDenied("Admin access required")
    return profile


def require_staff(profile: Profile = Depends(get_current_profile)) -> Profile:
    if profile.role not in STAFF_ROLES:
        raise PermissionDenied("Teacher or admin access required")
    return profile


def ensure_own_school(profile: Profile, school_id: UUID):
    if profile.school_id != school_id:
        raise PermissionDenied("You can only manage your own school")
