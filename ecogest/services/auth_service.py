# ecogest/services/auth_service.py
"""Authentication store: login accounts, password checks and tokens."""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import AuthenticationError, DuplicateError, NotFoundError
from ..core.logging import sanitize_for_log
from ..core.security import hash_password, verify_password, create_access_token
from ..models import AuthUser, Profile
from ..utils.identifiers import to_auth_email

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: UUID) -> Optional[AuthUser]:
        return await self.db.get(AuthUser, user_id)

    async def get_user_by_email(self, email: str) -> Optional[AuthUser]:
        stmt = select(AuthUser).where(func.lower(AuthUser.email) == email.strip().lower())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create_user(
        self,
        email: str,
        password: str,
        user_metadata: Optional[Dict[str, Any]] = None,
        email_confirmed: bool = True,
    ) -> AuthUser:
        """Add a login account to the session (caller commits)."""
        if await self.get_user_by_email(email):
            raise DuplicateError("email", email, "user")

        user = AuthUser(
            email=email,
            password_hash=hash_password(password),
            email_confirmed=email_confirmed,
            user_metadata=user_metadata or {},
        )
        self.db.add(user)
        await self.db.flush()
        return user

    async def update_email(self, user_id: UUID, email: str, metadata_updates: Optional[Dict] = None) -> AuthUser:
        user = await self.get_user(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        user.email = email
        if metadata_updates:
            # JSON columns only detect reassignment
            user.user_metadata = {**(user.user_metadata or {}), **metadata_updates}
        await self.db.flush()
        return user

    async def set_password(self, user_id: UUID, password: str):
        user = await self.get_user(user_id)
        if not user:
            raise NotFoundError("User", user_id)
        user.password_hash = hash_password(password)
        await self.db.commit()

    async def authenticate(self, login: str, password: str) -> Tuple[AuthUser, Profile]:
        """Check a login (admin email, ``matricule@suffix`` or auth email)."""
        try:
            auth_email = to_auth_email(login)
        except ValueError:
            raise AuthenticationError("Invalid credentials")

        user = await self.get_user_by_email(auth_email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("Failed login for %s", sanitize_for_log(login, 100))
            raise AuthenticationError("Invalid credentials")

        profile = await self.db.get(Profile, user.id)
        if not profile or not profile.is_active or profile.is_deleted:
            raise AuthenticationError("Account is disabled")

        user.last_sign_in_at = datetime.now(timezone.utc)
        await self.db.commit()
        return user, profile

    async def login(self, login: str, password: str) -> Dict[str, Any]:
        user, profile = await self.authenticate(login, password)
        token = create_access_token(user.id, profile.role, profile.school_id)
        return {
            "access_token": token,
            "token_type": "bearer",
            "user_id": str(user.id),
            "role": profile.role,
            "school_id": str(profile.school_id) if profile.school_id else None,
        }
