# ecogest/routers/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import AuthenticationError
from ..core.security import verify_password
from ..models import AuthUser, Profile
from ..schemas.account_schemas import LoginRequest, TokenResponse, PasswordChange
from ..services.auth_service import AuthService
from .deps import get_current_profile

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


def format_profile(profile: Profile, auth_user: AuthUser = None) -> dict:
    metadata = (auth_user.user_metadata or {}) if auth_user else {}
    return {
        "id": str(profile.id),
        "school_id": str(profile.school_id) if profile.school_id else None,
        "email": profile.email,
        "display_email": metadata.get("display_email", profile.email),
        "matricule": profile.matricule,
        "first_name": profile.first_name,
        "last_name": profile.last_name,
        "phone": profile.phone,
        "role": profile.role,
        "is_active": profile.is_active,
    }


@router.post("/login", response_model=TokenResponse)
async def login(credentials: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Sign in with an admin email, a matricule@suffix identifier or the auth email."""
    return await AuthService(db).login(credentials.identifier, credentials.password)


@router.get("/me", response_model=dict)
async def me(profile: Profile = Depends(get_current_profile), db: AsyncSession = Depends(get_db)):
    auth_user = await AuthService(db).get_user(profile.id)
    return format_profile(profile, auth_user)


@router.post("/change-password", response_model=dict)
async def change_password(
    data: PasswordChange,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    service = AuthService(db)
    auth_user = await service.get_user(profile.id)
    if not auth_user or not verify_password(data.current_password, auth_user.password_hash):
        raise AuthenticationError("Incorrect password")
    await service.set_password(profile.id, data.new_password)
    return {"message": "Password updated successfully"}
