# ecogest/routers/schools.py
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..models import Profile, School
from ..schemas.school_schemas import (
    SchoolRegistration, SchoolUpdate, MatriculeSettings, IdentifierSyncRequest, SchoolDeleteRequest,
)
from ..services.identifier_sync_service import IdentifierSyncService
from ..services.school_deletion_service import SchoolDeletionService
from ..services.school_service import SchoolService
from .deps import get_current_profile, require_admin, ensure_own_school

router = APIRouter(prefix="/api/v1/schools", tags=["Schools"])


def format_school(school: School) -> dict:
    return {
        "id": str(school.id),
        "name": school.name,
        "email": school.email,
        "phone": school.phone,
        "address": school.address,
        "school_type": school.school_type,
        "slogan": school.slogan,
        "logo_url": school.logo_url,
        "school_suffix": school.school_suffix,
        "academic_year": school.academic_year,
        "semester_type": school.semester_type,
        "periods": school.period_labels,
        "currency": school.currency,
        "language": school.language,
        "timezone": school.timezone,

        # Subscription
        "subscription_status": school.subscription_status,
        "subscription_plan": school.subscription_plan,
        "trial_end_date": school.trial_end_date.isoformat() if school.trial_end_date else None,

        "created_at": school.created_at.isoformat() if school.created_at else None,
    }


@router.post("/register", response_model=dict, status_code=201)
async def register_school(data: SchoolRegistration, db: AsyncSession = Depends(get_db)):
    """Create a school together with its administrator account."""
    result = await SchoolService(db).register(data.school.model_dump(), data.admin.model_dump())
    return {
        "message": "School created successfully",
        "school": format_school(result["school"]),
        "admin_id": str(result["admin_id"]),
    }


@router.get("/{school_id}", response_model=dict)
async def get_school(school_id: UUID, profile: Profile = Depends(get_current_profile), db: AsyncSession = Depends(get_db)):
    ensure_own_school(profile, school_id)
    school = await SchoolService(db).get_or_404(school_id)
    return format_school(school)


@router.put("/{school_id}", response_model=dict)
async def update_school(
    school_id: UUID,
    data: SchoolUpdate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Update school information; a new suffix renames every login."""
    ensure_own_school(admin, school_id)
    result = await SchoolService(db).update_school(school_id, data.model_dump(exclude_unset=True))
    response = {"message": "School updated successfully", "school": format_school(result["school"])}
    if result["sync"] is not None:
        response["identifier_sync"] = result["sync"]
    return response


@router.get("/{school_id}/matricule-settings", response_model=dict)
async def get_matricule_settings(school_id: UUID, admin: Profile = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    ensure_own_school(admin, school_id)
    return await SchoolService(db).get_matricule_settings(school_id)


@router.put("/{school_id}/matricule-settings", response_model=dict)
async def update_matricule_settings(
    school_id: UUID,
    data: MatriculeSettings,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    ensure_own_school(admin, school_id)
    return await SchoolService(db).update_matricule_settings(school_id, data.model_dump(exclude_unset=True))


@router.post("/{school_id}/identifiers/sync", response_model=dict)
async def sync_identifiers(
    school_id: UUID,
    data: IdentifierSyncRequest,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Rewrite every non-admin login from old_suffix to new_suffix."""
    ensure_own_school(admin, school_id)
    return await IdentifierSyncService(db).sync(school_id, data.old_suffix, data.new_suffix)


@router.delete("/{school_id}", response_model=dict)
async def delete_school(
    school_id: UUID,
    data: SchoolDeleteRequest,
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    """Permanently delete the school and all of its data."""
    return await SchoolDeletionService(db).delete_school(school_id, profile, data.admin_password)
