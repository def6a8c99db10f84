# ecogest/routers/announcements.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError
from ..models import Announcement, Profile
from ..schemas.announcement_schemas import AnnouncementCreate, AnnouncementUpdate
from ..services.announcement_service import AnnouncementService
from .deps import get_current_profile, require_admin

router = APIRouter(prefix="/api/v1/announcements", tags=["Announcements"])


def format_announcement(announcement: Announcement) -> dict:
    return {
        "id": str(announcement.id),
        "author_id": str(announcement.author_id) if announcement.author_id else None,
        "title": announcement.title,
        "content": announcement.content,
        "priority": announcement.priority,
        "target_audience": announcement.target_audience or [],
        "is_urgent": announcement.is_urgent,
        "is_published": announcement.is_published,
        "published_at": announcement.published_at.isoformat() if announcement.published_at else None,
        "expires_at": announcement.expires_at.isoformat() if announcement.expires_at else None,
        "created_at": announcement.created_at.isoformat() if announcement.created_at else None,
    }


@router.get("/", response_model=dict)
async def get_announcements(
    include_expired: bool = False,
    limit: Optional[int] = Query(None, ge=1, le=200),
    profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    """Announcements addressed to the caller's role."""
    items = await AnnouncementService(db).list_for_reader(profile.school_id, profile.role, include_expired, limit)
    return {"items": [format_announcement(a) for a in items], "total": len(items)}


@router.post("/", response_model=dict, status_code=201)
async def create_announcement(
    data: AnnouncementCreate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    announcement = await AnnouncementService(db).create_announcement(admin.school_id, admin.id, data.model_dump())
    return {"message": "Announcement created successfully", "announcement": format_announcement(announcement)}


@router.put("/{announcement_id}", response_model=dict)
async def update_announcement(
    announcement_id: UUID,
    data: AnnouncementUpdate,
    admin: Profile = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    announcement = await AnnouncementService(db).update(
        announcement_id, data.model_dump(exclude_unset=True), admin.school_id
    )
    if not announcement:
        raise NotFoundError("Announcement", announcement_id)
    return {"message": "Announcement updated successfully", "announcement": format_announcement(announcement)}


@router.delete("/{announcement_id}", response_model=dict)
async def delete_announcement(announcement_id: UUID, admin: Profile = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    if not await AnnouncementService(db).soft_delete(announcement_id, admin.school_id):
        raise NotFoundError("Announcement", announcement_id)
    return {"message": "Announcement deleted successfully"}
