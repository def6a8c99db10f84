# ecogest/services/announcement_service.py
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Announcement, UserRole
from ..utils.announcements import filter_for_role
from .base_service import BaseService


class AnnouncementService(BaseService[Announcement]):
    resource_name = "Announcement"

    def __init__(self, db: AsyncSession):
        super().__init__(Announcement, db)

    async def create_announcement(self, school_id: UUID, author_id: UUID, data: Dict[str, Any]) -> Announcement:
        if data.get("is_published", True) and not data.get("published_at"):
            data["published_at"] = datetime.now(timezone.utc)
        return await self.create({**data, "school_id": school_id, "author_id": author_id})

    async def list_for_reader(self, school_id: UUID, role: str, include_expired: bool = False,
                              limit: Optional[int] = None) -> List[Announcement]:
        """Announcements a reader may see, urgent first then newest."""
        is_admin = role == UserRole.SCHOOL_ADMIN.value
        stmt = select(Announcement).where(
            Announcement.school_id == school_id,
            Announcement.is_deleted.is_(False),
        )
        if not is_admin:
            stmt = stmt.where(Announcement.is_published.is_(True))
        if not include_expired:
            now = datetime.now(timezone.utc)
            stmt = stmt.where(or_(Announcement.expires_at.is_(None), Announcement.expires_at > now))
        stmt = stmt.order_by(Announcement.is_urgent.desc(), Announcement.created_at.desc())
        if limit:
            stmt = stmt.limit(limit)

        announcements = (await self.db.execute(stmt)).scalars().all()
        return filter_for_role(announcements, role, is_admin=is_admin)
