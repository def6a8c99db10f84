# ecogest/models/tenant_specific/announcement.py
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Uuid, JSON
from ..base import Base


class Announcement(Base):
    __tablename__ = "announcements"

    school_id = Column(Uuid(as_uuid=True), ForeignKey("schools.id"), nullable=False, index=True)
    author_id = Column(Uuid(as_uuid=True))

    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    priority = Column(String(10), nullable=False, default="normal")
    # e.g. ["all"], ["eleves", "parents"]
    target_audience = Column(JSON, nullable=False, default=list)
    is_urgent = Column(Boolean, nullable=False, default=False)
    is_published = Column(Boolean, nullable=False, default=True)
    published_at = Column(DateTime(timezone=True))
    expires_at = Column(DateTime(timezone=True))
