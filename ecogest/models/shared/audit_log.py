# ecogest/models/shared/audit_log.py
from sqlalchemy import Column, String, Text, Uuid, JSON
from ..base import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    category = Column(String(30), nullable=False, index=True)
    level = Column(String(10), nullable=False, default="info")
    message = Column(Text, nullable=False)
    # No foreign keys: entries outlive the users and schools they describe
    user_id = Column(Uuid(as_uuid=True))
    school_id = Column(Uuid(as_uuid=True), index=True)
    details = Column(JSON)
