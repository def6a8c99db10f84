# ecogest/models/shared/account.py
"""Authentication users and their school profiles."""
import enum
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Uuid, JSON, Index
from sqlalchemy.orm import relationship
from ..base import Base


class UserRole(str, enum.Enum):
    SCHOOL_ADMIN = "school_admin"
    TEACHER = "teacher"
    STUDENT = "student"
    PARENT = "parent"


# Roles that receive a matricule instead of a personal email
MATRICULE_ROLES = (UserRole.STUDENT.value, UserRole.TEACHER.value, UserRole.PARENT.value)


class AuthUser(Base):
    __tablename__ = "auth_users"

    email = Column(String(254), nullable=False, unique=True, index=True)
    password_hash = Column(String(100), nullable=False)
    email_confirmed = Column(Boolean, nullable=False, default=False)
    user_metadata = Column(JSON, nullable=False, default=dict)
    last_sign_in_at = Column(DateTime(timezone=True))

    profile = relationship("Profile", back_populates="auth_user", uselist=False)


class Profile(Base):
    __tablename__ = "profiles"

    # Same id as the AuthUser row
    id = Column(Uuid(as_uuid=True), ForeignKey("auth_users.id"), primary_key=True, index=True)
    school_id = Column(Uuid(as_uuid=True), ForeignKey("schools.id"), index=True)
    email = Column(String(254), nullable=False, index=True)
    matricule = Column(String(60), index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(20))
    role = Column(String(20), nullable=False, default=UserRole.STUDENT.value)
    is_active = Column(Boolean, nullable=False, default=True)

    auth_user = relationship("AuthUser", back_populates="profile")

    __table_args__ = (
        Index("idx_profile_school_role", "school_id", "role"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
