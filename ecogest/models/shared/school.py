# ecogest/models/shared/school.py
"""School (tenant) model and its identifier counters."""
import re
from sqlalchemy import Column, String, Integer, Boolean, Date, ForeignKey, Uuid, UniqueConstraint, Index
from sqlalchemy.orm import relationship, validates
from ..base import Base

SCHOOL_SUFFIX_PATTERN = re.compile(r'^[a-z0-9_]+$')


class School(Base):
    __tablename__ = "schools"

    # Basic Information
    name = Column(String(200), nullable=False, index=True)
    email = Column(String(254), nullable=False)
    phone = Column(String(20))
    address = Column(String(500))
    school_type = Column(String(30), default="public")
    slogan = Column(String(200))
    logo_url = Column(String(500))

    # Every login identifier of the school ends with @<school_suffix>
    school_suffix = Column(String(50), nullable=False, unique=True, index=True)

    # Academic settings
    academic_year = Column(String(9), nullable=False, default="2024/2025")
    semester_type = Column(String(10), nullable=False, default="semester")
    currency = Column(String(3), nullable=False, default="XOF")
    language = Column(String(5), nullable=False, default="fr")
    timezone = Column(String(50), nullable=False, default="Africa/Dakar")

    # Matricule settings
    student_matricule_format = Column(String(20), nullable=False, default="Eleve")
    teacher_matricule_format = Column(String(20), nullable=False, default="Prof")
    parent_matricule_format = Column(String(20), nullable=False, default="Parent")
    default_student_password = Column(String(100), nullable=False, default="student123")
    default_teacher_password = Column(String(100), nullable=False, default="teacher123")
    default_parent_password = Column(String(100), nullable=False, default="parent123")
    auto_generate_student_matricule = Column(Boolean, nullable=False, default=True)
    auto_generate_teacher_matricule = Column(Boolean, nullable=False, default=True)
    auto_generate_parent_matricule = Column(Boolean, nullable=False, default=True)

    # Subscription
    subscription_status = Column(String(20), nullable=False, default="trial")
    subscription_plan = Column(String(50))
    trial_end_date = Column(Date)
    created_by = Column(Uuid(as_uuid=True))

    counters = relationship("SchoolUserCounter", back_populates="school", cascade="all, delete-orphan")

    @validates('school_suffix')
    def validate_school_suffix(self, key, value):
        if not value or not SCHOOL_SUFFIX_PATTERN.match(value):
            raise ValueError("school_suffix may only contain lowercase letters, digits and underscores")
        return value

    @validates('semester_type')
    def validate_semester_type(self, key, value):
        if value not in ("semester", "trimester"):
            raise ValueError("semester_type must be 'semester' or 'trimester'")
        return value

    def matricule_prefix(self, role: str) -> str:
        return {
            "student": self.student_matricule_format,
            "teacher": self.teacher_matricule_format,
            "parent": self.parent_matricule_format,
        }[role]

    def default_password(self, role: str) -> str:
        return {
            "student": self.default_student_password,
            "teacher": self.default_teacher_password,
            "parent": self.default_parent_password,
        }[role]

    def auto_generates(self, role: str) -> bool:
        return {
            "student": self.auto_generate_student_matricule,
            "teacher": self.auto_generate_teacher_matricule,
            "parent": self.auto_generate_parent_matricule,
        }[role]

    @property
    def period_labels(self):
        if self.semester_type == "trimester":
            return ["trimestre1", "trimestre2", "trimestre3"]
        return ["semestre1", "semestre2"]


class SchoolUserCounter(Base):
    __tablename__ = "school_user_counters"

    school_id = Column(Uuid(as_uuid=True), ForeignKey("schools.id"), nullable=False, index=True)
    user_role = Column(String(20), nullable=False)
    current_count = Column(Integer, nullable=False, default=0)

    school = relationship("School", back_populates="counters")

    __table_args__ = (
        UniqueConstraint("school_id", "user_role", name="uq_school_user_counter"),
    )


class MatriculeGenerationLog(Base):
    __tablename__ = "matricule_generation_log"

    school_id = Column(Uuid(as_uuid=True), ForeignKey("schools.id"), nullable=False, index=True)
    role = Column(String(20), nullable=False)
    generated_matricule = Column(String(60), nullable=False)
    generated_email = Column(String(254))
    user_id = Column(Uuid(as_uuid=True))
    source = Column(String(30), nullable=False, default="api")

    __table_args__ = (
        Index("idx_matricule_log_school_role", "school_id", "role"),
    )
