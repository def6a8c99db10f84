# ecogest/models/tenant_specific/student.py
from sqlalchemy import Column, String, Date, Boolean, ForeignKey, Uuid, UniqueConstraint, Index
from sqlalchemy.orm import relationship, validates
from ..base import Base


class Student(Base):
    __tablename__ = "students"

    school_id = Column(Uuid(as_uuid=True), ForeignKey("schools.id"), nullable=False, index=True)
    class_id = Column(Uuid(as_uuid=True), ForeignKey("classes.id"), index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("auth_users.id"), index=True)

    # Identity
    student_number = Column(String(60), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    date_of_birth = Column(Date)
    place_of_birth = Column(String(100))
    gender = Column(String(10))
    address = Column(String(500))
    phone = Column(String(20))

    # Parent / guardian
    parent_first_name = Column(String(100))
    parent_last_name = Column(String(100))
    parent_phone = Column(String(20))
    parent_email = Column(String(254))
    parent_matricule = Column(String(60))

    enrollment_date = Column(Date)
    is_active = Column(Boolean, nullable=False, default=True)

    class_ref = relationship("ClassModel", back_populates="students")

    __table_args__ = (
        UniqueConstraint("school_id", "student_number", name="uq_student_number"),
        Index("idx_student_school_class", "school_id", "class_id"),
    )

    @validates('gender')
    def validate_gender(self, key, value):
        if value is not None and value not in ("M", "F"):
            raise ValueError("gender must be 'M' or 'F'")
        return value

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def has_parent_details(self) -> bool:
        return bool(self.parent_first_name and self.parent_last_name)
