# ecogest/models/tenant_specific/class_model.py
from sqlalchemy import Column, String, Integer, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
from ..base import Base


class ClassModel(Base):
    __tablename__ = "classes"

    # Foreign Keys
    school_id = Column(Uuid(as_uuid=True), ForeignKey("schools.id"), nullable=False, index=True)

    # Class Information
    name = Column(String(50), nullable=False, index=True)
    level = Column(String(30), nullable=False)
    section = Column(String(10))
    capacity = Column(Integer, default=40)
    academic_year = Column(String(9), nullable=False)

    __table_args__ = (
        UniqueConstraint("school_id", "name", "academic_year", name="uq_class_identity"),
    )

    # Relationships
    students = relationship("Student", back_populates="class_ref")
    subjects = relationship("Subject", back_populates="class_ref")
