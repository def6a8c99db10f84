# ecogest/models/tenant_specific/subject.py
from sqlalchemy import Column, String, Integer, Numeric, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from ..base import Base


class Subject(Base):
    __tablename__ = "subjects"

    school_id = Column(Uuid(as_uuid=True), ForeignKey("schools.id"), nullable=False, index=True)
    class_id = Column(Uuid(as_uuid=True), ForeignKey("classes.id"), index=True)

    name = Column(String(100), nullable=False)
    abbreviation = Column(String(10))
    code = Column(String(20))
    coefficient = Column(Numeric(4, 2), nullable=False, default=1)
    max_score = Column(Integer, nullable=False, default=20)
    hours_per_week = Column(Integer, default=0)
    color = Column(String(7), default="#3B82F6")

    class_ref = relationship("ClassModel", back_populates="subjects")
