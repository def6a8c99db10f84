# ecogest/models/tenant_specific/exam.py
from sqlalchemy import Column, String, Text, Integer, Date, Boolean, ForeignKey, Uuid, Index
from ..base import Base


class Exam(Base):
    __tablename__ = "exams"

    school_id = Column(Uuid(as_uuid=True), ForeignKey("schools.id"), nullable=False, index=True)
    class_id = Column(Uuid(as_uuid=True), ForeignKey("classes.id"), nullable=False)
    subject_id = Column(Uuid(as_uuid=True), ForeignKey("subjects.id"))
    teacher_id = Column(Uuid(as_uuid=True), ForeignKey("teachers.id"))

    title = Column(String(200), nullable=False)
    description = Column(Text)
    exam_date = Column(Date, nullable=False)
    semester = Column(String(20))
    total_points = Column(Integer, nullable=False, default=20)
    is_published = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_exam_class_date", "class_id", "exam_date"),
    )
