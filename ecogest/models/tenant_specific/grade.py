# ecogest/models/tenant_specific/grade.py
from sqlalchemy import Column, String, Numeric, ForeignKey, Uuid, Index
from ..base import Base

EXAM_TYPES = ("devoir", "composition", "interrogation", "examen")


class Grade(Base):
    __tablename__ = "grades"

    school_id = Column(Uuid(as_uuid=True), ForeignKey("schools.id"), nullable=False, index=True)
    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id"), nullable=False, index=True)
    subject_id = Column(Uuid(as_uuid=True), ForeignKey("subjects.id"), nullable=False)
    exam_id = Column(Uuid(as_uuid=True), ForeignKey("exams.id"))

    exam_type = Column(String(20), nullable=False, default="devoir")
    semester = Column(String(20))
    grade_value = Column(Numeric(5, 2), nullable=False)
    max_grade = Column(Numeric(5, 2), nullable=False, default=20)
    coefficient = Column(Numeric(4, 2))
    created_by = Column(Uuid(as_uuid=True))

    __table_args__ = (
        Index("idx_grade_student_subject", "student_id", "subject_id"),
        Index("idx_grade_exam", "exam_id"),
    )
