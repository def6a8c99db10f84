# ecogest/models/tenant_specific/schedule.py
from sqlalchemy import Column, String, Text, Integer, Date, Time, ForeignKey, Uuid, Index, CheckConstraint
from ..base import Base


class Schedule(Base):
    __tablename__ = "schedules"

    school_id = Column(Uuid(as_uuid=True), ForeignKey("schools.id"), nullable=False, index=True)
    class_id = Column(Uuid(as_uuid=True), ForeignKey("classes.id"), nullable=False)
    subject_id = Column(Uuid(as_uuid=True), ForeignKey("subjects.id"))
    teacher_id = Column(Uuid(as_uuid=True), ForeignKey("teachers.id"))

    day_of_week = Column(Integer, nullable=False)  # 1 = Monday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    room = Column(String(50))
    activity_name = Column(String(100))

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 1 AND 7", name="ck_schedule_day_of_week"),
        Index("idx_schedule_class_day", "class_id", "day_of_week"),
    )


class LessonLog(Base):
    __tablename__ = "lesson_logs"

    school_id = Column(Uuid(as_uuid=True), ForeignKey("schools.id"), nullable=False, index=True)
    class_id = Column(Uuid(as_uuid=True), ForeignKey("classes.id"), nullable=False)
    subject_id = Column(Uuid(as_uuid=True), ForeignKey("subjects.id"), nullable=False)
    teacher_id = Column(Uuid(as_uuid=True), ForeignKey("teachers.id"))

    lesson_date = Column(Date, nullable=False)
    start_time = Column(Time)
    end_time = Column(Time)
    topic = Column(String(200), nullable=False)
    content = Column(Text)
    homework = Column(Text)
    resources = Column(Text)

    __table_args__ = (
        Index("idx_lesson_log_class_date", "class_id", "lesson_date"),
    )
