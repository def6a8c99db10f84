# ecogest/schemas/academic_schemas.py
"""Classes, subjects, exams, grades, schedules and lesson logs."""
from datetime import date, time
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class ClassCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    level: str = Field(..., min_length=1, max_length=30)
    section: Optional[str] = Field(default=None, max_length=10)
    capacity: Optional[int] = Field(default=40, gt=0)
    academic_year: str = Field(..., pattern=r'^\d{4}/\d{4}$')


class ClassUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    level: Optional[str] = Field(default=None, min_length=1, max_length=30)
    section: Optional[str] = Field(default=None, max_length=10)
    capacity: Optional[int] = Field(default=None, gt=0)
    academic_year: Optional[str] = Field(default=None, pattern=r'^\d{4}/\d{4}$')


class SubjectCreate(BaseModel):
    class_id: Optional[UUID] = None
    name: str = Field(..., min_length=1, max_length=100)
    abbreviation: Optional[str] = Field(default=None, max_length=10)
    code: Optional[str] = Field(default=None, max_length=20)
    coefficient: float = Field(default=1, gt=0, le=20)
    max_score: int = Field(default=20, gt=0, le=100)
    hours_per_week: Optional[int] = Field(default=0, ge=0)
    color: Optional[str] = Field(default="#3B82F6", pattern=r'^#[0-9A-Fa-f]{6}$')


class SubjectUpdate(BaseModel):
    class_id: Optional[UUID] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    abbreviation: Optional[str] = Field(default=None, max_length=10)
    code: Optional[str] = Field(default=None, max_length=20)
    coefficient: Optional[float] = Field(default=None, gt=0, le=20)
    max_score: Optional[int] = Field(default=None, gt=0, le=100)
    hours_per_week: Optional[int] = Field(default=None, ge=0)
    color: Optional[str] = Field(default=None, pattern=r'^#[0-9A-Fa-f]{6}$')


class ExamCreate(BaseModel):
    class_id: UUID
    subject_id: Optional[UUID] = None
    teacher_id: Optional[UUID] = None
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    exam_date: date
    semester: Optional[str] = Field(default=None, max_length=20)
    total_points: int = Field(default=20, gt=0)
    is_published: bool = False


class ExamUpdate(BaseModel):
    subject_id: Optional[UUID] = None
    teacher_id: Optional[UUID] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    exam_date: Optional[date] = None
    semester: Optional[str] = Field(default=None, max_length=20)
    total_points: Optional[int] = Field(default=None, gt=0)


class GradeCreate(BaseModel):
    student_id: UUID
    subject_id: UUID
    exam_id: Optional[UUID] = None
    exam_type: str = Field(default="devoir", max_length=20)
    semester: Optional[str] = Field(default=None, max_length=20)
    grade_value: float = Field(..., ge=0)
    max_grade: float = Field(default=20, gt=0)
    coefficient: Optional[float] = Field(default=None, gt=0)


class GradeUpdate(BaseModel):
    grade_value: Optional[float] = Field(default=None, ge=0)
    max_grade: Optional[float] = Field(default=None, gt=0)
    coefficient: Optional[float] = Field(default=None, gt=0)
    exam_type: Optional[str] = Field(default=None, max_length=20)
    semester: Optional[str] = Field(default=None, max_length=20)


class GradeBulk(BaseModel):
    grades: List[GradeCreate] = Field(..., min_length=1, max_length=2000)


class ScheduleCreate(BaseModel):
    class_id: UUID
    subject_id: Optional[UUID] = None
    teacher_id: Optional[UUID] = None
    day_of_week: int = Field(..., ge=1, le=7)
    start_time: time
    end_time: time
    room: Optional[str] = Field(default=None, max_length=50)
    activity_name: Optional[str] = Field(default=None, max_length=100)

    @model_validator(mode='after')
    def check_slot(self):
        if self.subject_id is None and not self.activity_name:
            raise ValueError('Either subject_id or activity_name is required')
        return self


class ScheduleUpdate(BaseModel):
    subject_id: Optional[UUID] = None
    teacher_id: Optional[UUID] = None
    day_of_week: Optional[int] = Field(default=None, ge=1, le=7)
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    room: Optional[str] = Field(default=None, max_length=50)
    activity_name: Optional[str] = Field(default=None, max_length=100)


class LessonLogCreate(BaseModel):
    class_id: UUID
    subject_id: UUID
    teacher_id: Optional[UUID] = None
    lesson_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    topic: str = Field(..., min_length=1, max_length=200)
    content: Optional[str] = None
    homework: Optional[str] = None
    resources: Optional[str] = None


class LessonLogUpdate(BaseModel):
    lesson_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    topic: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = None
    homework: Optional[str] = None
    resources: Optional[str] = None
