# ecogest/schemas/people_schemas.py
"""Students and teachers."""
from datetime import date
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class StudentBase(BaseModel):
    class_id: Optional[UUID] = None
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    date_of_birth: Optional[date] = None
    place_of_birth: Optional[str] = Field(default=None, max_length=100)
    gender: Optional[str] = Field(default=None, pattern=r'^(M|F)$')
    address: Optional[str] = Field(default=None, max_length=500)
    phone: Optional[str] = Field(default=None, max_length=20)
    parent_first_name: Optional[str] = Field(default=None, max_length=100)
    parent_last_name: Optional[str] = Field(default=None, max_length=100)
    parent_phone: Optional[str] = Field(default=None, max_length=20)
    parent_email: Optional[EmailStr] = None
    enrollment_date: Optional[date] = None


class StudentCreate(StudentBase):
    # Left empty, the next matricule is issued
    student_number: Optional[str] = Field(default=None, max_length=60)


class StudentUpdate(BaseModel):
    class_id: Optional[UUID] = None
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    date_of_birth: Optional[date] = None
    place_of_birth: Optional[str] = Field(default=None, max_length=100)
    gender: Optional[str] = Field(default=None, pattern=r'^(M|F)$')
    address: Optional[str] = Field(default=None, max_length=500)
    phone: Optional[str] = Field(default=None, max_length=20)
    parent_first_name: Optional[str] = Field(default=None, max_length=100)
    parent_last_name: Optional[str] = Field(default=None, max_length=100)
    parent_phone: Optional[str] = Field(default=None, max_length=20)
    parent_email: Optional[EmailStr] = None
    is_active: Optional[bool] = None


class TeacherBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=500)
    specialization: Optional[str] = Field(default=None, max_length=100)
    hire_date: Optional[date] = None


class TeacherCreate(TeacherBase):
    employee_number: Optional[str] = Field(default=None, max_length=60)


class TeacherUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=500)
    specialization: Optional[str] = Field(default=None, max_length=100)
    hire_date: Optional[date] = None
    is_active: Optional[bool] = None
