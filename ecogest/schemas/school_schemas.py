# ecogest/schemas/school_schemas.py
"""Pydantic schemas for School registration and settings."""
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

SUFFIX_PATTERN = r'^[a-z0-9_]+$'
PREFIX_PATTERN = r'^[A-Za-z]+$'


class SchoolBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200, description="School name")
    email: EmailStr = Field(..., description="School contact email")
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=500)
    school_type: Optional[str] = Field(default="public", max_length=30)
    slogan: Optional[str] = Field(default=None, max_length=200)
    academic_year: str = Field(default="2024/2025", pattern=r'^\d{4}/\d{4}$')
    semester_type: str = Field(default="semester", pattern=r'^(semester|trimester)$')
    currency: str = Field(default="XOF", min_length=3, max_length=3)
    language: str = Field(default="fr", max_length=5)
    timezone: str = Field(default="Africa/Dakar", max_length=50)


class SchoolCreate(SchoolBase):
    school_suffix: str = Field(..., min_length=2, max_length=50, pattern=SUFFIX_PATTERN,
                               description="Login suffix, e.g. ecole_best")

    @field_validator('school_suffix', mode='before')
    @classmethod
    def normalize_suffix(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class AdminCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)


class SchoolRegistration(BaseModel):
    school: SchoolCreate
    admin: AdminCreate


class SchoolUpdate(BaseModel):
    """All fields optional; changing school_suffix renames every login."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=500)
    school_type: Optional[str] = Field(default=None, max_length=30)
    slogan: Optional[str] = Field(default=None, max_length=200)
    logo_url: Optional[str] = Field(default=None, max_length=500)
    school_suffix: Optional[str] = Field(default=None, min_length=2, max_length=50, pattern=SUFFIX_PATTERN)
    academic_year: Optional[str] = Field(default=None, pattern=r'^\d{4}/\d{4}$')
    semester_type: Optional[str] = Field(default=None, pattern=r'^(semester|trimester)$')
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    language: Optional[str] = Field(default=None, max_length=5)
    timezone: Optional[str] = Field(default=None, max_length=50)

    # Omit a field to leave it unchanged; these columns cannot be cleared
    @field_validator('name', 'email', 'school_suffix', 'academic_year', 'semester_type',
                     'currency', 'language', 'timezone', mode='before')
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class MatriculeSettings(BaseModel):
    student_matricule_format: Optional[str] = Field(default=None, min_length=1, max_length=20, pattern=PREFIX_PATTERN)
    teacher_matricule_format: Optional[str] = Field(default=None, min_length=1, max_length=20, pattern=PREFIX_PATTERN)
    parent_matricule_format: Optional[str] = Field(default=None, min_length=1, max_length=20, pattern=PREFIX_PATTERN)
    default_student_password: Optional[str] = Field(default=None, min_length=6, max_length=100)
    default_teacher_password: Optional[str] = Field(default=None, min_length=6, max_length=100)
    default_parent_password: Optional[str] = Field(default=None, min_length=6, max_length=100)
    auto_generate_student_matricule: Optional[bool] = None
    auto_generate_teacher_matricule: Optional[bool] = None
    auto_generate_parent_matricule: Optional[bool] = None

    @field_validator('*', mode='before')
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class IdentifierSyncRequest(BaseModel):
    old_suffix: str = Field(..., min_length=1)
    new_suffix: str = Field(..., min_length=1, pattern=SUFFIX_PATTERN)


class SchoolDeleteRequest(BaseModel):
    admin_password: str = Field(..., min_length=1)
