# ecogest/schemas/account_schemas.py
from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    identifier: str = Field(..., min_length=3, description="Admin email, matricule@suffix or auth email")
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str
    school_id: Optional[str] = None


class AccountCreate(BaseModel):
    """create-user-account payload; email is ``matricule@suffix``."""
    email: str = Field(..., description="e.g. Eleve001@ecole_best")
    password: str = Field(..., min_length=6, max_length=128)
    role: str = Field(..., pattern=r'^(student|teacher|parent|school_admin)$')
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)


class AccountIssue(BaseModel):
    role: str = Field(..., pattern=r'^(student|teacher|parent|school_admin)$')
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    password: Optional[str] = Field(default=None, min_length=6, max_length=128)
    phone: Optional[str] = Field(default=None, max_length=20)


class BackfillRequest(BaseModel):
    role: str = Field(..., pattern=r'^(student|teacher)$')
    password: Optional[str] = Field(default=None, min_length=6, max_length=128)


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6, max_length=128)


class IdentifierRequest(BaseModel):
    role: str = Field(..., pattern=r'^(student|teacher|parent|school_admin)$')
