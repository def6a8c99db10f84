# ecogest/models/__init__.py
"""Import all models here so Alembic and create_all see every table."""
from .base import Base
from .shared.school import School, SchoolUserCounter, MatriculeGenerationLog
from .shared.account import AuthUser, Profile, UserRole, MATRICULE_ROLES
from .shared.subscription import (
    SubscriptionPlan, Subscription, PaymentTransaction,
    SubscriptionStatus, TransactionStatus,
)
from .shared.audit_log import AuditLog
from .tenant_specific.class_model import ClassModel
from .tenant_specific.student import Student
from .tenant_specific.teacher import Teacher
from .tenant_specific.subject import Subject
from .tenant_specific.exam import Exam
from .tenant_specific.grade import Grade, EXAM_TYPES
from .tenant_specific.announcement import Announcement
from .tenant_specific.payment import PaymentCategory, Payment, PaymentMethod
from .tenant_specific.schedule import Schedule, LessonLog

__all__ = [
    "Base",
    "School", "SchoolUserCounter", "MatriculeGenerationLog",
    "AuthUser", "Profile", "UserRole", "MATRICULE_ROLES",
    "SubscriptionPlan", "Subscription", "PaymentTransaction",
    "SubscriptionStatus", "TransactionStatus",
    "AuditLog",
    "ClassModel", "Student", "Teacher", "Subject", "Exam", "Grade", "EXAM_TYPES",
    "Announcement", "PaymentCategory", "Payment", "PaymentMethod",
    "Schedule", "LessonLog",
]
