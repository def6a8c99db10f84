# ecogest/models/tenant_specific/teacher.py
from sqlalchemy import Column, String, Date, Boolean, ForeignKey, Uuid, UniqueConstraint
from ..base import Base


class Teacher(Base):
    __tablename__ = "teachers"

    school_id = Column(Uuid(as_uuid=True), ForeignKey("schools.id"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("auth_users.id"), index=True)

    employee_number = Column(String(60), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(20))
    address = Column(String(500))
    specialization = Column(String(100))
    hire_date = Column(Date)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("school_id", "employee_number", name="uq_teacher_employee_number"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
