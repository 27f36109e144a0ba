# services/user_management/models/users.py
from sqlalchemy import Column, String, Enum, ForeignKey, DateTime, Boolean, Integer, Index, Uuid
from sqlalchemy.sql import func
from shared.db import Base
import enum
import uuid


class UserRole(str, enum.Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"
    SUPER_ADMIN = "super-admin"


class PortalUser(Base):
    __tablename__ = "portal_users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(
        Enum(UserRole, name="user_role", values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
    )
    department_id = Column(Uuid, ForeignKey("departments.id"), nullable=True)

    # Student-only academic placement
    year = Column(Integer, nullable=True)
    section = Column(String(20), nullable=True)        # E.g., "A", "B"
    academic_year = Column(String(20), nullable=True)  # E.g., "2024-25"
    semester = Column(Integer, nullable=True)          # legacy, superseded by current_semester
    current_semester = Column(Integer, nullable=True)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_portal_user_department_role", "department_id", "role"),
        Index("idx_portal_user_role_placement", "role", "year", "section", "academic_year"),
    )
