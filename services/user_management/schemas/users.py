from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional
from enum import Enum
from uuid import UUID


class UserRole(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"
    SUPER_ADMIN = "super-admin"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class PortalUserOut(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    email: EmailStr
    role: UserRole
    department_id: Optional[UUID]
    year: Optional[int] = None
    section: Optional[str] = None
    academic_year: Optional[str] = None
    current_semester: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)
