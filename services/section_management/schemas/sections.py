# services/section_management/schemas/sections.py
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DepartmentSummary(BaseModel):
    id: UUID
    name: str
    code: str

    model_config = ConfigDict(from_attributes=True)


class TeacherSummary(BaseModel):
    id: UUID
    first_name: str
    last_name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class SectionCreate(BaseModel):
    name: str = Field(..., max_length=50)
    year: int = Field(..., ge=1)
    department_id: UUID
    teacher_id: UUID

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Section name cannot be empty")
        return value


class SectionUpdate(BaseModel):
    """Partial update; omitted fields are left untouched, explicit nulls are rejected."""

    name: Optional[str] = Field(None, max_length=50)
    year: Optional[int] = Field(None, ge=1)
    department_id: Optional[UUID] = None
    teacher_id: Optional[UUID] = None

    @field_validator("name", "year", "department_id", "teacher_id")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field may not be null")
        return value

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Section name cannot be empty")
        return value


class SectionOut(BaseModel):
    id: UUID
    name: str
    year: int
    department_id: UUID
    teacher_id: UUID
    department: Optional[DepartmentSummary] = None
    teacher: Optional[TeacherSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UniqueSection(BaseModel):
    year: int
    section: str
    semester: int
    academic_year: str = Field(..., serialization_alias="academicYear")
