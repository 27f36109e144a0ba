# services/section_management/models/sections.py
from sqlalchemy import Column, String, ForeignKey, DateTime, Integer, Index, Uuid
from sqlalchemy.sql import func
from shared.db import Base
import uuid


class Section(Base):
    __tablename__ = "sections"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(50), nullable=False)
    year = Column(Integer, nullable=False)
    department_id = Column(Uuid, ForeignKey("departments.id"), nullable=False)
    teacher_id = Column(Uuid, ForeignKey("portal_users.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_sections_department_id", "department_id"),
        Index("ix_sections_teacher_id", "teacher_id"),
    )
