# services/user_management/models/departments.py
from sqlalchemy import Column, String, DateTime, Uuid
from sqlalchemy.sql import func
from shared.db import Base
import uuid


class Department(Base):
    __tablename__ = "departments"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(120), nullable=False)
    code = Column(String(20), unique=True, nullable=False)  # E.g., "CSE", "ECE"
    created_at = Column(DateTime(timezone=True), server_default=func.now())
