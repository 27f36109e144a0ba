"""
Academic portal backend - test configuration and fixtures
"""
import os
from typing import AsyncGenerator, Callable

import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-only")

from main import create_app
from services.section_management.models.sections import Section
from services.user_management.models.departments import Department
from services.user_management.models.users import PortalUser, UserRole
from shared.auth import create_access_token
from shared.config import Settings
from shared.db import Database

fake = Faker()


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="testing", log_level="WARNING", cors_origins=[])


@pytest.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """Fresh on-disk sqlite database per test"""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.connect()
    await db.create_all()
    yield db
    await db.close()


@pytest.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSession(database.engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def app(settings: Settings, database: Database):
    return create_app(settings=settings, database=database)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def auth_headers_for(user: PortalUser) -> dict:
    token = create_access_token({
        "sub": user.email,
        "role": user.role.value,
        "user_id": str(user.id),
        "department_id": str(user.department_id) if user.department_id else None,
    })
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_department(db_session: AsyncSession) -> Callable:
    async def _make(name: str = None, code: str = None) -> Department:
        department = Department(
            name=name or fake.unique.job()[:100],
            code=code or fake.unique.bothify("???").upper(),
        )
        db_session.add(department)
        await db_session.commit()
        await db_session.refresh(department)
        return department
    return _make


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable:
    async def _make(role: UserRole, department: Department = None, **fields) -> PortalUser:
        fields.setdefault("hashed_password", "unused-hash")
        user = PortalUser(
            first_name=fields.pop("first_name", fake.first_name()),
            last_name=fields.pop("last_name", fake.last_name()),
            email=fields.pop("email", fake.unique.email()),
            role=role,
            department_id=department.id if department else None,
            **fields,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user
    return _make


@pytest.fixture
def make_section(db_session: AsyncSession) -> Callable:
    async def _make(department: Department, teacher: PortalUser, name: str = "A", year: int = 1) -> Section:
        section = Section(name=name, year=year, department_id=department.id, teacher_id=teacher.id)
        db_session.add(section)
        await db_session.commit()
        await db_session.refresh(section)
        return section
    return _make


@pytest.fixture
async def cse(make_department) -> Department:
    return await make_department(name="Computer Science", code="CSE")


@pytest.fixture
async def ece(make_department) -> Department:
    return await make_department(name="Electronics", code="ECE")


@pytest.fixture
async def super_admin(make_user) -> PortalUser:
    return await make_user(UserRole.SUPER_ADMIN)


@pytest.fixture
async def cse_teacher(make_user, cse) -> PortalUser:
    return await make_user(UserRole.TEACHER, cse)


@pytest.fixture
async def ece_teacher(make_user, ece) -> PortalUser:
    return await make_user(UserRole.TEACHER, ece)


@pytest.fixture
async def cse_admin(make_user, cse) -> PortalUser:
    return await make_user(UserRole.ADMIN, cse)


@pytest.fixture
def super_admin_headers(super_admin: PortalUser) -> dict:
    return auth_headers_for(super_admin)


@pytest.fixture
def cse_teacher_headers(cse_teacher: PortalUser) -> dict:
    return auth_headers_for(cse_teacher)


@pytest.fixture
def cse_admin_headers(cse_admin: PortalUser) -> dict:
    return auth_headers_for(cse_admin)
