# services/section_management/controllers/section_service.py
from typing import List, Optional
import uuid

from sqlalchemy import and_, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import aliased

from services.section_management.models.sections import Section
from services.section_management.schemas.sections import (
    DepartmentSummary,
    SectionCreate,
    SectionOut,
    SectionUpdate,
    TeacherSummary,
    UniqueSection,
)
from services.user_management.models.departments import Department
from services.user_management.models.users import PortalUser, UserRole
from shared.exceptions import AuthorizationError, NotFoundError, StorageError, ValidationError
from shared.logging_config import logger
from shared.policy import Action, department_scope, is_allowed

Teacher = aliased(PortalUser, name="teacher")

SECTION_NOT_FOUND = "Section not found"


def _as_uuid(value) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def _shape(section: Section, department: Optional[Department], teacher: Optional[PortalUser]) -> SectionOut:
    """Build the response struct; dangling references come back as None."""
    return SectionOut(
        id=section.id,
        name=section.name,
        year=section.year,
        department_id=section.department_id,
        teacher_id=section.teacher_id,
        department=DepartmentSummary.model_validate(department) if department else None,
        teacher=TeacherSummary.model_validate(teacher) if teacher else None,
        created_at=section.created_at,
        updated_at=section.updated_at,
    )


class SectionService:
    """
    Section CRUD with department scoping and reference resolution.

    One instance per request, bound to that request's session.
    """

    def __init__(self, db: AsyncSession, scope_reads: bool = False):
        self.db = db
        self.scope_reads = scope_reads

    def _populated(self, with_teacher: bool = True):
        if with_teacher:
            return (
                select(Section, Department, Teacher)
                .outerjoin(Department, Department.id == Section.department_id)
                .outerjoin(Teacher, Teacher.id == Section.teacher_id)
            )
        return (
            select(Section, Department)
            .outerjoin(Department, Department.id == Section.department_id)
        )

    async def _fetch(self, stmt, with_teacher: bool = True) -> List[SectionOut]:
        result = await self.db.execute(stmt.execution_options(populate_existing=True))
        if with_teacher:
            return [_shape(section, department, teacher) for section, department, teacher in result.all()]
        return [_shape(section, department, None) for section, department in result.all()]

    async def _fetch_one(self, section_id: uuid.UUID) -> Optional[SectionOut]:
        rows = await self._fetch(self._populated().where(Section.id == section_id))
        return rows[0] if rows else None

    async def _reload(self, section_id: uuid.UUID, message: str) -> SectionOut:
        """Re-read a just-written section with its references resolved."""
        try:
            section = await self._fetch_one(section_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to re-read section %s", section_id)
            raise StorageError(message, str(e))
        # Removed by another request between the write and the re-read
        if section is None:
            raise NotFoundError(SECTION_NOT_FOUND)
        return section

    @staticmethod
    def _require(caller: dict, action: Action) -> None:
        if not is_allowed(caller, action):
            logger.warning("Denied %s on sections for role %s", action.value, caller.get("role"))
            raise AuthorizationError("Access denied. Super admin privileges required.")

    # --- LIST ---
    async def list_sections(self, caller: dict) -> List[SectionOut]:
        stmt = self._populated()
        scope = department_scope(caller, Action.LIST, self.scope_reads)
        if scope is not None:
            scope_id = _as_uuid(scope)
            if scope_id is None:
                return []
            stmt = stmt.where(Section.department_id == scope_id)

        try:
            sections = await self._fetch(stmt.order_by(Section.year, Section.name))
        except SQLAlchemyError as e:
            logger.exception("Failed to list sections")
            raise StorageError("Error fetching sections", str(e))

        logger.debug("Listed %d sections (scope=%s)", len(sections), scope or "all")
        return sections

    # --- LIST BY TEACHER ---
    async def list_by_teacher(self, caller: dict, teacher_id) -> List[SectionOut]:
        teacher_uuid = _as_uuid(teacher_id)
        if teacher_uuid is None:
            return []

        stmt = self._populated(with_teacher=False).where(Section.teacher_id == teacher_uuid)
        scope = department_scope(caller, Action.LIST_BY_TEACHER, self.scope_reads)
        if scope is not None:
            scope_id = _as_uuid(scope)
            if scope_id is None:
                return []
            stmt = stmt.where(Section.department_id == scope_id)

        try:
            return await self._fetch(stmt.order_by(Section.year, Section.name), with_teacher=False)
        except SQLAlchemyError as e:
            logger.exception("Failed to list sections for teacher %s", teacher_id)
            raise StorageError("Error fetching teacher sections", str(e))

    # --- GET ---
    async def get_section(self, caller: dict, section_id) -> SectionOut:
        section_uuid = _as_uuid(section_id)
        if section_uuid is None:
            raise NotFoundError(SECTION_NOT_FOUND)

        try:
            section = await self._fetch_one(section_uuid)
        except SQLAlchemyError as e:
            logger.exception("Failed to fetch section %s", section_id)
            raise StorageError("Error fetching section", str(e))

        # Out-of-scope sections are reported as missing rather than forbidden
        if section is None or not is_allowed(caller, Action.READ, section, self.scope_reads):
            raise NotFoundError(SECTION_NOT_FOUND)
        return section

    # --- CREATE ---
    async def create_section(self, caller: dict, payload: SectionCreate) -> SectionOut:
        self._require(caller, Action.CREATE)

        section = Section(**payload.model_dump())
        self.db.add(section)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ValidationError("Error creating section", str(e.orig))
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Failed to create section")
            raise StorageError("Error creating section", str(e))

        logger.info("Section %s created (%s, year %s)", section.id, section.name, section.year)
        return await self._reload(section.id, "Error creating section")

    # --- UPDATE ---
    async def update_section(self, caller: dict, section_id, payload: SectionUpdate) -> SectionOut:
        self._require(caller, Action.UPDATE)

        section_uuid = _as_uuid(section_id)
        if section_uuid is None:
            raise NotFoundError(SECTION_NOT_FOUND)

        try:
            section = await self.db.get(Section, section_uuid)
        except SQLAlchemyError as e:
            logger.exception("Failed to load section %s for update", section_id)
            raise StorageError("Error updating section", str(e))
        if section is None:
            raise NotFoundError(SECTION_NOT_FOUND)

        changes = payload.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(section, field, value)

        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise ValidationError("Error updating section", str(e.orig))
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Failed to update section %s", section_id)
            raise StorageError("Error updating section", str(e))

        logger.info("Section %s updated (%s)", section.id, ", ".join(sorted(changes)) or "no changes")
        return await self._reload(section.id, "Error updating section")

    # --- DELETE ---
    async def delete_section(self, caller: dict, section_id) -> None:
        self._require(caller, Action.DELETE)

        section_uuid = _as_uuid(section_id)
        if section_uuid is None:
            raise NotFoundError(SECTION_NOT_FOUND)

        try:
            section = await self.db.get(Section, section_uuid)
            if section is None:
                raise NotFoundError(SECTION_NOT_FOUND)
            await self.db.delete(section)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Failed to delete section %s", section_id)
            raise StorageError("Error deleting section", str(e))

        logger.info("Section %s deleted", section_uuid)


async def unique_sections(db: AsyncSession) -> List[UniqueSection]:
    """
    Distinct (year, section, semester, academic_year) tuples over students.

    `current_semester` wins over the legacy `semester` column. Students missing
    any of the four values are left out.
    """
    semester = func.coalesce(PortalUser.current_semester, PortalUser.semester)
    stmt = (
        select(PortalUser.year, PortalUser.section, semester.label("semester"), PortalUser.academic_year)
        .where(
            and_(
                PortalUser.role == UserRole.STUDENT,
                PortalUser.year.is_not(None),
                PortalUser.section.is_not(None),
                PortalUser.academic_year.is_not(None),
                semester.is_not(None),
            )
        )
        .group_by(PortalUser.year, PortalUser.section, semester, PortalUser.academic_year)
        .order_by(PortalUser.academic_year, PortalUser.year, PortalUser.section, semester)
    )

    try:
        result = await db.execute(stmt)
    except SQLAlchemyError as e:
        logger.exception("Failed to aggregate unique sections")
        raise StorageError("Error fetching unique sections", str(e))

    rows = [
        UniqueSection(year=year, section=section, semester=sem, academic_year=academic_year)
        for year, section, sem, academic_year in result.all()
    ]
    logger.debug("Aggregated %d unique sections", len(rows))
    return rows
