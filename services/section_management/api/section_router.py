# services/section_management/api/section_router.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.section_management.controllers.section_service import SectionService, unique_sections
from services.section_management.schemas.sections import SectionCreate, SectionUpdate
from shared.auth import (
    caller_from_token,
    get_current_super_admin_user,
    get_current_user,
    optional_oauth2_scheme,
)
from shared.db import get_db

router = APIRouter(prefix="/sections", tags=["Sections"])


def get_section_service(request: Request, db: AsyncSession = Depends(get_db)) -> SectionService:
    return SectionService(db, scope_reads=request.app.state.settings.scope_section_reads)


# --- LIST SECTIONS (department-scoped unless super-admin) ---
@router.get("")
async def list_sections(
    service: SectionService = Depends(get_section_service),
    current_user: dict = Depends(get_current_user)
):
    sections = await service.list_sections(current_user)
    return {"success": True, "data": {"sections": [s.model_dump(mode="json") for s in sections]}}


# --- SECTIONS TAUGHT BY A TEACHER ---
@router.get("/teacher/{teacher_id}")
async def list_teacher_sections(
    teacher_id: str,
    service: SectionService = Depends(get_section_service),
    current_user: dict = Depends(get_current_user)
):
    sections = await service.list_by_teacher(current_user, teacher_id)
    return {"success": True, "data": {"sections": [s.model_dump(mode="json") for s in sections]}}


# --- DISTINCT CLASS SECTIONS POPULATED BY STUDENTS ---
@router.get("/unique")
async def list_unique_sections(
    request: Request,
    db: AsyncSession = Depends(get_db),
    token: Optional[str] = Depends(optional_oauth2_scheme)
):
    # Open by default: any bearer token is ignored unless auth is switched on
    if request.app.state.settings.require_auth_for_unique_sections:
        if not token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated",
                headers={"WWW-Authenticate": "Bearer"},
            )
        caller_from_token(token)

    rows = await unique_sections(db)
    return {"success": True, "sections": [row.model_dump(by_alias=True) for row in rows]}


# --- GET SECTION ---
@router.get("/{section_id}")
async def get_section(
    section_id: str,
    service: SectionService = Depends(get_section_service),
    current_user: dict = Depends(get_current_user)
):
    section = await service.get_section(current_user, section_id)
    return {"success": True, "data": {"section": section.model_dump(mode="json")}}


# --- CREATE SECTION (super-admin only) ---
@router.post("", status_code=status.HTTP_201_CREATED)
async def create_section(
    payload: SectionCreate,
    service: SectionService = Depends(get_section_service),
    current_user: dict = Depends(get_current_super_admin_user)
):
    section = await service.create_section(current_user, payload)
    return {"success": True, "data": {"section": section.model_dump(mode="json")}}


# --- UPDATE SECTION (super-admin only) ---
@router.put("/{section_id}")
async def update_section(
    section_id: str,
    payload: SectionUpdate,
    service: SectionService = Depends(get_section_service),
    current_user: dict = Depends(get_current_super_admin_user)
):
    section = await service.update_section(current_user, section_id, payload)
    return {"success": True, "data": {"section": section.model_dump(mode="json")}}


# --- DELETE SECTION (super-admin only) ---
@router.delete("/{section_id}")
async def delete_section(
    section_id: str,
    service: SectionService = Depends(get_section_service),
    current_user: dict = Depends(get_current_super_admin_user)
):
    await service.delete_section(current_user, section_id)
    return {"success": True, "message": "Section deleted successfully"}
