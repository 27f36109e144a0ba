# services/user_management/api/auth_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from services.user_management.schemas.users import LoginRequest
from services.user_management.controllers.auth_service import login_user
from shared.db import get_db

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login")
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)):
    data = await login_user(payload, db)
    return {"success": True, "data": data}
