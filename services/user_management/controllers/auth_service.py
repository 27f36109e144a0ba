# services/user_management/controllers/auth_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from services.user_management.models.users import PortalUser
from services.user_management.schemas.users import LoginRequest, PortalUserOut
from shared.auth import verify_password, create_access_token
from shared.exceptions import AuthenticationError, AuthorizationError
from shared.logging_config import logger


# --- PORTAL USER LOGIN ---
async def login_user(payload: LoginRequest, db: AsyncSession) -> dict:
    result = await db.execute(select(PortalUser).where(PortalUser.email == payload.email))
    user = result.scalars().first()

    if not user or not verify_password(payload.password, user.hashed_password):
        logger.warning("Login failed for %s", payload.email)
        raise AuthenticationError("Invalid credentials")

    if not user.is_active:
        logger.warning("Login refused for inactive account %s", payload.email)
        raise AuthorizationError("Account is deactivated")

    # Include user_id, role and department in the token
    token_data = {
        "sub": user.email,
        "role": user.role.value,
        "user_id": str(user.id),
        "department_id": str(user.department_id) if user.department_id else None,
    }
    access_token = create_access_token(token_data)

    logger.info("User %s logged in as %s", user.email, user.role.value)
    return {
        "token": access_token,
        "user": PortalUserOut.model_validate(user).model_dump(mode="json"),
    }
