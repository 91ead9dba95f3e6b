"""Dependencies shared by the aid service routers."""

from fastapi import Depends, HTTPException, status
from libs.auth.dependencies import get_current_user, is_admin
from libs.auth.models import AuthUser
from libs.common.config import get_settings
from libs.db.session import get_async_db
from services.aid_service.models import UserRole
from services.aid_service.services import storage
from sqlalchemy.ext.asyncio import AsyncSession


async def get_current_identity(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
) -> AuthUser:
    """Authenticated caller, mirrored into the local users table."""
    await storage.upsert_user(db, current_user)
    return current_user


async def require_admin_identity(
    current_user: AuthUser = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_db),
) -> AuthUser:
    """
    Admin gate for review routes.

    Passes on an admin claim, the configured admin email or a profile whose
    role is admin. With ENFORCE_ADMIN_ROLE off any signed-in user passes.
    """
    if not get_settings().ENFORCE_ADMIN_ROLE or is_admin(current_user):
        return current_user

    profile = await storage.get_profile(db, current_user.user_id)
    if profile is not None and profile.role == UserRole.ADMIN:
        return current_user

    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Admin privileges required",
    )
