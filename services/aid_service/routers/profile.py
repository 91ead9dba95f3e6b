"""Profile router for the Aid Service."""

from fastapi import APIRouter, Depends, HTTPException, status
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.aid_service.routers._shared import get_current_identity
from services.aid_service.schemas import ProfileResponse, ProfileUpsert
from services.aid_service.services import storage
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse)
async def get_my_profile(
    current_user: AuthUser = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_db),
):
    profile = await storage.get_profile(db, current_user.user_id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return profile


@router.put("", response_model=ProfileResponse)
async def upsert_my_profile(
    profile_in: ProfileUpsert,
    current_user: AuthUser = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Create the caller's profile, or update only the fields sent in the body.
    The role is never taken from the request.
    """
    # Only fields present in the body overwrite an existing profile
    profile = await storage.update_profile(
        db, current_user.user_id, **profile_in.model_dump(exclude_unset=True)
    )
    if profile is None:
        profile = await storage.create_profile(
            db, user_id=current_user.user_id, **profile_in.model_dump()
        )
        logger.info("Created profile for %s", current_user.user_id)
    return profile
