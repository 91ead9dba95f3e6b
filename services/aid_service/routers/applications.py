"""Applicant-facing application routes for the Aid Service."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Request, status
from libs.auth.models import AuthUser
from libs.common.rate_limit import limiter
from libs.db.session import get_async_db
from services.aid_service.routers._shared import get_current_identity
from services.aid_service.schemas import (
    ApplicantStats,
    ApplicationResponse,
    ApplicationSubmit,
    IntakeStepRequest,
    IntakeStepResponse,
)
from services.aid_service.services import dashboard, storage
from services.aid_service.services.intake import submit_application, validate_step
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/api/applications", tags=["applications"])


@router.get("", response_model=list[ApplicationResponse])
async def list_my_applications(
    current_user: AuthUser = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_db),
):
    """The caller's applications, newest first."""
    return await storage.list_applications(db, current_user.user_id)


@router.get("/stats", response_model=ApplicantStats)
async def my_application_stats(
    current_user: AuthUser = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_db),
):
    counts = await storage.count_applications_by_status(db, current_user.user_id)
    return dashboard.applicant_stats(counts)


@router.post("/validate", response_model=IntakeStepResponse)
async def validate_intake_step(
    step_in: IntakeStepRequest,
    current_user: AuthUser = Depends(get_current_identity),
):
    """Check one intake step; 400 with field errors when it is incomplete."""
    next_step = validate_step(step_in.step, step_in.data)
    return IntakeStepResponse(step=step_in.step, next_step=next_step.value)


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_my_application(
    application_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_db),
):
    application = await storage.get_application(db, application_id)
    if not application:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Application not found",
        )
    if application.user_id != current_user.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )
    return application


@router.post(
    "", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED
)
@limiter.limit("20/hour")
async def create_application(
    request: Request,
    submission: ApplicationSubmit,
    current_user: AuthUser = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Submit an application, optionally with a newly verified bank account.
    The new application is always pending.
    """
    return await submit_application(db, current_user.user_id, submission)
