"""Admin review routes for the Aid Service."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from libs.auth.models import AuthUser
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from libs.db.session import get_async_db
from services.aid_service.errors import AidServiceError, RejectionReasonRequired
from services.aid_service.models import ApplicationStatus
from services.aid_service.routers._shared import require_admin_identity
from services.aid_service.schemas import (
    AdminApplicationResponse,
    AdminStats,
    ApplicationResponse,
    ApplicationUpdate,
)
from services.aid_service.services import dashboard, storage
from services.aid_service.workflow import available_actions, next_state
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(prefix="/api/admin/applications", tags=["admin"])


@router.get("", response_model=list[AdminApplicationResponse])
async def list_all_applications(
    response: Response,
    search: Optional[str] = Query(None, max_length=200),
    status_filter: Optional[str] = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    admin: AuthUser = Depends(require_admin_identity),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Every application with its applicant and bank details, newest first.

    ``status=all`` (or no status) disables the status filter. The unpaged
    total is returned in ``X-Total-Count``.
    """
    try:
        app_status = dashboard.parse_status_filter(status_filter)
    except ValueError:
        allowed = [dashboard.ALL_STATUSES] + [s.value for s in ApplicationStatus]
        raise AidServiceError(
            "Invalid data",
            errors=[
                {
                    "field": "status",
                    "message": (
                        f"Unknown status filter '{status_filter}'; "
                        f"expected one of: {', '.join(allowed)}"
                    ),
                    "type": "enum",
                }
            ],
        )

    page = await storage.list_applications_with_details(
        db, search=search, status=app_status, limit=limit, offset=offset
    )
    response.headers["X-Total-Count"] = str(page.total)
    return [
        AdminApplicationResponse.model_validate(application).model_copy(
            update={"available_actions": available_actions(application.status)}
        )
        for application in page.items
    ]


@router.get("/stats", response_model=AdminStats)
async def application_stats(
    admin: AuthUser = Depends(require_admin_identity),
    db: AsyncSession = Depends(get_async_db),
):
    counts = await storage.count_applications_by_status(db)
    return dashboard.admin_stats(counts)


@router.patch("/{application_id}", response_model=ApplicationResponse)
async def update_application(
    application_id: uuid.UUID,
    update_in: ApplicationUpdate,
    admin: AuthUser = Depends(require_admin_identity),
    db: AsyncSession = Depends(get_async_db),
):
    """
    Move an application through the review workflow and/or edit its notes.

    Status changes stamp the reviewer; moving to paid records the payout.
    A notes-only update leaves the reviewer fields alone, and cannot blank
    the reason on a rejected application.
    """
    application = await storage.get_application(db, application_id)
    if not application:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Application not found",
        )

    if update_in.status is None:
        if update_in.admin_notes is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Nothing to update",
            )
        notes = update_in.admin_notes.strip()
        # A rejected application must keep a rejection reason
        if application.status == ApplicationStatus.REJECTED and not notes:
            raise RejectionReasonRequired()
        return await storage.update_application(
            db,
            application,
            expected_version=update_in.version,
            admin_notes=notes or None,
        )

    previous = application.status
    result = next_state(
        previous,
        update_in.status,
        admin.user_id,
        now=utc_now(),
        amount_requested=application.amount_requested,
        admin_notes=update_in.admin_notes,
    )
    application = await storage.update_application(
        db,
        application,
        expected_version=update_in.version,
        **result.as_update(),
    )
    logger.info(
        "Application %s moved from %s to %s by %s",
        application.id,
        previous.value,
        application.status.value,
        admin.user_id,
    )
    return application
