"""Application schemas."""

import uuid
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import Field
from services.aid_service.models.enums import ApplicationStatus, Currency
from services.aid_service.schemas.bank_details import (
    BankDetailsCreate,
    BankDetailsResponse,
)
from services.aid_service.schemas.base import AmountInput, CamelModel, Money

REASON_MIN_LENGTH = 20


class RequestDetails(CamelModel):
    """Step one of the intake flow."""

    reason: str = Field(..., min_length=REASON_MIN_LENGTH, max_length=5000)
    amount_requested: AmountInput
    currency: Currency = Currency.GBP


class ApplicationCreate(RequestDetails):
    bank_details_id: Optional[uuid.UUID] = None
    supporting_documents: Optional[list[str]] = Field(default=None, max_length=10)


class ApplicationSubmit(CamelModel):
    """
    Body for POST /api/applications.

    Anything outside these fields (e.g. a ``status``) is ignored.
    """

    application: ApplicationCreate
    bank_details: Optional[BankDetailsCreate] = None


class ApplicationResponse(CamelModel):
    id: uuid.UUID
    user_id: str
    bank_details_id: Optional[uuid.UUID] = None
    reason: str
    amount_requested: Money
    currency: Currency
    supporting_documents: Optional[list[str]] = None
    status: ApplicationStatus
    admin_notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    paid_amount: Optional[Money] = None
    version: int
    created_at: datetime
    updated_at: datetime


class ApplicantSummary(CamelModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class AdminApplicationResponse(ApplicationResponse):
    """Application joined with its owner and bank details for the admin view."""

    user: Optional[ApplicantSummary] = None
    bank_details: Optional[BankDetailsResponse] = None
    available_actions: list[ApplicationStatus] = Field(default_factory=list)


class ApplicationUpdate(CamelModel):
    """Body for PATCH /api/admin/applications/{id}."""

    status: Optional[ApplicationStatus] = None
    admin_notes: Optional[str] = Field(default=None, max_length=5000)
    # Optimistic lock: when given, must match the stored version
    version: Optional[int] = Field(default=None, ge=1)


class IntakeStepRequest(CamelModel):
    step: Literal["request_details", "bank_details"]
    data: dict[str, Any]


class IntakeStepResponse(CamelModel):
    step: str
    valid: bool = True
    next_step: str


class AdminStats(CamelModel):
    """Admin stat cards; ``approved`` counts approved and paid together."""

    total: int = 0
    pending: int = 0
    under_review: int = 0
    approved: int = 0


class ApplicantStats(CamelModel):
    """Applicant dashboard cards; ``pending`` counts pending and under review."""

    total: int = 0
    pending: int = 0
    approved: int = 0
    paid: int = 0
