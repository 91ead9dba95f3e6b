"""Aid Service schemas package."""

from services.aid_service.schemas.application import (
    AdminApplicationResponse,
    AdminStats,
    ApplicantStats,
    ApplicantSummary,
    ApplicationCreate,
    ApplicationResponse,
    ApplicationSubmit,
    ApplicationUpdate,
    IntakeStepRequest,
    IntakeStepResponse,
    RequestDetails,
)
from services.aid_service.schemas.bank_details import (
    BankAccountInput,
    BankDetailsCreate,
    BankDetailsResponse,
    BankVerifyRequest,
    BankVerifyResponse,
)
from services.aid_service.schemas.profile import ProfileResponse, ProfileUpsert

__all__ = [
    "AdminApplicationResponse",
    "AdminStats",
    "ApplicantStats",
    "ApplicantSummary",
    "ApplicationCreate",
    "ApplicationResponse",
    "ApplicationSubmit",
    "ApplicationUpdate",
    "BankAccountInput",
    "BankDetailsCreate",
    "BankDetailsResponse",
    "BankVerifyRequest",
    "BankVerifyResponse",
    "IntakeStepRequest",
    "IntakeStepResponse",
    "ProfileResponse",
    "ProfileUpsert",
    "RequestDetails",
]
