"""Aid Service models package."""

from services.aid_service.models.core import (
    Application,
    BankDetails,
    User,
    UserProfile,
)
from services.aid_service.models.enums import (
    ApplicationStatus,
    Country,
    Currency,
    UserRole,
    VerificationStatus,
)

__all__ = [
    "Application",
    "ApplicationStatus",
    "BankDetails",
    "Country",
    "Currency",
    "User",
    "UserProfile",
    "UserRole",
    "VerificationStatus",
]
