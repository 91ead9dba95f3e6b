"""Enum definitions for aid service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class ApplicationStatus(str, enum.Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"


class Country(str, enum.Enum):
    UK = "UK"
    USA = "USA"


class Currency(str, enum.Enum):
    GBP = "GBP"
    USD = "USD"


class UserRole(str, enum.Enum):
    BENEFICIARY = "beneficiary"
    ADMIN = "admin"


class VerificationStatus(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    FAILED = "failed"
