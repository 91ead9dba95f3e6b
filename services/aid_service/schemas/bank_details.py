"""Bank details schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator
from services.aid_service.models.enums import Country, VerificationStatus
from services.aid_service.schemas.base import CamelModel

SORT_CODE_MIN_LENGTH = 6
ROUTING_NUMBER_MIN_LENGTH = 9


class BankAccountInput(CamelModel):
    """Account fields shared by verification and creation."""

    country: Country
    bank_name: str = Field(..., min_length=2, max_length=100)
    account_number: str = Field(..., min_length=6, max_length=34)
    sort_code: Optional[str] = Field(default=None, max_length=12)
    routing_number: Optional[str] = Field(default=None, max_length=12)

    @field_validator("bank_name", "account_number", "sort_code", "routing_number")
    @classmethod
    def strip_whitespace(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        return v or None

    @model_validator(mode="after")
    def require_country_routing(self):
        """UK accounts need a sort code, US accounts a routing number."""
        if self.country == Country.UK:
            if not self.sort_code or len(self.sort_code) < SORT_CODE_MIN_LENGTH:
                raise ValueError(
                    "UK accounts require a sort code of at least 6 characters"
                )
            self.routing_number = None
        elif self.country == Country.USA:
            if (
                not self.routing_number
                or len(self.routing_number) < ROUTING_NUMBER_MIN_LENGTH
            ):
                raise ValueError(
                    "US accounts require a routing number of at least 9 characters"
                )
            self.sort_code = None
        return self


class BankDetailsCreate(BankAccountInput):
    # Set only when the account went through verification
    account_holder_name: Optional[str] = Field(default=None, max_length=200)


class BankVerifyRequest(BankAccountInput):
    pass


class BankVerifyResponse(CamelModel):
    account_holder_name: str
    is_verified: VerificationStatus = VerificationStatus.VERIFIED


class BankDetailsResponse(CamelModel):
    """Bank details as shown to users; the account number is reduced to its last 4 digits."""

    id: uuid.UUID
    user_id: str
    country: Country
    bank_name: str
    account_number_last4: str
    sort_code: Optional[str] = None
    routing_number: Optional[str] = None
    account_holder_name: Optional[str] = None
    is_verified: VerificationStatus
    created_at: datetime
    updated_at: datetime
