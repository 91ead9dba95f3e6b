"""Profile schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field
from services.aid_service.models.enums import Country, UserRole
from services.aid_service.schemas.base import CamelModel


class ProfileUpsert(CamelModel):
    """Body for PUT /api/profile. ``role`` is deliberately not accepted."""

    full_name: str = Field(..., min_length=2, max_length=200)
    phone: Optional[str] = Field(default=None, max_length=40)
    country: Country = Country.UK
    address: Optional[str] = None


class ProfileResponse(CamelModel):
    id: uuid.UUID
    user_id: str
    full_name: str
    phone: Optional[str] = None
    country: Country
    address: Optional[str] = None
    role: UserRole
    created_at: datetime
    updated_at: datetime
