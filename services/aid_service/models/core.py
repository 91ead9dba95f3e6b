import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.aid_service.models.enums import (
    ApplicationStatus,
    Country,
    Currency,
    UserRole,
    VerificationStatus,
    enum_values,
)
from sqlalchemy import JSON, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

# Shared by profiles and bank details so Postgres gets a single enum type
COUNTRY_ENUM = SAEnum(
    Country,
    name="country_enum",
    values_callable=enum_values,
    validate_strings=True,
)


class User(Base):
    """Local mirror of the identity provider's user record."""

    __tablename__ = "users"

    # Identity provider subject claim
    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String, index=True, nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def __repr__(self):
        return f"<User {self.id}>"


class UserProfile(Base):
    """Charity-specific extension of the identity record. One per user."""

    __tablename__ = "user_profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"), unique=True, index=True, nullable=False
    )
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    country: Mapped[Country] = mapped_column(
        COUNTRY_ENUM,
        default=Country.UK,
        nullable=False,
    )
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(
            UserRole,
            name="user_role_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=UserRole.BENEFICIARY,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )


class BankDetails(Base):
    """A payout destination owned by one user."""

    __tablename__ = "bank_details"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"), index=True, nullable=False
    )
    country: Mapped[Country] = mapped_column(
        COUNTRY_ENUM,
        nullable=False,
    )
    bank_name: Mapped[str] = mapped_column(String, nullable=False)
    # Stored in full; API responses only ever expose the last four digits
    account_number: Mapped[str] = mapped_column(String, nullable=False)
    sort_code: Mapped[Optional[str]] = mapped_column(String, nullable=True)  # UK
    routing_number: Mapped[Optional[str]] = mapped_column(String, nullable=True)  # USA
    account_holder_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    is_verified: Mapped[VerificationStatus] = mapped_column(
        SAEnum(
            VerificationStatus,
            name="verification_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=VerificationStatus.PENDING,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    @property
    def account_number_last4(self) -> str:
        return self.account_number[-4:]


class Application(Base):
    """A request for financial assistance."""

    __tablename__ = "applications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"), index=True, nullable=False
    )
    bank_details_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("bank_details.id"), nullable=True
    )

    reason: Mapped[str] = mapped_column(Text, nullable=False)
    amount_requested: Mapped[Decimal] = mapped_column(
        Numeric(10, 2, asdecimal=True), nullable=False
    )
    currency: Mapped[Currency] = mapped_column(
        SAEnum(
            Currency,
            name="currency_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=Currency.GBP,
        nullable=False,
    )
    # Document names only; files are not stored by this service
    supporting_documents: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)

    status: Mapped[ApplicationStatus] = mapped_column(
        SAEnum(
            ApplicationStatus,
            name="application_status_enum",
            values_callable=enum_values,
            validate_strings=True,
        ),
        default=ApplicationStatus.PENDING,
        index=True,
        nullable=False,
    )
    admin_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    reviewed_by: Mapped[Optional[str]] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    paid_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    paid_amount: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2, asdecimal=True), nullable=True
    )

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    user: Mapped[User] = relationship(foreign_keys=[user_id], lazy="raise")
    bank_details: Mapped[Optional[BankDetails]] = relationship(lazy="raise")

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self):
        return f"<Application {self.id} {self.status.value}>"
