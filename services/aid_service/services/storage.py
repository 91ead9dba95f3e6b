"""Data access for the aid service.

One coroutine per need, all taking the caller's ``AsyncSession``. No business
rules live here: status changes are validated by ``workflow.next_state`` before
``update_application`` is called. Functions that write commit their own work.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from libs.auth.models import AuthUser
from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.aid_service.errors import (
    BankDetailsInUseError,
    NotFoundError,
    OwnershipError,
    StaleVersionError,
)
from services.aid_service.models import (
    Application,
    ApplicationStatus,
    BankDetails,
    Country,
    User,
    UserProfile,
    UserRole,
    VerificationStatus,
)
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

logger = get_logger(__name__)

PROFILE_FIELDS = ("full_name", "phone", "country", "address", "role")
APPLICATION_UPDATE_FIELDS = (
    "status",
    "admin_notes",
    "reviewed_by",
    "reviewed_at",
    "paid_at",
    "paid_amount",
)


# ---------------------------------------------------------------------------
# Users (identity provider mirror)
# ---------------------------------------------------------------------------


async def upsert_user(db: AsyncSession, principal: AuthUser) -> User:
    """Create or refresh the local user row from token claims."""
    user = await db.get(User, principal.user_id)
    if user is None:
        user = User(
            id=principal.user_id,
            email=principal.email,
            first_name=principal.first_name,
            last_name=principal.last_name,
        )
        db.add(user)
        await db.commit()
        logger.info("Registered user %s", principal.user_id)
        return user

    changed = False
    for field in ("email", "first_name", "last_name"):
        value = getattr(principal, field)
        if value is not None and getattr(user, field) != value:
            setattr(user, field, value)
            changed = True
    if changed:
        await db.commit()
    return user


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


async def get_profile(db: AsyncSession, user_id: str) -> Optional[UserProfile]:
    result = await db.execute(
        select(UserProfile).where(UserProfile.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def create_profile(
    db: AsyncSession,
    *,
    user_id: str,
    full_name: str,
    phone: Optional[str] = None,
    country: Country = Country.UK,
    address: Optional[str] = None,
    role: UserRole = UserRole.BENEFICIARY,
) -> UserProfile:
    profile = UserProfile(
        user_id=user_id,
        full_name=full_name,
        phone=phone,
        country=country,
        address=address,
        role=role,
    )
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile


async def update_profile(
    db: AsyncSession, user_id: str, **fields: Any
) -> Optional[UserProfile]:
    """Overwrite only the supplied fields; ``updated_at`` is always refreshed."""
    profile = await get_profile(db, user_id)
    if profile is None:
        return None

    for name, value in fields.items():
        if name not in PROFILE_FIELDS:
            raise ValueError(f"Unknown profile field: {name}")
        setattr(profile, name, value)
    profile.updated_at = utc_now()

    await db.commit()
    await db.refresh(profile)
    return profile


async def set_profile_role(
    db: AsyncSession, user_id: str, role: UserRole
) -> UserProfile:
    profile = await update_profile(db, user_id, role=role)
    if profile is None:
        raise NotFoundError("Profile not found")
    logger.info("Set role of %s to %s", user_id, role.value)
    return profile


# ---------------------------------------------------------------------------
# Bank details
# ---------------------------------------------------------------------------


async def list_bank_details(db: AsyncSession, user_id: str) -> Sequence[BankDetails]:
    result = await db.execute(
        select(BankDetails)
        .where(BankDetails.user_id == user_id)
        .order_by(BankDetails.created_at.desc())
    )
    return result.scalars().all()


async def get_bank_details(
    db: AsyncSession, bank_details_id: uuid.UUID
) -> Optional[BankDetails]:
    return await db.get(BankDetails, bank_details_id)


def build_bank_details(
    *,
    user_id: str,
    country: Country,
    bank_name: str,
    account_number: str,
    sort_code: Optional[str] = None,
    routing_number: Optional[str] = None,
    account_holder_name: Optional[str] = None,
) -> BankDetails:
    """
    Unsaved BankDetails row. Verified iff an account holder name came back
    from verification.
    """
    return BankDetails(
        user_id=user_id,
        country=country,
        bank_name=bank_name,
        account_number=account_number,
        sort_code=sort_code or None,
        routing_number=routing_number or None,
        account_holder_name=account_holder_name or None,
        is_verified=(
            VerificationStatus.VERIFIED
            if account_holder_name
            else VerificationStatus.PENDING
        ),
    )


async def create_bank_details(db: AsyncSession, **fields: Any) -> BankDetails:
    bank_details = build_bank_details(**fields)
    db.add(bank_details)
    await db.commit()
    await db.refresh(bank_details)
    return bank_details


async def delete_bank_details(
    db: AsyncSession, bank_details_id: uuid.UUID, owner_id: str
) -> None:
    """
    Delete a bank account owned by ``owner_id``.

    Raises NotFoundError if absent, OwnershipError if someone else owns it and
    BankDetailsInUseError if an application still points at it.
    """
    bank_details = await get_bank_details(db, bank_details_id)
    if bank_details is None:
        raise NotFoundError("Bank details not found")
    if bank_details.user_id != owner_id:
        raise OwnershipError("Access denied")

    in_use = await db.scalar(
        select(func.count())
        .select_from(Application)
        .where(Application.bank_details_id == bank_details_id)
    )
    if in_use:
        raise BankDetailsInUseError(
            "Bank account is linked to an application and cannot be removed"
        )

    await db.delete(bank_details)
    await db.commit()


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------


async def list_applications(db: AsyncSession, user_id: str) -> Sequence[Application]:
    """The user's applications, newest first."""
    result = await db.execute(
        select(Application)
        .where(Application.user_id == user_id)
        .order_by(Application.created_at.desc())
    )
    return result.scalars().all()


async def get_application(
    db: AsyncSession, application_id: uuid.UUID
) -> Optional[Application]:
    return await db.get(Application, application_id)


@dataclass
class ApplicationPage:
    items: Sequence[Application]
    total: int


def _admin_filters(search: Optional[str], status: Optional[ApplicationStatus]):
    conditions = []
    if status is not None:
        conditions.append(Application.status == status)
    if search:
        needle = search.strip().lower()
        full_name = func.lower(
            func.coalesce(User.first_name, "") + " " + func.coalesce(User.last_name, "")
        )
        conditions.append(
            or_(
                func.lower(Application.reason).contains(needle, autoescape=True),
                func.lower(func.coalesce(User.email, "")).contains(
                    needle, autoescape=True
                ),
                full_name.contains(needle, autoescape=True),
            )
        )
    return conditions


async def list_applications_with_details(
    db: AsyncSession,
    *,
    search: Optional[str] = None,
    status: Optional[ApplicationStatus] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> ApplicationPage:
    """
    All applications joined with owner and bank details, newest first.

    Owner and bank rows are loaded in batched ``selectinload`` queries, so the
    cost does not grow with the page size.
    """
    conditions = _admin_filters(search, status)

    base = select(Application).join(User, Application.user_id == User.id)
    if conditions:
        base = base.where(*conditions)

    total = await db.scalar(select(func.count()).select_from(base.subquery())) or 0

    query = base.options(
        selectinload(Application.user), selectinload(Application.bank_details)
    ).order_by(Application.created_at.desc())
    if limit is not None:
        query = query.limit(limit)
    if offset:
        query = query.offset(offset)

    result = await db.execute(query)
    return ApplicationPage(items=result.scalars().all(), total=total)


async def count_applications_by_status(
    db: AsyncSession, user_id: Optional[str] = None
) -> dict[ApplicationStatus, int]:
    """Application counts per status, for one user or everyone."""
    query = select(Application.status, func.count()).group_by(Application.status)
    if user_id is not None:
        query = query.where(Application.user_id == user_id)
    result = await db.execute(query)
    counts = {status: 0 for status in ApplicationStatus}
    for status, count in result.all():
        counts[ApplicationStatus(status)] = count
    return counts


def build_application(
    *,
    user_id: str,
    reason: str,
    amount_requested,
    currency,
    bank_details_id: Optional[uuid.UUID] = None,
    supporting_documents: Optional[list[str]] = None,
) -> Application:
    """Unsaved Application row; status is always pending."""
    return Application(
        user_id=user_id,
        reason=reason,
        amount_requested=amount_requested,
        currency=currency,
        bank_details_id=bank_details_id,
        supporting_documents=supporting_documents or None,
        status=ApplicationStatus.PENDING,
    )


async def create_application(db: AsyncSession, **fields: Any) -> Application:
    application = build_application(**fields)
    db.add(application)
    await db.commit()
    await db.refresh(application)
    return application


async def update_application(
    db: AsyncSession,
    application: Application,
    *,
    expected_version: Optional[int] = None,
    **fields: Any,
) -> Application:
    """
    Write the given fields as-is; ``updated_at`` is always refreshed.

    With ``expected_version`` the write is refused if the row changed since the
    caller read it.
    """
    if expected_version is not None and expected_version != application.version:
        raise StaleVersionError(expected_version, application.version)

    for name, value in fields.items():
        if name not in APPLICATION_UPDATE_FIELDS:
            raise ValueError(f"Field cannot be updated: {name}")
        setattr(application, name, value)
    application.updated_at = utc_now()
    read_version = application.version

    try:
        await db.commit()
    except StaleDataError:
        await db.rollback()
        raise StaleVersionError(read_version)
    await db.refresh(application)
    return application
