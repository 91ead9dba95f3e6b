"""Request intake: the three-step guided submission.

    1. request details  ->  2. bank details  ->  3. review & submit

Steps 1-2 hold their state on the client; nothing is written until
``submit_application`` runs. ``IntakeWizard`` models the client-side state so
the step gates are enforced the same way everywhere, and ``validate_step``
exposes the gates to the API.
"""

import enum
from typing import Any, Optional, Sequence

from libs.common.logging import get_logger
from pydantic import ValidationError
from services.aid_service.errors import (
    IntakeValidationError,
    NotFoundError,
    OwnershipError,
)
from services.aid_service.models import Application, BankDetails, VerificationStatus
from services.aid_service.schemas import (
    ApplicationCreate,
    ApplicationSubmit,
    BankAccountInput,
    BankDetailsCreate,
    RequestDetails,
)
from services.aid_service.services import storage
from services.aid_service.services.verification import (
    AccountToVerify,
    BankAccountVerifier,
    VerifiedAccount,
)
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


class IntakeStep(str, enum.Enum):
    REQUEST_DETAILS = "request_details"
    BANK_DETAILS = "bank_details"
    REVIEW = "review"


_NEXT_STEP = {
    IntakeStep.REQUEST_DETAILS: IntakeStep.BANK_DETAILS,
    IntakeStep.BANK_DETAILS: IntakeStep.REVIEW,
}
_PREVIOUS_STEP = {nxt: prev for prev, nxt in _NEXT_STEP.items()}


def _errors_from(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]


def validate_request_details(data: dict[str, Any]) -> RequestDetails:
    try:
        return RequestDetails.model_validate(data)
    except ValidationError as e:
        raise IntakeValidationError("Invalid request details", _errors_from(e))


def validate_bank_account(data: dict[str, Any]) -> BankAccountInput:
    try:
        return BankAccountInput.model_validate(data)
    except ValidationError as e:
        raise IntakeValidationError("Invalid bank details", _errors_from(e))


def validate_step(step: IntakeStep, data: dict[str, Any]) -> IntakeStep:
    """Validate one step's fields and return the step that follows it."""
    step = IntakeStep(step)
    if step == IntakeStep.REQUEST_DETAILS:
        validate_request_details(data)
    elif step == IntakeStep.BANK_DETAILS:
        validate_bank_account(data)
    else:
        raise IntakeValidationError(f"Step '{step.value}' has nothing to validate")
    return _NEXT_STEP[step]


class IntakeWizard:
    """
    Client-held state of one application in progress.

    The bank step is satisfied either by choosing one of the user's existing
    accounts (no re-verification) or by entering a new account and verifying it.
    """

    def __init__(self, existing_accounts: Sequence[BankDetails] = ()):
        self.step = IntakeStep.REQUEST_DETAILS
        self.existing_accounts = list(existing_accounts)
        self.request_details: Optional[RequestDetails] = None
        self.selected_account: Optional[BankDetails] = None
        self.new_account: Optional[BankAccountInput] = None
        self.account_holder_name: Optional[str] = None

    def _require_step(self, step: IntakeStep) -> None:
        if self.step != step:
            raise IntakeValidationError(
                f"Expected to be on step '{step.value}', currently on '{self.step.value}'"
            )

    def submit_request_details(self, data: dict[str, Any]) -> RequestDetails:
        self._require_step(IntakeStep.REQUEST_DETAILS)
        self.request_details = validate_request_details(data)
        self.step = IntakeStep.BANK_DETAILS
        return self.request_details

    def select_existing_account(self, bank_details: BankDetails) -> None:
        self._require_step(IntakeStep.BANK_DETAILS)
        if bank_details not in self.existing_accounts:
            raise IntakeValidationError("Unknown bank account")
        self.selected_account = bank_details
        self.new_account = None
        self.account_holder_name = bank_details.account_holder_name

    def enter_new_account(self, data: dict[str, Any]) -> BankAccountInput:
        self._require_step(IntakeStep.BANK_DETAILS)
        self.new_account = validate_bank_account(data)
        self.selected_account = None
        # Changed details need verifying again
        self.account_holder_name = None
        return self.new_account

    async def verify_new_account(self, verifier: BankAccountVerifier) -> VerifiedAccount:
        self._require_step(IntakeStep.BANK_DETAILS)
        if self.new_account is None:
            raise IntakeValidationError("Enter bank details before verifying")
        result = await verifier.verify(
            AccountToVerify(
                country=self.new_account.country,
                bank_name=self.new_account.bank_name,
                account_number=self.new_account.account_number,
                sort_code=self.new_account.sort_code,
                routing_number=self.new_account.routing_number,
            )
        )
        self.account_holder_name = result.account_holder_name
        return result

    @property
    def bank_step_complete(self) -> bool:
        if self.selected_account is not None:
            return True
        return self.new_account is not None and bool(self.account_holder_name)

    def continue_to_review(self) -> None:
        self._require_step(IntakeStep.BANK_DETAILS)
        if not self.bank_step_complete:
            raise IntakeValidationError(
                "Choose an existing bank account or verify a new one before continuing"
            )
        self.step = IntakeStep.REVIEW

    def back(self) -> None:
        if self.step in _PREVIOUS_STEP:
            self.step = _PREVIOUS_STEP[self.step]

    def build_submission(self) -> ApplicationSubmit:
        """The single payload sent from the review step."""
        self._require_step(IntakeStep.REVIEW)
        application = ApplicationCreate(
            **self.request_details.model_dump(),
            bank_details_id=(
                self.selected_account.id if self.selected_account is not None else None
            ),
        )
        bank_details = None
        if self.new_account is not None:
            bank_details = BankDetailsCreate(
                **self.new_account.model_dump(),
                account_holder_name=self.account_holder_name,
            )
        return ApplicationSubmit(application=application, bank_details=bank_details)


async def submit_application(
    db: AsyncSession, owner_id: str, submission: ApplicationSubmit
) -> Application:
    """
    Persist a submitted application in one transaction.

    A new bank account is saved first and linked; otherwise an existing
    ``bank_details_id`` must belong to the owner. Status is always pending.
    """
    app_data = submission.application
    bank_data = submission.bank_details
    bank_details_id = None

    if bank_data is not None:
        if not bank_data.account_holder_name:
            raise IntakeValidationError(
                "Bank account must be verified before submitting",
                [{"field": "bankDetails", "message": "Verify the account first"}],
            )
        bank_details = storage.build_bank_details(
            user_id=owner_id,
            country=bank_data.country,
            bank_name=bank_data.bank_name,
            account_number=bank_data.account_number,
            sort_code=bank_data.sort_code,
            routing_number=bank_data.routing_number,
            account_holder_name=bank_data.account_holder_name,
        )
        db.add(bank_details)
        await db.flush()
        bank_details_id = bank_details.id
    elif app_data.bank_details_id is not None:
        existing = await storage.get_bank_details(db, app_data.bank_details_id)
        if existing is None:
            raise NotFoundError("Bank details not found")
        if existing.user_id != owner_id:
            raise OwnershipError("Invalid bank details")
        if existing.is_verified == VerificationStatus.FAILED:
            raise IntakeValidationError("Bank account failed verification")
        bank_details_id = existing.id

    application = storage.build_application(
        user_id=owner_id,
        reason=app_data.reason,
        amount_requested=app_data.amount_requested,
        currency=app_data.currency,
        bank_details_id=bank_details_id,
        supporting_documents=app_data.supporting_documents,
    )
    db.add(application)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await db.refresh(application)

    logger.info(
        "Application %s submitted by %s",
        application.id,
        owner_id,
        extra={
            "extra_fields": {
                "amount": str(application.amount_requested),
                "currency": application.currency.value,
                "new_bank_account": bank_data is not None,
            }
        },
    )
    return application
