"""Unit tests for the intake wizard and step validation."""

import random
from decimal import Decimal

import pytest
from services.aid_service.errors import IntakeValidationError
from services.aid_service.models import Country, Currency
from services.aid_service.services.intake import (
    IntakeStep,
    IntakeWizard,
    validate_step,
)
from services.aid_service.services.verification import (
    SAMPLE_ACCOUNT_HOLDERS,
    SimulatedBankVerifier,
)
from tests.factories import BankDetailsFactory

REQUEST = {
    "reason": "I need help paying for my daughter's school trip.",
    "amountRequested": "500",
    "currency": "USD",
}
US_ACCOUNT = {
    "country": "USA",
    "bankName": "Chase",
    "accountNumber": "000123456789",
    "routingNumber": "021000021",
}


@pytest.fixture
def verifier():
    return SimulatedBankVerifier(delay_seconds=0, rng=random.Random(1))


# ---------------------------------------------------------------------------
# validate_step
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_validate_request_details_returns_next_step():
    assert validate_step("request_details", REQUEST) == IntakeStep.BANK_DETAILS


@pytest.mark.unit
def test_validate_bank_details_returns_review():
    assert validate_step(IntakeStep.BANK_DETAILS, US_ACCOUNT) == IntakeStep.REVIEW


@pytest.mark.unit
def test_short_reason_blocks_step_one():
    with pytest.raises(IntakeValidationError) as exc_info:
        validate_step("request_details", {**REQUEST, "reason": "Too short"})
    assert exc_info.value.status_code == 400
    assert [e["field"] for e in exc_info.value.errors] == ["reason"]


@pytest.mark.unit
@pytest.mark.parametrize("amount", ["", "abc", "-5", "0", "0.001"])
def test_bad_amount_blocks_step_one(amount):
    with pytest.raises(IntakeValidationError):
        validate_step("request_details", {**REQUEST, "amountRequested": amount})


@pytest.mark.unit
def test_uk_account_without_sort_code_is_rejected():
    with pytest.raises(IntakeValidationError):
        validate_step(
            "bank_details",
            {"country": "UK", "bankName": "Barclays", "accountNumber": "12345678"},
        )


@pytest.mark.unit
def test_review_step_cannot_be_validated():
    with pytest.raises(IntakeValidationError):
        validate_step("review", {})


# ---------------------------------------------------------------------------
# IntakeWizard
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.unit
async def test_new_account_must_be_verified_before_review(verifier):
    wizard = IntakeWizard()
    details = wizard.submit_request_details(REQUEST)
    assert details.amount_requested == Decimal("500.00")
    assert wizard.step == IntakeStep.BANK_DETAILS

    wizard.enter_new_account(US_ACCOUNT)
    with pytest.raises(IntakeValidationError):
        wizard.continue_to_review()

    result = await wizard.verify_new_account(verifier)
    assert result.account_holder_name in SAMPLE_ACCOUNT_HOLDERS
    wizard.continue_to_review()
    assert wizard.step == IntakeStep.REVIEW

    submission = wizard.build_submission()
    assert submission.application.currency == Currency.USD
    assert submission.application.bank_details_id is None
    assert submission.bank_details.country == Country.USA
    assert submission.bank_details.account_holder_name == result.account_holder_name


@pytest.mark.asyncio
@pytest.mark.unit
async def test_editing_account_clears_verification(verifier):
    wizard = IntakeWizard()
    wizard.submit_request_details(REQUEST)
    wizard.enter_new_account(US_ACCOUNT)
    await wizard.verify_new_account(verifier)

    wizard.enter_new_account({**US_ACCOUNT, "accountNumber": "000999888777"})
    assert wizard.account_holder_name is None
    assert not wizard.bank_step_complete


@pytest.mark.unit
def test_existing_account_skips_verification():
    account = BankDetailsFactory.create("user-a")
    wizard = IntakeWizard(existing_accounts=[account])
    wizard.submit_request_details(REQUEST)

    wizard.select_existing_account(account)
    wizard.continue_to_review()

    submission = wizard.build_submission()
    assert submission.application.bank_details_id == account.id
    assert submission.bank_details is None


@pytest.mark.unit
def test_cannot_select_someone_elses_account():
    wizard = IntakeWizard(existing_accounts=[BankDetailsFactory.create("user-a")])
    wizard.submit_request_details(REQUEST)
    with pytest.raises(IntakeValidationError):
        wizard.select_existing_account(BankDetailsFactory.create("user-b"))


@pytest.mark.unit
def test_steps_are_ordered():
    wizard = IntakeWizard()
    with pytest.raises(IntakeValidationError):
        wizard.enter_new_account(US_ACCOUNT)
    with pytest.raises(IntakeValidationError):
        wizard.build_submission()

    wizard.submit_request_details(REQUEST)
    wizard.back()
    assert wizard.step == IntakeStep.REQUEST_DETAILS
    wizard.back()
    assert wizard.step == IntakeStep.REQUEST_DETAILS
