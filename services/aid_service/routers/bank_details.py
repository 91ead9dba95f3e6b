"""Bank details router for the Aid Service."""

import uuid

from fastapi import APIRouter, Depends, Request, status
from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from libs.common.rate_limit import limiter
from libs.db.session import get_async_db
from services.aid_service.routers._shared import get_current_identity
from services.aid_service.schemas import (
    BankDetailsCreate,
    BankDetailsResponse,
    BankVerifyRequest,
    BankVerifyResponse,
)
from services.aid_service.services import storage
from services.aid_service.services.verification import (
    AccountToVerify,
    BankAccountVerifier,
    get_bank_verifier,
)
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

router = APIRouter(prefix="/api/bank-details", tags=["bank-details"])


@router.get("", response_model=list[BankDetailsResponse])
async def list_my_bank_details(
    current_user: AuthUser = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_db),
):
    return await storage.list_bank_details(db, current_user.user_id)


@router.post(
    "", response_model=BankDetailsResponse, status_code=status.HTTP_201_CREATED
)
async def create_bank_details(
    bank_in: BankDetailsCreate,
    current_user: AuthUser = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_db),
):
    """Save a bank account; it counts as verified only with a holder name."""
    bank_details = await storage.create_bank_details(
        db, user_id=current_user.user_id, **bank_in.model_dump()
    )
    logger.info(
        "Bank details %s added by %s", bank_details.id, current_user.user_id
    )
    return bank_details


@router.post("/verify", response_model=BankVerifyResponse)
@limiter.limit("10/minute")
async def verify_bank_details(
    request: Request,
    verify_in: BankVerifyRequest,
    current_user: AuthUser = Depends(get_current_identity),
    verifier: BankAccountVerifier = Depends(get_bank_verifier),
):
    """
    Look up the account holder name for the given account.
    Nothing is stored; the name is sent back with the final submission.
    """
    result = await verifier.verify(
        AccountToVerify(
            country=verify_in.country,
            bank_name=verify_in.bank_name,
            account_number=verify_in.account_number,
            sort_code=verify_in.sort_code,
            routing_number=verify_in.routing_number,
        )
    )
    logger.info(
        "Bank account verified for %s",
        current_user.user_id,
        extra={"extra_fields": {"country": verify_in.country.value}},
    )
    return BankVerifyResponse(account_holder_name=result.account_holder_name)


@router.delete("/{bank_details_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bank_details(
    bank_details_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_identity),
    db: AsyncSession = Depends(get_async_db),
):
    await storage.delete_bank_details(db, bank_details_id, current_user.user_id)
    logger.info("Bank details %s deleted by %s", bank_details_id, current_user.user_id)
    return None
