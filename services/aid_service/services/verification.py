"""
Bank account verification (account-holder name check).

Verification confirms who owns an account before it can receive a payout.
Two adapters implement the same ``BankAccountVerifier`` protocol:

- ``SimulatedBankVerifier``: waits a fixed delay and returns one of a few
  sample names. For demos and local development only.
- ``HttpBankVerifier``: calls an external name-matching provider over HTTP.

``get_bank_verifier`` picks one from ``BANK_VERIFICATION_PROVIDER``; routes
receive it through FastAPI's dependency injection so tests can swap it.
"""

import asyncio
import random
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

import httpx
from libs.common.config import get_settings
from libs.common.logging import get_logger
from services.aid_service.errors import VerificationFailed
from services.aid_service.models.enums import Country

logger = get_logger(__name__)

SAMPLE_ACCOUNT_HOLDERS = ("John Smith", "Sarah Johnson", "Michael Brown", "Emily Davis")


@dataclass
class AccountToVerify:
    country: Country
    bank_name: str
    account_number: str
    sort_code: Optional[str] = None
    routing_number: Optional[str] = None


@dataclass
class VerifiedAccount:
    """Result of a successful verification."""

    account_holder_name: str


class BankAccountVerifier(Protocol):
    async def verify(self, account: AccountToVerify) -> VerifiedAccount:
        """Return the account holder name or raise ``VerificationFailed``."""
        ...


class SimulatedBankVerifier:
    """Stand-in verifier: no external call is made."""

    def __init__(
        self,
        delay_seconds: float = 2.0,
        names: Sequence[str] = SAMPLE_ACCOUNT_HOLDERS,
        rng: Optional[random.Random] = None,
    ):
        if not names:
            raise ValueError("names must not be empty")
        self.delay_seconds = delay_seconds
        self.names = tuple(names)
        self._rng = rng or random.Random()

    async def verify(self, account: AccountToVerify) -> VerifiedAccount:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        name = self._rng.choice(self.names)
        logger.info(
            "Simulated verification for account ending %s", account.account_number[-4:]
        )
        return VerifiedAccount(account_holder_name=name)


class HttpBankVerifier:
    """
    Client for an external account-name-match provider.

    Expects ``POST {base_url}/verify`` to answer
    ``{"verified": true, "account_holder_name": "..."}``.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._headers = {"Content-Type": "application/json"}
        if api_key:
            self._headers["Authorization"] = f"Bearer {api_key}"

    async def verify(self, account: AccountToVerify) -> VerifiedAccount:
        payload = {
            "country": account.country.value,
            "bank_name": account.bank_name,
            "account_number": account.account_number,
            "sort_code": account.sort_code,
            "routing_number": account.routing_number,
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    f"{self.base_url}/verify", json=payload, headers=self._headers
                )
        except httpx.HTTPError as e:
            logger.error("Bank verification provider unreachable: %s", e)
            raise VerificationFailed("Bank verification is unavailable, try again later")

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not response.is_success:
            logger.error(
                "Bank verification provider error: %s - %s",
                response.status_code,
                data,
            )
            raise VerificationFailed(
                data.get("message", "Could not verify bank account")
            )

        holder = data.get("account_holder_name")
        if not data.get("verified") or not holder:
            logger.info(
                "Bank account ending %s not matched", account.account_number[-4:]
            )
            raise VerificationFailed(
                data.get("message", "Account details could not be matched")
            )
        return VerifiedAccount(account_holder_name=holder)


def get_bank_verifier() -> BankAccountVerifier:
    """FastAPI dependency returning the configured verifier."""
    settings = get_settings()
    if settings.BANK_VERIFICATION_PROVIDER == "http":
        return HttpBankVerifier(
            base_url=settings.BANK_VERIFICATION_URL,
            api_key=settings.BANK_VERIFICATION_API_KEY,
            timeout=settings.BANK_VERIFICATION_TIMEOUT,
        )
    return SimulatedBankVerifier(delay_seconds=settings.BANK_VERIFICATION_DELAY_SECONDS)
