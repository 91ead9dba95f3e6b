import random
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from libs.auth.dependencies import get_current_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.aid_service.app.main import app
from services.aid_service.services.verification import (
    SimulatedBankVerifier,
    get_bank_verifier,
)


@pytest.fixture
def beneficiary() -> AuthUser:
    return AuthUser(
        user_id="user-a",
        email="alice@example.com",
        first_name="Alice",
        last_name="Applicant",
    )


@pytest.fixture
def other_user() -> AuthUser:
    return AuthUser(
        user_id="user-b",
        email="bob@example.com",
        first_name="Bob",
        last_name="Other",
    )


@pytest.fixture
def admin_user() -> AuthUser:
    return AuthUser(
        user_id="admin-1",
        email="reviewer@example.com",
        first_name="Rita",
        last_name="Reviewer",
        roles=["admin"],
    )


@pytest.fixture
def as_user() -> Callable[[AuthUser], None]:
    """Switch the authenticated identity seen by the app."""

    def _as_user(user: AuthUser) -> None:
        app.dependency_overrides[get_current_user] = lambda: user

    return _as_user


@pytest_asyncio.fixture
async def client(db_session, beneficiary, as_user) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient against the aid service app, signed in as ``beneficiary``,
    with the DB and verifier dependencies overridden.
    """
    app.dependency_overrides[get_async_db] = lambda: db_session
    app.dependency_overrides[get_bank_verifier] = lambda: SimulatedBankVerifier(
        delay_seconds=0, rng=random.Random(7)
    )
    as_user(beneficiary)

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin_client(client, admin_user, as_user) -> AsyncClient:
    as_user(admin_user)
    return client


@pytest_asyncio.fixture
async def anonymous_client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Client with real token validation."""
    app.dependency_overrides[get_async_db] = lambda: db_session

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
