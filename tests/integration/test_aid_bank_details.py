"""Integration tests for the bank details endpoints."""

import uuid

import pytest
from services.aid_service.models import BankDetails
from services.aid_service.services.verification import SAMPLE_ACCOUNT_HOLDERS
from tests.factories import ApplicationFactory, BankDetailsFactory, UserFactory

UK_ACCOUNT = {
    "country": "UK",
    "bankName": "Barclays",
    "accountNumber": "12345678",
    "sortCode": "200000",
}


# ---------------------------------------------------------------------------
# Create / list
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_bank_details_masks_number(client, beneficiary):
    """POST /api/bank-details: stored with a verified holder name."""
    response = await client.post(
        "/api/bank-details", json={**UK_ACCOUNT, "accountHolderName": "John Smith"}
    )
    assert response.status_code == 201, response.text
    data = response.json()
    assert data["userId"] == beneficiary.user_id
    assert data["accountNumberLast4"] == "5678"
    assert "accountNumber" not in data
    assert data["isVerified"] == "verified"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_bank_details_without_name_is_pending(client):
    response = await client.post("/api/bank-details", json=UK_ACCOUNT)
    assert response.status_code == 201, response.text
    assert response.json()["isVerified"] == "pending"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_only_own_bank_details(client, db_session, beneficiary):
    """GET /api/bank-details: the caller's accounts only."""
    stranger = UserFactory.create()
    db_session.add(stranger)
    db_session.add(BankDetailsFactory.create(stranger.id))
    await db_session.commit()

    await client.post("/api/bank-details", json=UK_ACCOUNT)

    response = await client.get("/api/bank-details")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["userId"] == beneficiary.user_id


# ---------------------------------------------------------------------------
# Verify
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_verify_returns_holder_name(client, db_session):
    """POST /api/bank-details/verify: nothing is stored."""
    response = await client.post("/api/bank-details/verify", json=UK_ACCOUNT)
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["accountHolderName"] in SAMPLE_ACCOUNT_HOLDERS
    assert data["isVerified"] == "verified"
    assert (await client.get("/api/bank-details")).json() == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_verify_uk_without_sort_code(client):
    payload = {k: v for k, v in UK_ACCOUNT.items() if k != "sortCode"}
    response = await client.post("/api/bank-details/verify", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid data"


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_someone_elses_bank_details(
    client, db_session, as_user, beneficiary, other_user
):
    """DELETE /api/bank-details/{id}: 403 for a non-owner; the record survives."""
    created = await client.post("/api/bank-details", json=UK_ACCOUNT)
    bank_id = created.json()["id"]

    as_user(other_user)
    response = await client.delete(f"/api/bank-details/{bank_id}")
    assert response.status_code == 403

    assert await db_session.get(BankDetails, uuid.UUID(bank_id)) is not None
    as_user(beneficiary)
    assert len((await client.get("/api/bank-details")).json()) == 1


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_own_bank_details(client):
    created = await client.post("/api/bank-details", json=UK_ACCOUNT)
    bank_id = created.json()["id"]

    response = await client.delete(f"/api/bank-details/{bank_id}")
    assert response.status_code == 204
    assert (await client.get("/api/bank-details")).json() == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_missing_bank_details(client):
    response = await client.delete(f"/api/bank-details/{uuid.uuid4()}")
    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_delete_bank_details_used_by_application(client, db_session, beneficiary):
    created = await client.post("/api/bank-details", json=UK_ACCOUNT)
    bank_id = uuid.UUID(created.json()["id"])
    db_session.add(
        ApplicationFactory.create(beneficiary.user_id, bank_details_id=bank_id)
    )
    await db_session.commit()

    response = await client.delete(f"/api/bank-details/{bank_id}")
    assert response.status_code == 409
