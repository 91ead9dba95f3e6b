"""Unit tests for dashboard stats and the admin list filter."""

from types import SimpleNamespace

import pytest
from services.aid_service.models import ApplicationStatus as S
from services.aid_service.services.dashboard import (
    admin_stats,
    applicant_stats,
    filter_applications,
    parse_status_filter,
)


def _row(status, reason="Help with rent this month please", email=None, first=None, last=None):
    user = SimpleNamespace(email=email, first_name=first, last_name=last)
    return SimpleNamespace(status=status, reason=reason, user=user)


@pytest.fixture
def rows():
    return [
        _row(S.PENDING, "Rent arrears after redundancy", "jane@example.com", "Jane", "Doe"),
        _row(S.UNDER_REVIEW, "Medical bills for my daughter", "sam@example.com", "Sam", "Lee"),
        _row(S.APPROVED, "Heating repair before winter", "ann@example.com", "Ann", "Roe"),
        _row(S.PAID, "School uniform and books", "joe@example.com", "Joe", "Bloggs"),
        _row(S.REJECTED, "Holiday abroad", "max@example.com", "Max", "Power"),
    ]


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_admin_stats_groups_paid_with_approved(rows):
    stats = admin_stats(rows)
    assert stats.total == 5
    assert stats.pending == 1
    assert stats.under_review == 1
    assert stats.approved == 2


@pytest.mark.unit
def test_applicant_stats_groups_under_review_with_pending(rows):
    stats = applicant_stats(rows)
    assert stats.total == 5
    assert stats.pending == 2
    assert stats.approved == 1
    assert stats.paid == 1


@pytest.mark.unit
def test_stats_accept_status_counts():
    counts = {S.PENDING: 3, S.PAID: 2}
    assert admin_stats(counts).model_dump(by_alias=True) == {
        "total": 5,
        "pending": 3,
        "underReview": 0,
        "approved": 2,
    }


@pytest.mark.unit
def test_stats_of_nothing_are_zero():
    assert admin_stats([]).total == 0
    assert applicant_stats({}).paid == 0


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, "", "all", "ALL"])
def test_all_disables_status_filter(value, rows):
    assert parse_status_filter(value) is None
    assert len(filter_applications(rows, status_filter=value)) == 5


@pytest.mark.unit
def test_unknown_status_filter_raises():
    with pytest.raises(ValueError):
        parse_status_filter("archived")


@pytest.mark.unit
def test_approved_filter_excludes_paid(rows):
    result = filter_applications(rows, status_filter="approved")
    assert [r.status for r in result] == [S.APPROVED]


@pytest.mark.unit
@pytest.mark.parametrize(
    "query,expected_email",
    [
        ("MEDICAL", "sam@example.com"),
        ("joe@", "joe@example.com"),
        ("jane doe", "jane@example.com"),
    ],
)
def test_search_matches_reason_email_and_name(rows, query, expected_email):
    result = filter_applications(rows, search_query=query)
    assert [r.user.email for r in result] == [expected_email]


@pytest.mark.unit
def test_search_and_status_combine(rows):
    assert filter_applications(rows, search_query="rent", status_filter="paid") == []


@pytest.mark.unit
def test_search_tolerates_missing_user_fields():
    row = _row(S.PENDING, "Energy bill support")
    assert filter_applications([row], search_query="energy") == [row]
    assert filter_applications([row], search_query="someone") == []
