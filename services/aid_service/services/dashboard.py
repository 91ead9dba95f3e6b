"""Dashboard figures and the admin list filter.

The SQL paths in ``storage`` are what the API uses; these helpers apply the
same rules to rows already in memory (and back the tests for those rules).
"""

from typing import Iterable, Mapping, Optional, Sequence, Union

from services.aid_service.models import Application, ApplicationStatus
from services.aid_service.schemas import AdminStats, ApplicantStats

StatusCounts = Mapping[ApplicationStatus, int]
ALL_STATUSES = "all"


def count_by_status(applications: Iterable[Application]) -> dict[ApplicationStatus, int]:
    counts = {status: 0 for status in ApplicationStatus}
    for application in applications:
        counts[ApplicationStatus(application.status)] += 1
    return counts


def _as_counts(source: Union[StatusCounts, Iterable[Application]]) -> StatusCounts:
    if isinstance(source, Mapping):
        return {status: source.get(status, 0) for status in ApplicationStatus}
    return count_by_status(source)


def admin_stats(source: Union[StatusCounts, Iterable[Application]]) -> AdminStats:
    """Approved and paid both show under ``approved``."""
    counts = _as_counts(source)
    return AdminStats(
        total=sum(counts.values()),
        pending=counts[ApplicationStatus.PENDING],
        under_review=counts[ApplicationStatus.UNDER_REVIEW],
        approved=counts[ApplicationStatus.APPROVED] + counts[ApplicationStatus.PAID],
    )


def applicant_stats(source: Union[StatusCounts, Iterable[Application]]) -> ApplicantStats:
    """Pending includes applications under review."""
    counts = _as_counts(source)
    return ApplicantStats(
        total=sum(counts.values()),
        pending=counts[ApplicationStatus.PENDING] + counts[ApplicationStatus.UNDER_REVIEW],
        approved=counts[ApplicationStatus.APPROVED],
        paid=counts[ApplicationStatus.PAID],
    )


def parse_status_filter(value: Optional[str]) -> Optional[ApplicationStatus]:
    """``None``, ``""`` and ``"all"`` mean no status filter."""
    if value is None or not value.strip() or value.strip().lower() == ALL_STATUSES:
        return None
    return ApplicationStatus(value.strip().lower())


def matches_search(application: Application, search_query: Optional[str]) -> bool:
    if not search_query or not search_query.strip():
        return True
    needle = search_query.strip().lower()
    user = application.user
    email = (user.email or "") if user is not None else ""
    full_name = (
        f"{user.first_name or ''} {user.last_name or ''}" if user is not None else " "
    )
    return (
        needle in (application.reason or "").lower()
        or needle in email.lower()
        or needle in full_name.lower()
    )


def filter_applications(
    applications: Sequence[Application],
    search_query: Optional[str] = None,
    status_filter: Optional[str] = None,
) -> list[Application]:
    """
    Case-insensitive substring match over reason, applicant email and
    "first last" name, combined with an exact status match.
    """
    status = parse_status_filter(status_filter)
    return [
        application
        for application in applications
        if (status is None or application.status == status)
        and matches_search(application, search_query)
    ]
