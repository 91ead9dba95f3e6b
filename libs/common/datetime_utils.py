"""Timezone-aware UTC timestamps.

Column defaults and workflow stamps (reviewed_at, paid_at) all come from
``utc_now`` so stored times are always UTC.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)
