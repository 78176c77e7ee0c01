from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime.

    Registry timestamps are TIMESTAMPTZ; asyncpg converts naive values using
    the host's local zone, so they are never produced here.
    """
    return datetime.now(UTC)
