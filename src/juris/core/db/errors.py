"""SQLSTATE helpers for driver errors surfaced through SQLAlchemy."""

from typing import Final

DUPLICATE_SCHEMA: Final = "42P06"
DUPLICATE_TABLE: Final = "42P07"
DUPLICATE_OBJECT: Final = "42710"
DUPLICATE_COLUMN: Final = "42701"
UNIQUE_VIOLATION: Final = "23505"

# Concurrent CREATE ... IF NOT EXISTS can still lose the race on the catalog
# unique indexes, which surfaces as a plain unique violation.
ALREADY_EXISTS_STATES: Final = frozenset(
    {DUPLICATE_SCHEMA, DUPLICATE_TABLE, DUPLICATE_OBJECT, DUPLICATE_COLUMN, UNIQUE_VIOLATION}
)


def sqlstate_of(exc: BaseException) -> str | None:
    """Extract the SQLSTATE from a DBAPIError or a raw driver exception."""
    candidates = [getattr(exc, "orig", None), exc]
    orig = candidates[0]
    if orig is not None and orig.__cause__ is not None:
        candidates.append(orig.__cause__)
    for candidate in candidates:
        if candidate is None:
            continue
        for attr in ("pgcode", "sqlstate"):
            code = getattr(candidate, attr, None)
            if code:
                return str(code)
    return None


def is_already_exists(exc: BaseException) -> bool:
    return sqlstate_of(exc) in ALREADY_EXISTS_STATES
