"""Database utilities - engine, sessions, migrations."""

from src.juris.core.db.engine import dispose_engine, get_engine
from src.juris.core.db.errors import is_already_exists, sqlstate_of
from src.juris.core.db.migrations import run_migrations_async, run_migrations_sync
from src.juris.core.db.session import get_session, tenant_transaction

__all__ = [
    # Engine
    "dispose_engine",
    "get_engine",
    # Sessions
    "get_session",
    "tenant_transaction",
    # Errors
    "is_already_exists",
    "sqlstate_of",
    # Migrations
    "run_migrations_async",
    "run_migrations_sync",
]
