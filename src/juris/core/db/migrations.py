"""Reusable migration runner for both production and tests."""

import asyncio

from alembic.config import Config

from alembic import command


def run_migrations_sync(config_path: str = "alembic.ini") -> None:
    """Apply the public schema (tenant registry) migrations synchronously."""
    alembic_cfg = Config(config_path)
    command.upgrade(alembic_cfg, "head")


async def run_migrations_async(config_path: str = "alembic.ini") -> None:
    """Run migrations from async context without blocking the event loop."""
    await asyncio.to_thread(run_migrations_sync, config_path)
