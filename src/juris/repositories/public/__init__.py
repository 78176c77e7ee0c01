"""Public schema repositories."""

from src.juris.repositories.public.tenant import TenantRepository

__all__ = ["TenantRepository"]
