"""Repository exports."""

from src.juris.repositories.base import BaseRepository
from src.juris.repositories.public import TenantRepository
from src.juris.repositories.tenant import TenantQueryGateway

__all__ = [
    "BaseRepository",
    "TenantQueryGateway",
    "TenantRepository",
]
