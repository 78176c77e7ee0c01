"""Test factories for generating test data.

    from tests.factories import TenantFactory
"""

from tests.factories.base import BaseFactory, utc_now
from tests.factories.tenant import TenantFactory

__all__ = [
    "BaseFactory",
    "TenantFactory",
    "utc_now",
]
