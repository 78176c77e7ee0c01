"""Base factory configuration for polyfactory."""

from datetime import UTC, datetime

from polyfactory.factories.sqlalchemy_factory import SQLAlchemyFactory


def utc_now() -> datetime:
    return datetime.now(UTC)


class BaseFactory(SQLAlchemyFactory):
    """Base factory for public-schema models.

    Relationships and foreign keys are always set explicitly by the tests.
    """

    __is_base_factory__ = True
    __set_relationships__ = False
    __set_foreign_keys__ = False
