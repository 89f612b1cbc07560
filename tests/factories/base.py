"""Base factory configuration for polyfactory."""

from datetime import UTC, datetime
from uuid import uuid4

from polyfactory.factories.sqlalchemy_factory import SQLAlchemyFactory


def utc_now() -> datetime:
    """Generate current UTC time (naive for PostgreSQL compatibility)."""
    return datetime.now(UTC).replace(tzinfo=None)


class BaseFactory(SQLAlchemyFactory):
    """Base factory with common configuration for all models.

    Relationships and foreign keys are never generated; tests set them.
    """

    __is_base_factory__ = True
    __set_relationships__ = False
    __set_foreign_keys__ = False


def new_id():
    return uuid4()
