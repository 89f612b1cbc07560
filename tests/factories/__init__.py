"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import ProjectFactory, NotificationFactory, ...
"""

from tests.factories.base import BaseFactory, new_id, utc_now
from tests.factories.notification import NotificationFactory, TeamFactory
from tests.factories.project import ProfileFactory, ProjectAccessFactory, ProjectFactory

__all__ = [
    # Base
    "BaseFactory",
    "new_id",
    "utc_now",
    # Projects
    "ProfileFactory",
    "ProjectAccessFactory",
    "ProjectFactory",
    # Notifications
    "NotificationFactory",
    "TeamFactory",
]
