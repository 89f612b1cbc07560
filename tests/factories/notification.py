"""Factories for notifications and teams."""

from polyfactory import Use

from src.collab.models import Notification, NotificationCategory, Team
from tests.factories.base import BaseFactory, new_id, utc_now


class NotificationFactory(BaseFactory):
    __model__ = Notification

    id = Use(new_id)
    recipient_id = Use(new_id)
    category = NotificationCategory.PROJECT_SHARED.value
    content = "Someone shared a project with you"
    payload = Use(dict)
    project_id = None
    is_read = False
    deleted_at = None
    created_at = Use(utc_now)

    @classmethod
    def read(cls, **kwargs):
        return cls.build(is_read=True, **kwargs)


class TeamFactory(BaseFactory):
    __model__ = Team

    id = Use(new_id)
    name = Use(lambda: f"Team {new_id().hex[-6:]}")
    description = None
    creator_id = Use(new_id)
    created_at = Use(utc_now)
    updated_at = Use(utc_now)
