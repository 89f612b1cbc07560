"""Notification preference resolver."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.collab.core.errors import InvalidEventPayload
from src.collab.core.logging import get_logger
from src.collab.models import NotificationCategory, NotificationPreference
from src.collab.models.base import utc_now
from src.collab.repositories import NotificationPreferenceRepository
from src.collab.schemas.notification import NotificationPreferences, PreferenceUpdate

logger = get_logger(__name__)

# Category -> preference toggle. Categories missing here are rejected, never guessed.
CATEGORY_PREFERENCE_FIELDS: dict[NotificationCategory, str] = {
    NotificationCategory.PROJECT_SHARED: "project_sharing",
    NotificationCategory.COMMENT_ADDED: "comments",
    NotificationCategory.TEAM_INVITATION: "team_invitations",
    NotificationCategory.SYSTEM_ANNOUNCEMENT: "system_announcements",
}


def category_toggle(category: NotificationCategory) -> str:
    """Name of the preference toggle gating ``category``."""
    try:
        return CATEGORY_PREFERENCE_FIELDS[category]
    except KeyError as e:
        raise InvalidEventPayload(f"No preference toggle for category '{category}'") from e


def in_app_allowed(preferences: NotificationPreferences, category: NotificationCategory) -> bool:
    """In-app delivery needs both the global toggle and the category toggle."""
    return preferences.in_app_enabled and bool(getattr(preferences, category_toggle(category)))


class PreferenceService:
    """Reads and updates notification preferences.

    Reads never write: a principal without a stored row gets all-enabled
    defaults, and the row is only created by the first update.
    """

    def __init__(self, preference_repo: NotificationPreferenceRepository, session: AsyncSession):
        self.preference_repo = preference_repo
        self.session = session

    async def get_preferences(self, principal_id: UUID) -> NotificationPreferences:
        stored = await self.preference_repo.get_by_user(principal_id)
        if stored is None:
            return NotificationPreferences()
        return NotificationPreferences.model_validate(stored)

    async def update_preferences(
        self, principal_id: UUID, changes: PreferenceUpdate
    ) -> NotificationPreferences:
        """Merge ``changes`` into stored preferences, creating the row if absent."""
        partial = changes.model_dump(exclude_unset=True, exclude_none=True)

        try:
            stored = await self.preference_repo.get_by_user(principal_id)
            if stored is None:
                merged = NotificationPreferences().model_copy(update=partial)
                stored = NotificationPreference(user_id=principal_id, **merged.model_dump())
                self.preference_repo.add(stored)
            else:
                for field, value in partial.items():
                    setattr(stored, field, value)
                stored.updated_at = utc_now()
                self.preference_repo.add(stored)

            await self.session.commit()
            await self.session.refresh(stored)
        except IntegrityError:
            # Concurrent first write created the row; apply the change on top of it.
            await self.session.rollback()
            stored = await self.preference_repo.get_by_user(principal_id)
            if stored is None:
                raise
            try:
                for field, value in partial.items():
                    setattr(stored, field, value)
                stored.updated_at = utc_now()
                self.preference_repo.add(stored)
                await self.session.commit()
                await self.session.refresh(stored)
            except Exception as e:
                await self.session.rollback()
                logger.error("Failed to update preferences after retry", error=str(e))
                raise
        except Exception as e:
            await self.session.rollback()
            logger.error("Failed to update preferences", error=str(e))
            raise

        logger.info(
            "Notification preferences updated",
            principal_id=str(principal_id),
            changed=sorted(partial),
        )
        return NotificationPreferences.model_validate(stored)
