"""Base repository with common CRUD operations."""

from typing import Any
from uuid import UUID

from sqlalchemy import tuple_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.collab.schemas.pagination import decode_cursor, encode_cursor


class BaseRepository[ModelType: SQLModel]:
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit)
    should be done in the service layer.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        """Get a record by its primary key."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def delete(self, entity: ModelType) -> None:
        """Delete entity (flushed with the surrounding transaction)."""
        await self.session.delete(entity)

    async def paginate(
        self,
        query: Any,  # SelectOfScalar over self.model
        cursor: str | None,
        limit: int,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Run ``query`` newest first, one keyset page at a time.

        The model must have ``created_at`` and ``id`` columns. An unreadable
        cursor restarts from the first page.

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        created_at = self.model.created_at  # type: ignore[attr-defined]
        row_id = self.model.id  # type: ignore[attr-defined]

        if cursor:
            try:
                after_created, after_id = decode_cursor(cursor)
            except ValueError:
                pass
            else:
                query = query.where(tuple_(created_at, row_id) < tuple_(after_created, after_id))

        # Fetch limit + 1 to determine if there are more results
        query = query.order_by(created_at.desc(), row_id.desc()).limit(limit + 1)

        result = await self.session.execute(query)
        items = list(result.scalars().all())

        has_more = len(items) > limit
        items = items[:limit]

        next_cursor = None
        if has_more:
            last = items[-1]
            next_cursor = encode_cursor(last.created_at, last.id)  # type: ignore[attr-defined]

        return items, next_cursor, has_more
