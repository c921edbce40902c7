"""
Link Registry

Create, lookup, delete and counter operations against persisted links.

Design Decisions:
- Every operation commits its own transaction, so each one is atomic at
  the database level
- Unique constraint violations on insert are reported as DuplicateCode; the
  race between an availability check and the insert is expected
- Any other SQLAlchemy failure is rolled back and re-raised as DatabaseError
- Click increments are a single UPDATE ... SET click_count = click_count + 1,
  never read-modify-write
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, exists, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import DatabaseError, DuplicateCode, ShortCodeNotFoundError
from app.db.models import Link, LinkStats

logger = logging.getLogger(__name__)


class LinkRegistry:
    """
    Persistence operations for links.

    One registry wraps one session; background tasks create their own
    session and registry since the request session is closed by then.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, short_code: str, original_url: str) -> int:
        """
        Insert a new link and return its generated id.

        Raises:
            DuplicateCode: If the unique index on short_code rejects the insert
            DatabaseError: If the insert fails for any other reason
        """
        link = Link(short_code=short_code, original_url=original_url, click_count=0)
        try:
            self.session.add(link)
            await self.session.flush()
            link_id = link.id
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateCode(short_code, original_error=e)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"Failed to create link '{short_code}'", original_error=e)

        logger.debug(f"Link created: id={link_id} code={short_code}")
        return link_id

    async def get_by_code(self, short_code: str) -> Optional[Link]:
        """Return the link for `short_code`, or None."""
        statement = (
            select(Link)
            .where(Link.short_code == short_code)
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"Failed to look up '{short_code}'", original_error=e)
        return result.scalar_one_or_none()

    async def find_by_code(self, short_code: str) -> Link:
        """
        Return the link for `short_code`.

        Raises:
            ShortCodeNotFoundError: If no link has this code
        """
        link = await self.get_by_code(short_code)
        if link is None:
            raise ShortCodeNotFoundError(short_code)
        return link

    async def list_all(self) -> List[Link]:
        """All links, newest first."""
        statement = (
            select(Link)
            .order_by(Link.created_at.desc(), Link.id.desc())
            .execution_options(populate_existing=True)
        )
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError("Failed to list links", original_error=e)
        return list(result.scalars().all())

    async def increment_clicks(self, short_code: str) -> None:
        """
        Add one to the click counter of `short_code`.

        A missing code is not an error: the UPDATE simply matches no row.
        """
        statement = (
            update(Link)
            .where(Link.short_code == short_code)
            .values(click_count=Link.click_count + 1)
        )
        try:
            await self.session.execute(statement)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"Failed to increment clicks for '{short_code}'", original_error=e)

    async def delete(self, short_code: str) -> int:
        """Remove the link row. Returns the number of rows deleted (0 or 1)."""
        statement = delete(Link).where(Link.short_code == short_code)
        try:
            result = await self.session.execute(statement)
            deleted = result.rowcount
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"Failed to delete '{short_code}'", original_error=e)
        return deleted

    async def exists(self, short_code: str) -> bool:
        statement = select(exists().where(Link.short_code == short_code))
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"Failed to check '{short_code}'", original_error=e)
        return bool(result.scalar())

    async def stats(self) -> LinkStats:
        """Total number of links and the sum of their click counters."""
        statement = select(
            func.count(Link.id),
            func.coalesce(func.sum(Link.click_count), 0),
        )
        try:
            result = await self.session.execute(statement)
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError("Failed to compute link stats", original_error=e)
        total_links, total_clicks = result.one()
        return LinkStats(total_links=total_links or 0, total_clicks=total_clicks or 0)
