"""Purge of stale anonymous links.

Links created without an owner are kept for a fixed retention window and
then deleted in one bulk operation. Owned links are never touched.
"""

from datetime import datetime, timedelta, timezone
from logging import getLogger
from typing import Callable
from uuid import UUID

from links.repository import LinkRepository

logger = getLogger('tasks_cleanup')


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExpirySweeper:

    def __init__(self,
                 repository: LinkRepository,
                 retention: timedelta = timedelta(days=7),
                 clock: Callable[[], datetime] = utcnow):
        self.repository = repository
        self.retention = retention
        self.clock = clock

    def cutoff(self) -> datetime:
        return self.clock() - self.retention

    async def sweep(self) -> list[UUID]:
        """Delete anonymous links created before the cutoff and return their ids.

        Failures propagate; the next run recomputes the same set.
        """
        cutoff = self.cutoff()
        expired = await self.repository.find_expired_anonymous(cutoff)
        expired_ids = [link.id for link in expired]
        await self.repository.delete_many(expired_ids)
        logger.info(f"Deleted {len(expired_ids)} anonymous links created before {cutoff.isoformat()}")
        return expired_ids
