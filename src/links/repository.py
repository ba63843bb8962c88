"""Link persistence.

``LinkRepository`` is the contract the access-control engine and the expiry
cleanup depend on; ``SQLAlchemyLinkRepository`` implements it on top of an
``AsyncSession``. Store errors other than short code collisions propagate
unchanged.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from logging import getLogger
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from links.exceptions import LinkNotFound, ShortCodeConflict
from links.models import Link

logger = getLogger('links_repository')


class LinkRepository(ABC):

    @abstractmethod
    async def find_by_short_code(self, short_code: str) -> Link | None:
        ...

    @abstractmethod
    async def find_by_id(self, link_id: UUID) -> Link | None:
        ...

    @abstractmethod
    async def find_all_for_owner(self, page: int, limit: int, search: str | None,
                                 owner_id: UUID) -> tuple[list[Link], int]:
        """Return one page of the owner's links, newest first, and the total count."""

    @abstractmethod
    async def create(self, fields: dict[str, Any], owner_id: UUID | None) -> Link:
        """Insert a link. Raises ``ShortCodeConflict`` if the short code is taken."""

    @abstractmethod
    async def update(self, link_id: UUID, fields: dict[str, Any]) -> Link:
        ...

    @abstractmethod
    async def delete(self, link_id: UUID) -> None:
        ...

    @abstractmethod
    async def delete_many(self, link_ids: Sequence[UUID]) -> None:
        """Delete every listed link. Ids that no longer exist are ignored."""

    @abstractmethod
    async def find_expired_anonymous(self, cutoff: datetime) -> list[Link]:
        """Anonymous links created strictly before ``cutoff``."""


class SQLAlchemyLinkRepository(LinkRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_short_code(self, short_code: str) -> Link | None:
        result = await self.session.execute(select(Link).where(Link.short_code == short_code))
        return result.scalar_one_or_none()

    async def find_by_id(self, link_id: UUID) -> Link | None:
        return await self.session.get(Link, link_id)

    async def find_all_for_owner(self, page, limit, search, owner_id):
        conditions = [Link.user_id == owner_id]
        if search:
            conditions.append(Link.url.icontains(search, autoescape=True))

        query = (
            select(Link)
            .where(*conditions)
            .order_by(Link.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        count_query = select(func.count()).select_from(Link).where(*conditions)

        items = (await self.session.execute(query)).scalars().all()
        total = (await self.session.execute(count_query)).scalar_one()
        return list(items), total

    async def create(self, fields, owner_id):
        link = Link(**fields, user_id=owner_id)
        self.session.add(link)
        try:
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            logger.debug(f"Short code collision on {fields.get('short_code')}")
            raise ShortCodeConflict(f"Short code {fields.get('short_code')} already exists")
        await self.session.refresh(link)
        return link

    async def update(self, link_id, fields):
        link = await self.session.get(Link, link_id)
        if link is None:
            raise LinkNotFound(f"Link with ID {link_id} not found.")
        for key, value in fields.items():
            setattr(link, key, value)
        await self.session.commit()
        await self.session.refresh(link)
        return link

    async def delete(self, link_id):
        await self.session.execute(delete(Link).where(Link.id == link_id))
        await self.session.commit()

    async def delete_many(self, link_ids):
        if not link_ids:
            return
        await self.session.execute(delete(Link).where(Link.id.in_(list(link_ids))))
        await self.session.commit()

    async def find_expired_anonymous(self, cutoff):
        query = select(Link).where(Link.user_id.is_(None), Link.created_at < cutoff)
        result = await self.session.execute(query)
        return list(result.scalars().all())
