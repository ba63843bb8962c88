"""Link access-control engine.

Every rule about who may see or change a link lives here: ownership,
active/inactive state and password protection. Persistence is delegated to a
``LinkRepository``; its errors are never caught.
"""

import math
from logging import getLogger
from typing import Callable
from uuid import UUID

from links.exceptions import LinkForbidden, LinkNotFound, LinkUnauthorized
from links.models import Link
from links.repository import LinkRepository
from links.schemas import LinkRead, LinkUpdate, LinkWithPassword, PageMeta, Paginated
from links.utils import generate_link_password, generate_short_code

logger = getLogger('links_service')


class LinkService:

    def __init__(self,
                 repository: LinkRepository,
                 code_generator: Callable[[], str] = generate_short_code,
                 password_generator: Callable[[], str] = generate_link_password):
        self.repository = repository
        self.code_generator = code_generator
        self.password_generator = password_generator

    async def create(self, url: str, protected: bool, owner_id: UUID | None) -> LinkWithPassword:
        """Create a link and disclose its password, if any, for the only time."""
        fields = {
            'url': url,
            'short_code': self.code_generator(),
            'password': self.password_generator() if protected else None,
        }
        link = await self.repository.create(fields, owner_id)
        logger.debug(f"Created link {link.short_code} for {owner_id or 'anonymous'}")

        response = LinkWithPassword.model_validate(link)
        response.password = fields['password']
        return response

    async def resolve_public(self, short_code: str) -> LinkRead:
        link = await self._get_visible(short_code)
        if link.password:
            raise LinkUnauthorized("This link is protected with a password.")
        return LinkRead.model_validate(link)

    async def resolve_protected(self, short_code: str, password: str | None) -> LinkRead:
        link = await self._get_visible(short_code)
        # plaintext, case-sensitive comparison
        if link.password and link.password != password:
            raise LinkUnauthorized("Invalid password for this protected link.")
        return LinkRead.model_validate(link)

    async def update(self, link_id: UUID, data: LinkUpdate, requester_id: UUID) -> LinkWithPassword:
        link = await self._get_owned(link_id, requester_id, action='update')

        fields = {'url': data.url}
        if data.active is not None:
            fields['active'] = data.active

        generated = None
        if data.protected:
            if link.password is None:
                generated = self.password_generator()
                fields['password'] = generated
        else:
            fields['password'] = None

        updated = await self.repository.update(link_id, fields)

        response = LinkWithPassword.model_validate(updated)
        response.password = generated
        return response

    async def delete(self, link_id: UUID, requester_id: UUID) -> None:
        await self._get_owned(link_id, requester_id, action='delete')
        await self.repository.delete(link_id)

    async def list_links(self, page: int, limit: int, search: str | None, owner_id: UUID) -> Paginated[LinkRead]:
        items, total = await self.repository.find_all_for_owner(page, limit, search, owner_id)
        return Paginated[LinkRead](
            data=[LinkRead.model_validate(item) for item in items],
            meta=PageMeta(total=total, page=page, last_page=math.ceil(total / limit)),
        )

    async def _get_visible(self, short_code: str) -> Link:
        link = await self.repository.find_by_short_code(short_code)
        if link is None or not link.active:
            raise LinkNotFound(f"Link with short code {short_code} not found.")
        return link

    async def _get_owned(self, link_id: UUID, requester_id: UUID, action: str) -> Link:
        link = await self.repository.find_by_id(link_id)
        if link is None:
            raise LinkNotFound(f"Link with ID {link_id} not found.")
        # anonymous links (user_id is None) never match an authenticated requester
        if link.user_id != requester_id:
            logger.info(f"User {requester_id} denied {action} of link {link_id}")
            raise LinkForbidden(f"You do not have permission to {action} this link.")
        return link
