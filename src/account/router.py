from fastapi import APIRouter, HTTPException, Depends, status, Query

from typing_extensions import Annotated
from logging import getLogger

from links.router import get_link_service
from links.schemas import LinkRead, Paginated
from links.service import LinkService

from auth.auth import User, current_active_user


logger = getLogger('account_router')

router = APIRouter(
    prefix="/account",
    tags=["Account"],
)


@router.get("/mylinks", response_model=Paginated[LinkRead])
async def show_my_links(service: Annotated[LinkService, Depends(get_link_service)],
                        user: Annotated[User, Depends(current_active_user)],
                        page: Annotated[int, Query(ge=1)] = 1,
                        limit: Annotated[int, Query(ge=1, le=100)] = 10,
                        search: Annotated[str | None, Query(max_length=200)] = None):
    """Ссылки текущего пользователя, новые первыми."""
    try:
        return await service.list_links(page, limit, search, user.id)
    except Exception as e:
        logger.warning(e.args)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
