from fastapi import APIRouter, HTTPException, Depends, status, Path, Response

from sqlalchemy.ext.asyncio import AsyncSession

from typing_extensions import Annotated
from logging import getLogger
from uuid import UUID

from database import get_async_session
from links.exceptions import LinkError
from links.repository import SQLAlchemyLinkRepository
from links.schemas import LinkCreate, LinkPasswordIn, LinkRead, LinkUpdate, LinkWithPassword
from links.service import LinkService

from auth.auth import User, current_active_user, current_user


logger = getLogger('links_router')

router = APIRouter(
    prefix="/links",
    tags=["Links"],
)


async def get_link_service(session: Annotated[AsyncSession, Depends(get_async_session)]) -> LinkService:
    return LinkService(SQLAlchemyLinkRepository(session))


def to_http_error(exc: LinkError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=exc.detail)


@router.post("", status_code=status.HTTP_201_CREATED,
             response_model=LinkWithPassword, response_model_exclude_none=True)
async def create_link(data: LinkCreate,
                      service: Annotated[LinkService, Depends(get_link_service)],
                      user: Annotated[User | None, Depends(current_user)]):
    """Создает короткую ссылку. Без авторизации ссылка анонимная."""
    try:
        user_id = user.id if user is not None else None
        return await service.create(data.url, data.protected, user_id)
    except LinkError as exc:
        logger.info(exc.detail)
        raise to_http_error(exc)
    except Exception as e:
        logger.warning(e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/{short_code}", response_model=LinkRead)
async def resolve_link(short_code: Annotated[str, Path(max_length=16)],
                       service: Annotated[LinkService, Depends(get_link_service)]):
    try:
        return await service.resolve_public(short_code)
    except LinkError as exc:
        raise to_http_error(exc)
    except Exception as e:
        logger.warning(e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.post("/{short_code}/protected", response_model=LinkRead)
async def resolve_protected_link(short_code: Annotated[str, Path(max_length=16)],
                                 data: LinkPasswordIn,
                                 service: Annotated[LinkService, Depends(get_link_service)]):
    try:
        return await service.resolve_protected(short_code, data.password)
    except LinkError as exc:
        raise to_http_error(exc)
    except Exception as e:
        logger.warning(e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.put("/{link_id}", response_model=LinkWithPassword, response_model_exclude_none=True)
async def update_link(link_id: UUID,
                      data: LinkUpdate,
                      service: Annotated[LinkService, Depends(get_link_service)],
                      user: Annotated[User, Depends(current_active_user)]):
    """Обновляет адрес, активность и защиту ссылки."""
    try:
        return await service.update(link_id, data, user.id)
    except LinkError as exc:
        raise to_http_error(exc)
    except Exception as e:
        logger.warning(e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_link(link_id: UUID,
                      service: Annotated[LinkService, Depends(get_link_service)],
                      user: Annotated[User, Depends(current_active_user)]):
    """Удаляет ссылку."""
    try:
        await service.delete(link_id, user.id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except LinkError as exc:
        raise to_http_error(exc)
    except Exception as e:
        logger.warning(e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
