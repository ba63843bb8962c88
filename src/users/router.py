from fastapi import APIRouter, HTTPException, Depends, Query, Response, status

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from typing_extensions import Annotated
from logging import getLogger
from uuid import UUID
import math

from database import get_async_session
from links.schemas import PageMeta, Paginated
from users.schemas import UserPublic

from auth.auth import User, current_active_user


logger = getLogger('users_router')

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


async def get_active_user_or_404(session: AsyncSession, user_id: UUID) -> User:
    user = await session.get(User, user_id)
    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User with ID {user_id} not found.")
    return user


@router.get("", response_model=Paginated[UserPublic])
async def list_users(session: Annotated[AsyncSession, Depends(get_async_session)],
                     user: Annotated[User, Depends(current_active_user)],
                     page: Annotated[int, Query(ge=1)] = 1,
                     limit: Annotated[int, Query(ge=1, le=100)] = 10,
                     search: Annotated[str | None, Query(max_length=100)] = None):
    """Активные пользователи, новые первыми; поиск по имени."""
    try:
        conditions = [User.is_active.is_(True)]
        if search:
            conditions.append(User.name.icontains(search, autoescape=True))

        query = (
            select(User)
            .where(*conditions)
            .order_by(User.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        count_query = select(func.count()).select_from(User).where(*conditions)

        users = (await session.execute(query)).scalars().all()
        total = (await session.execute(count_query)).scalar_one()
        return Paginated[UserPublic](
            data=[UserPublic.model_validate(item) for item in users],
            meta=PageMeta(total=total, page=page, last_page=math.ceil(total / limit)),
        )
    except Exception as e:
        logger.warning(e.args)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))


@router.get("/{user_id:uuid}", response_model=UserPublic)
async def get_user(user_id: UUID,
                   session: Annotated[AsyncSession, Depends(get_async_session)],
                   user: Annotated[User, Depends(current_active_user)]):
    return await get_active_user_or_404(session, user_id)


@router.delete("/{user_id:uuid}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_user(user_id: UUID,
                          session: Annotated[AsyncSession, Depends(get_async_session)],
                          user: Annotated[User, Depends(current_active_user)]):
    """Мягкое удаление: учётная запись остаётся, но становится неактивной."""
    if user.id != user_id and not user.is_superuser:
        logger.info(f"User {user.id} tried to deactivate {user_id}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    try:
        target = await get_active_user_or_404(session, user_id)
        target.is_active = False
        await session.commit()
        logger.info(f"User {user_id} deactivated by {user.id}")
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except HTTPException:
        raise
    except Exception as e:
        await session.rollback()
        logger.warning(e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
