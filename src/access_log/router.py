from fastapi import APIRouter, HTTPException, Depends, Query, Request, Response, status

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from typing_extensions import Annotated
from datetime import datetime
from logging import getLogger
from zoneinfo import ZoneInfo

from config import PORTAL_TIMEZONE
from database import get_async_session
from access_log.models import PortalAccessLog


logger = getLogger('access_log_router')

router = APIRouter(
    prefix="/api/v1/portal-access-log",
    tags=["Portal access log"],
)


def portal_now() -> datetime:
    return datetime.now(ZoneInfo(PORTAL_TIMEZONE)).replace(tzinfo=None)


@router.get("", status_code=status.HTTP_204_NO_CONTENT)
async def log_access(request: Request,
                     session: Annotated[AsyncSession, Depends(get_async_session)],
                     ip_address: Annotated[str | None, Query(alias='ipAddress', max_length=45)] = None,
                     user_agent: Annotated[str | None, Query(alias='userAgent', max_length=500)] = None):
    """Records a visit to the portal; missing fields are taken from the request."""
    ip_address = ip_address or (request.client.host if request.client else None)
    user_agent = user_agent or request.headers.get('user-agent')
    try:
        statement = insert(PortalAccessLog).values(
            ip_address=ip_address,
            user_agent=user_agent[:500] if user_agent else None,
            accessed_at=portal_now(),
        )
        await session.execute(statement)
        await session.commit()
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except Exception as e:
        await session.rollback()
        logger.warning(e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
