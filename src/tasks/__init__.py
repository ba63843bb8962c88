import asyncio
from logging import getLogger
from datetime import timedelta
from celery import Celery
from celery.schedules import crontab

from config import (
    BROKER_URL,
    ANONYMOUS_LINK_RETENTION_DAYS, CLEANUP_HOUR, CLEANUP_MINUTE,
)
from database import async_session_maker, engine
from links.repository import SQLAlchemyLinkRepository
from tasks.cleanup import ExpirySweeper

logger = getLogger('tasks')

app = Celery("tasks", broker=BROKER_URL)


async def adelete_expired_anonymous_links() -> int:
    try:
        async with async_session_maker() as session:
            sweeper = ExpirySweeper(
                SQLAlchemyLinkRepository(session),
                retention=timedelta(days=ANONYMOUS_LINK_RETENTION_DAYS),
            )
            deleted = await sweeper.sweep()
    finally:
        # each task run gets a fresh event loop, pooled connections cannot outlive it
        await engine.dispose()
    return len(deleted)


@app.task(name="tasks.delete_expired_anonymous_links")
def delete_expired_anonymous_links() -> int:
    logger.info("Starting anonymous link cleanup")
    return asyncio.run(adelete_expired_anonymous_links())


app.conf.broker_connection_retry_on_startup = True
app.conf.timezone = "UTC"

app.conf.beat_schedule = {
    "delete-expired-anonymous-links-daily": {
        "task": "tasks.delete_expired_anonymous_links",
        "schedule": crontab(hour=CLEANUP_HOUR, minute=CLEANUP_MINUTE),
    },
}

app.conf.update(imports=['tasks'])
