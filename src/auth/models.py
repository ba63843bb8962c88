from datetime import datetime, timezone

from fastapi_users.db import SQLAlchemyBaseUserTableUUID
from sqlalchemy import Column, DateTime, String

from database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLAlchemyBaseUserTableUUID, Base):
    name = Column(String(100), nullable=False, default='')
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
