import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Uuid

from database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Link(Base):
    __tablename__ = 'links'
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    url = Column(String, nullable=False, index=True)
    short_code = Column(String(16), nullable=False, unique=True, index=True)
    password = Column(String, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    user_id = Column(Uuid, ForeignKey('user.id'), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
