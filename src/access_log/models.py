from sqlalchemy import Column, DateTime, Integer, String

from database import Base


class PortalAccessLog(Base):
    __tablename__ = 'portal_access_logs'
    id = Column(Integer, primary_key=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String(500), nullable=True)
    # local wall-clock time of the portal, stored without offset
    accessed_at = Column(DateTime, nullable=False)
