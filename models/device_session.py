from datetime import datetime, timedelta, timezone

from sqlalchemy import Column, DateTime, Integer, String

from database import Base

SESSION_TTL = timedelta(days=7)


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what the DateTime columns store"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class DeviceSession(Base):
    """The single device currently allowed to use an access code"""
    __tablename__ = "device_sessions"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(64), unique=True, index=True, nullable=False)  # AccessCode.code
    device_id = Column(String(255), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)  # Reset on every upsert

    def expires_at(self, ttl: timedelta = SESSION_TTL) -> datetime:
        return self.created_at + ttl
