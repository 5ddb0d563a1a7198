from datetime import timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.device_session import SESSION_TTL, DeviceSession, utcnow
from utils.logger_factory import new_logger


class DeviceSessionStore:
    """
    Persistent code -> device bindings with passive time-based expiry.

    A session expires `ttl` after its `created_at`, which every upsert resets.
    Expired rows are purged by the store whenever it is read, so callers never
    see them and nothing has to poll.
    """

    def __init__(self, db: Session, ttl: timedelta = SESSION_TTL):
        self.db = db
        self.ttl = ttl

    def _cutoff(self):
        return utcnow() - self.ttl

    def purge_expired(self) -> int:
        log = new_logger("purge_expired_sessions")
        try:
            expired_count = self.db.query(DeviceSession).filter(
                DeviceSession.created_at <= self._cutoff()
            ).delete(synchronize_session="fetch")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        if expired_count > 0:
            log.info(f"Purged {expired_count} expired device sessions")
        return expired_count

    def find_by_code(self, code: str) -> Optional[DeviceSession]:
        self.purge_expired()
        return self.db.query(DeviceSession).filter_by(code=code).first()

    def upsert(self, code: str, device_id: str) -> DeviceSession:
        """Bind `code` to `device_id` and restart the expiry window"""
        log = new_logger("upsert_session")
        session = self.db.query(DeviceSession).filter_by(code=code).first()
        if session is None:
            session = DeviceSession(code=code, device_id=device_id, created_at=utcnow())
            self.db.add(session)
        else:
            session.device_id = device_id
            session.created_at = utcnow()

        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent request inserted the row first; overwrite it
            self.db.rollback()
            session = self.db.query(DeviceSession).filter_by(code=code).one()
            session.device_id = device_id
            session.created_at = utcnow()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(session)
        log.info(f"Session bound to device {device_id} until {session.expires_at(self.ttl).isoformat()}")
        return session

    def delete_by_code(self, code: str) -> bool:
        try:
            deleted = self.db.query(DeviceSession).filter_by(code=code).delete(synchronize_session="fetch")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        new_logger("delete_session").info(f"Deleted {deleted} session(s) for code")
        return True
