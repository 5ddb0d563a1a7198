import logging
from typing import List

from sqlalchemy.exc import OperationalError
from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from database import Base, SessionLocal, engine
from services.code_store import AccessCodeStore
from utils.cipher import CodeCipher
from utils.logger_factory import new_logger
from utils.settings import Settings

bootstrap_retry_logger = new_logger("bootstrap_retry")


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(OperationalError),
    before_sleep=before_sleep_log(bootstrap_retry_logger, logging.WARNING),
    reraise=True,
)
def initialize_store(settings: Settings) -> List[str]:
    """
    Create missing tables and seed the access code whitelist once.

    Only reaching the database is retried. After the last attempt the
    OperationalError propagates and startup aborts.
    """
    log = new_logger("initialize_store")
    Base.metadata.create_all(bind=engine)
    log.info("Database tables ready")

    db = SessionLocal()
    try:
        store = AccessCodeStore(db, CodeCipher.from_settings(settings))
        return store.seed(settings.seed_code_count)
    finally:
        db.close()
