from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models.access_code import AccessCode
from utils.cipher import CodeCipher
from utils.code_generator import generate_access_code
from utils.logger_factory import new_logger
from utils.settings import DEFAULT_SEED_CODE_COUNT


class AccessCodeStore:
    """Whitelist of valid access codes, looked up by ciphertext"""

    def __init__(self, db: Session, cipher: CodeCipher):
        self.db = db
        self.cipher = cipher

    def find_by_ciphertext(self, ciphertext: str) -> Optional[AccessCode]:
        return self.db.query(AccessCode).filter_by(encrypted_code=ciphertext).first()

    def find_by_plaintext(self, code: str) -> Optional[AccessCode]:
        return self.find_by_ciphertext(self.cipher.encrypt(code))

    def count_all(self) -> int:
        return self.db.query(func.count(AccessCode.id)).scalar()

    def seed(self, count: int = DEFAULT_SEED_CODE_COUNT) -> List[str]:
        """
        Populate an empty whitelist with `count` freshly generated codes.

        Does nothing when at least one code already exists. The generated
        plaintext codes are logged for manual distribution and returned.

        Raises:
            IntegrityError: two generated codes collided (fatal at startup)
        """
        log = new_logger("seed_access_codes")
        existing = self.count_all()
        if existing > 0:
            log.info(f"Codes already exist in the database ({existing}), skipping seeding.")
            return []

        # Start from a clean table even though the count says it is empty
        self.db.query(AccessCode).delete()

        codes = [generate_access_code() for _ in range(count)]
        self.db.add_all([
            AccessCode(code=code, encrypted_code=self.cipher.encrypt(code))
            for code in codes
        ])
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            log.exception("Failed to commit seeded access codes")
            raise

        log.info(f"{len(codes)} random codes seeded: {codes}")
        return codes
