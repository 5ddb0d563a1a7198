from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from database import Base


class AccessCode(Base):
    __tablename__ = "access_codes"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(64), unique=True, nullable=False)  # Plaintext, kept for reference
    encrypted_code = Column(String(256), unique=True, index=True, nullable=False)  # Hex AES-CBC of `code`
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
