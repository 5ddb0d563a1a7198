from fastapi import Depends
from sqlalchemy.orm import Session

from database import get_db
from services.chat_service import ChatService
from services.code_store import AccessCodeStore
from services.session_store import DeviceSessionStore
from services.verification_service import VerificationService
from utils.cipher import CodeCipher
from utils.settings import Settings, get_settings


def get_cipher(settings: Settings = Depends(get_settings)) -> CodeCipher:
    return CodeCipher.from_settings(settings)


def get_verification_service(
    db: Session = Depends(get_db),
    cipher: CodeCipher = Depends(get_cipher),
) -> VerificationService:
    return VerificationService(AccessCodeStore(db, cipher), DeviceSessionStore(db))


def get_chat_service(settings: Settings = Depends(get_settings)) -> ChatService:
    return ChatService(settings.openai_api_key)
