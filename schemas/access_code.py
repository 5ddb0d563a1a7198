from pydantic import BaseModel
from typing import Optional


class VerifyCodeRequest(BaseModel):
    # Presence is checked by the route so that missing and empty both give 400
    code: Optional[str] = None
    deviceId: Optional[str] = None


class VerifyCodeResponse(BaseModel):
    valid: bool


class LogoutRequest(BaseModel):
    code: Optional[str] = None


class LogoutResponse(BaseModel):
    success: bool


class ErrorResponse(BaseModel):
    error: str
