from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from api.dependencies import get_verification_service
from schemas.access_code import ErrorResponse, LogoutRequest, LogoutResponse, VerifyCodeRequest, VerifyCodeResponse
from services.verification_service import VerificationService
from utils.errors import DeviceConflictError
from utils.logger_factory import new_logger

router = APIRouter()

SERVER_ERROR = "Server error"


@router.post(
    "/verify-code",
    response_model=VerifyCodeResponse,
    responses={400: {"model": ErrorResponse}, 403: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def verify_code(
    payload: VerifyCodeRequest,
    service: VerificationService = Depends(get_verification_service),
):
    log = new_logger("verify_code")
    if not payload.code or not payload.deviceId:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Code and deviceId required")

    log.info(f"Verifying code for device {payload.deviceId}")
    try:
        valid = service.verify(payload.code, payload.deviceId)
    except DeviceConflictError as e:
        return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"error": str(e)})
    except Exception:
        log.exception("Code validation error")
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": SERVER_ERROR})
    return {"valid": valid}


@router.post(
    "/logout",
    response_model=LogoutResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def logout(
    payload: LogoutRequest,
    service: VerificationService = Depends(get_verification_service),
):
    log = new_logger("logout")
    if not payload.code:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Code required")

    try:
        success = service.logout(payload.code)
    except Exception:
        log.exception("Logout error")
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": SERVER_ERROR})
    log.info("Session removed")
    return {"success": success}
