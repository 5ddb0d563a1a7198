"""
API endpoint proxying chat conversations to OpenAI
"""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from api.dependencies import get_chat_service
from schemas.chat import ChatRequest
from services.chat_service import ChatService
from utils.errors import UpstreamError
from utils.logger_factory import new_logger

router = APIRouter()
log = new_logger("chat_api")


@router.post("/chat")
async def chat(request: ChatRequest, service: ChatService = Depends(get_chat_service)):
    """
    Forward `messages` to the completion API and relay its JSON response.

    Upstream failures are logged and reported to the caller as a generic 500.
    """
    if request.messages is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Messages required")

    log.info(f"Forwarding {len(request.messages)} messages to OpenAI")
    try:
        completion = await service.complete(request.messages)
    except UpstreamError as e:
        log.error(f"OpenAI Error: {e} (status: {e.status_code})")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to generate response"},
        )
    except Exception:
        log.exception("Unexpected error while forwarding chat request")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to generate response"},
        )
    return JSONResponse(content=completion)
