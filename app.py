from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

import models  # noqa: F401  registers tables on Base.metadata
from utils.logger_factory import new_logger
from utils.settings import get_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    log = new_logger("startup")
    from services.bootstrap import initialize_store

    # ConfigurationError and an unreachable store both abort startup
    settings = get_settings()
    initialize_store(settings)
    log.info("Access Gate API ready")
    yield


app = FastAPI(title="Access Gate API", lifespan=lifespan)


@app.middleware("http")
async def log_request(request: Request, call_next):
    log = new_logger("log_request")
    # Bodies carry access codes, so only the request line is logged
    log.info(f"INCOMING REQUEST: {request.method} {request.url.path}")
    response = await call_next(request)
    if request.method != "OPTIONS":
        log.info(f"RESPONSE: {request.method} {request.url.path} -> {response.status_code}")
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    log = new_logger("validation_error")
    log.info(f"Rejected malformed request body for {request.url.path}: {[err['loc'] for err in exc.errors()]}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


from api.healthcheck import router as health_router
from api.verification_code import router as verification_code_router
from api.chat import router as chat_router

app.include_router(health_router)
app.include_router(verification_code_router, prefix="/api")
app.include_router(chat_router, prefix="/api")


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
