"""
FastAPI application entrypoint. No business logic; only wiring, error mapping and logging.

Run locally with:

    uvicorn gatekeeper.main:app --reload
"""

from dotenv import load_dotenv

load_dotenv()

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from gatekeeper.api.v1 import router as v1_router
from gatekeeper.core.config import settings
from gatekeeper.core.errors import ServiceError
from gatekeeper.core.security import TokenService
from gatekeeper.schemas.common import ErrorResponse

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Gatekeeper API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Built once at import: a missing signing secret stops startup instead of failing requests.
app.state.token_service = TokenService.from_settings(settings)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, code: str, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(code=code, message=message).model_dump(),
        headers=headers,
    )


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Typed failures: status comes from the error code."""
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s (%s)", request.method, request.url.path, exc.code, exc.message,
            exc_info=exc,
        )
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return _error(exc.status_code, exc.code, exc.message, headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Invalid request to %s: %s", request.url.path, exc.errors())
    return _error(400, "INVALID_INPUT", "Request body or parameters are invalid")


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Store failures never leak SQL to the client."""
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(500, "SERVER_ERROR", "Internal server error")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(500, "SERVER_ERROR", "Internal server error")


app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Gatekeeper API"}
