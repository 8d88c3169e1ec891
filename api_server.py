from __future__ import annotations  # FastAPI server exposing the interview session API

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import router
from services.errors import (
    ConfigurationError,
    InputValidationError,
    InterviewError,
    MalformedResponseError,
    NotFoundError,
    SessionEndedError,
    UpstreamTransportError,
)


logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (InputValidationError, 400),
    (NotFoundError, 404),
    (SessionEndedError, 409),
    (UpstreamTransportError, 502),
    (MalformedResponseError, 502),
    (ConfigurationError, 500),
)


def _status_for(exc: InterviewError) -> int:  # Map the error taxonomy onto HTTP status codes
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


async def interview_error_handler(request: Request, exc: InterviewError) -> JSONResponse:
    status = _status_for(exc)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=status, content={"detail": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("%s %s invalid body: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": "Missing required fields"})


def create_app() -> FastAPI:  # Assemble the FastAPI application
    application = FastAPI(title="Mock Interview API")
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(InterviewError, interview_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_handler)
    application.include_router(router)

    @application.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    return application


app = create_app()
