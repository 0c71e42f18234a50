"""Maps pipeline failures to the uniform JSON failure envelope."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from conversion_service.api.schemas import ErrorResponseSchema
from conversion_service.domain.exceptions import ConversionError, ErrorKind

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTHORIZATION: 401,
    ErrorKind.DOWNLOAD: 502,
    ErrorKind.RASTERIZATION: 500,
    ErrorKind.NO_PAGES: 422,
    ErrorKind.RENDER: 500,
    ErrorKind.UPLOAD: 502,
    ErrorKind.MANIFEST: 502,
}

INTERNAL_ERROR_KIND = "internal"


def status_for(kind: ErrorKind) -> int:
    return STATUS_BY_KIND.get(kind, 500)


def _envelope(status_code: int, message: str, kind: str, stage: str | None = None) -> JSONResponse:
    body = ErrorResponseSchema(error=message, errorKind=kind, stage=stage)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def conversion_error_handler(request: Request, exc: ConversionError) -> JSONResponse:
    return _envelope(status_for(exc.kind), exc.message, exc.kind.value, exc.stage)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()) if part != 'body')}: {error.get('msg')}"
        for error in exc.errors()
    )
    return _envelope(400, f"Invalid request body ({problems})", ErrorKind.VALIDATION.value)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("[conversion-service] Unhandled error on %s", request.url.path)
    message = str(exc) or "Unknown error"
    return _envelope(500, message, INTERNAL_ERROR_KIND)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ConversionError, conversion_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
