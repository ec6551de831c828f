"""
Error taxonomy shared by the services and the API layer.

Every failure that reaches the HTTP boundary is rendered as

    {"ok": false, "error": "<message>"}

with the status code carried by the exception class.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        return {"ok": False, "error": self.message}


class InvalidRequest(AppError):
    """A required field is missing; the client must correct its input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "invalid request"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "not found"


class UpstreamFailure(AppError):
    """The completion provider or the SMTP relay failed."""

    default_message = "upstream service error"


class StoreFailure(AppError):
    """
    The document store failed.

    When the failure happens right after a successful generation the
    generated text rides along so the caller still receives it.
    """

    default_message = "store error"

    def __init__(self, message: Optional[str] = None, generated: Optional[str] = None) -> None:
        super().__init__(message)
        self.generated = generated

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        if self.generated is not None:
            payload["generated"] = self.generated
        return payload


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message})


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.opt(exception=exc).error("{} {} failed: {}", request.method, request.url.path, exc.message)
    else:
        logger.warning("{} {} rejected: {}", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = errors[0].get("msg", "invalid request") if errors else "invalid request"
    logger.warning("{} {} invalid body: {}", request.method, request.url.path, detail)
    return error_response(status.HTTP_400_BAD_REQUEST, detail)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error("Unhandled error on {} {}", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "server error")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
