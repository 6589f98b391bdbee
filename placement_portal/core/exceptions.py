"""
Error taxonomy and FastAPI exception handlers.

Every error leaves the API as {"message": "..."} with a matching status code.
Unexpected exceptions are logged with traceback and returned as a generic 500,
so internal details never reach the client.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class PortalError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(PortalError):
    status_code = 404


class ValidationFailure(PortalError):
    status_code = 400


class Unauthorized(PortalError):
    status_code = 401


class Forbidden(PortalError):
    status_code = 403


class InvalidTransition(PortalError):
    status_code = 400

    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move application from {current} to {target}")
        self.current = current
        self.target = target


class NotEligible(PortalError):
    """Raised when the eligibility evaluator refuses an application."""

    status_code = 400


async def portal_error_handler(request: Request, exc: PortalError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Validation failed", "errors": jsonable_encoder(exc.errors())},
    )


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=400, content={"message": "Duplicate or conflicting record"})


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
