#!/usr/bin/env python3
"""
Custom exceptions and error handlers for the matching API.

Every error leaves the API as:
    {"success": false, "error": {"code": "...", "message": "..."}}
"""

import logging
from typing import Optional
from fastapi import Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from core.calculator.errors import CalculationError
from core.workflow.errors import WorkflowError

logger = logging.getLogger(__name__)

# HTTP status per error code
STATUS_BY_CODE = {
    'JOB_NOT_FOUND': 404,
    'MATCH_NOT_FOUND': 404,
    'NO_REQUIREMENTS': 400,
    'INVALID_STATUS': 400,
    'VALIDATION_ERROR': 400,
    'CALCULATION_IN_PROGRESS': 409,
    'CALCULATION_TIMEOUT': 504,
    'NO_TOKEN': 401,
    'INVALID_TOKEN': 401,
    'TOKEN_EXPIRED': 401,
    'FORBIDDEN': 403,
    'RATE_LIMITED': 429,
    'INTERNAL_ERROR': 500,
}

GENERIC_MESSAGES = {
    'INTERNAL_ERROR': "An internal error occurred",
    'CALCULATION_TIMEOUT': "Match calculation did not finish in time, try again later",
}


class ServiceException(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, code: str = 'INTERNAL_ERROR', status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code or STATUS_BY_CODE.get(code, 500)


class JobNotFoundException(ServiceException):
    """Raised when a job is missing or not owned by the caller."""

    def __init__(self, job_id):
        super().__init__(
            f"Job {job_id} not found or you do not have permission",
            code='JOB_NOT_FOUND'
        )


class MatchNotFoundException(ServiceException):
    """Raised when a match is missing or not visible to the caller."""

    def __init__(self, match_id):
        super().__init__(
            f"Match {match_id} not found or you do not have permission",
            code='MATCH_NOT_FOUND'
        )


def error_response(code: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {"code": code, "message": message}
        }
    )


async def service_exception_handler(
    request: Request,
    exc: ServiceException
) -> JSONResponse:
    """
    Handle service layer exceptions.

    Args:
        request: The FastAPI request.
        exc: The service exception.

    Returns:
        JSONResponse with error details.
    """
    if exc.status_code >= 500:
        logger.error(f"Service error in {request.url.path}: {exc}", exc_info=True)
        message = GENERIC_MESSAGES['INTERNAL_ERROR']
    else:
        logger.info(f"{exc.code} in {request.url.path}: {exc.message}")
        message = exc.message
    return error_response(exc.code, message, exc.status_code)


async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map calculation and workflow errors onto their API codes."""
    code = getattr(exc, 'code', 'INTERNAL_ERROR')
    status_code = STATUS_BY_CODE.get(code, 500)

    if status_code >= 500:
        if code == 'INTERNAL_ERROR':
            logger.error(f"{exc.__class__.__name__} in {request.url.path}: {exc}", exc_info=True)
        else:
            logger.warning(f"{code} in {request.url.path}: {exc}")
        message = GENERIC_MESSAGES.get(code, GENERIC_MESSAGES['INTERNAL_ERROR'])
    else:
        logger.info(f"{code} in {request.url.path}: {exc}")
        message = str(exc)

    return error_response(code, message, status_code)


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = '.'.join(str(part) for part in first.get('loc', ()))
        message = f"{location}: {first.get('msg')}"
    else:
        message = "Invalid request"
    return error_response('VALIDATION_ERROR', message, 400)


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(f"Rate limit exceeded on {request.url.path}: {exc.detail}")
    return error_response('RATE_LIMITED', f"Rate limit exceeded: {exc.detail}", 429)


async def http_exception_handler(
    request: Request,
    exc: HTTPException
) -> JSONResponse:
    """
    Handle FastAPI HTTP exceptions with consistent format.
    """
    code = 'NOT_FOUND' if exc.status_code == 404 else 'HTTP_ERROR'
    return error_response(code, str(exc.detail), exc.status_code)


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle unexpected exceptions without leaking internals.
    """
    logger.exception(f"Unexpected error in {request.url.path}")
    return error_response('INTERNAL_ERROR', GENERIC_MESSAGES['INTERNAL_ERROR'], 500)


def register_exception_handlers(app) -> None:
    app.add_exception_handler(ServiceException, service_exception_handler)
    app.add_exception_handler(CalculationError, domain_exception_handler)
    app.add_exception_handler(WorkflowError, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
