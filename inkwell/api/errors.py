"""
Mapping of domain and infrastructure errors to structured HTTP responses.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from inkwell.shared.exceptions.domain_exceptions import (
    CommentNotFoundError,
    DomainException,
    DomainValidationError,
    EntityNotFoundError,
    InvalidTransitionError,
    NotAuthorizedError,
    SlugCollisionError,
)
from inkwell.shared.exceptions.infrastructure_exceptions import InfrastructureException

logger = logging.getLogger(__name__)

STATUS_CODES = {
    DomainValidationError: 422,
    SlugCollisionError: 409,
    InvalidTransitionError: 409,
    CommentNotFoundError: 404,
    NotAuthorizedError: 403,
    EntityNotFoundError: 404,
}


def status_code_for(exc: DomainException) -> int:
    for exc_type, status_code in STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return status_code
    return 400


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    status_code = status_code_for(exc)
    logger.info("%s %s -> %s (%s)", request.method, request.url.path, status_code, exc.code)
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def infrastructure_exception_handler(request: Request, exc: InfrastructureException) -> JSONResponse:
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=503,
        content={"error": "storage_unavailable", "message": "Storage is unavailable", "details": {}},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(InfrastructureException, infrastructure_exception_handler)
