# core/errors.py

"""
Exception handlers mapping console errors to JSON responses
"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from identity_console.core.exceptions import (
    AccountNotFoundError,
    IdentityAPIError,
    JobStateError,
    JobValidationError
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register console exception handlers with the FastAPI app."""

    @app.exception_handler(AccountNotFoundError)
    async def account_not_found(request: Request, exc: AccountNotFoundError):
        logger.warning(f"{request.method} {request.url.path} - {exc}")
        return JSONResponse(status_code=404, content={"status": "error", "message": "Account not found"})

    @app.exception_handler(JobValidationError)
    async def job_validation_error(request: Request, exc: JobValidationError):
        logger.info(f"{request.method} {request.url.path} - rejected: {exc}")
        return JSONResponse(status_code=400, content={"status": "error", "message": str(exc)})

    @app.exception_handler(JobStateError)
    async def job_state_error(request: Request, exc: JobStateError):
        logger.info(f"{request.method} {request.url.path} - rejected: {exc}")
        return JSONResponse(
            status_code=409,
            content={"status": "error", "message": str(exc), "job_status": exc.status}
        )

    @app.exception_handler(IdentityAPIError)
    async def identity_api_error(request: Request, exc: IdentityAPIError):
        content = {"status": "error", "message": exc.message}
        if exc.payload:
            content["details"] = exc.payload
        return JSONResponse(status_code=exc.status_code, content=content)
