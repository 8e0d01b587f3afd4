"""
Domain error taxonomy and the FastAPI handlers that render it.

Every error reaches the client as
``{"success": false, "error": <code>, "message": <text>, ...context}``.
"""
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base class for errors reported to the caller"""
    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "app_error"
    message: str = "Request failed"
    headers: Optional[Dict[str, str]] = None

    def __init__(self, message: Optional[str] = None, **context: Any):
        self.message = message or self.message
        self.context = context
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": False,
            "error": self.code,
            "message": self.message,
        }
        payload.update(self.context)
        return payload


class InvalidInputError(AppException):
    code = "invalid_input"
    message = "Missing required fields"

    @classmethod
    def from_validation_errors(cls, errors: Iterable[Dict[str, Any]]) -> "InvalidInputError":
        """Build from pydantic error dicts; absent fields and malformed values get different messages"""
        errors = list(errors)
        fields = sorted({
            ".".join(str(part) for part in error["loc"] if part != "body")
            for error in errors
        })
        # Form posts send "" and JSON clients send null for fields they leave out
        if any(error["type"] == "missing" or error.get("input") in (None, "") for error in errors):
            return cls(fields=fields)
        return cls(f"Invalid value for {', '.join(fields)}", fields=fields)


class DuplicateEmailError(AppException):
    code = "duplicate_email"
    message = "Email already registered"


class InvalidCredentialsError(AppException):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "invalid_credentials"
    message = "Invalid email or password"


class UnauthenticatedError(AppException):
    """Missing, invalid, expired or orphaned bearer token.

    ``reason`` is kept for logging only and never sent to the client.
    """
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"
    message = "Could not validate credentials"
    headers = {"WWW-Authenticate": "Bearer"}

    def __init__(self, reason: str = "unknown"):
        self.reason = reason
        super().__init__()


class EligibilityExceededError(AppException):
    code = "eligibility_exceeded"

    def __init__(self, ceiling: Decimal):
        self.ceiling = ceiling
        super().__init__(
            f"Maximum loan based on income is {ceiling}",
            maxLoan=ceiling,
        )


class StoreFailureError(AppException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "store_failure"
    message = "Server error"


class InvalidTokenError(Exception):
    """Raised by the token service; never reaches the client directly"""


def _render(exc: AppException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(exc.to_dict()),
        headers=exc.headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain error handlers to the application"""

    @app.exception_handler(AppException)
    async def handle_app_exception(request: Request, exc: AppException):
        return _render(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return _render(InvalidInputError.from_validation_errors(exc.errors()))

    @app.exception_handler(SQLAlchemyError)
    async def handle_store_failure(request: Request, exc: SQLAlchemyError):
        logger.error(
            f"Store failure on {request.method} {request.url.path}",
            exc_info=exc,
        )
        return _render(StoreFailureError())
