"""Error taxonomy and its mapping onto HTTP responses."""
import logging
from typing import Iterable, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Leading `loc` parts naming the request section, reported as `location`
_LOCATION_PREFIXES = ("body", "query", "path", "header")


class FieldError(BaseModel):
    """A single field-level validation failure."""
    
    field: str
    message: str
    location: Optional[str] = None


class ErrorResponse(BaseModel):
    """Body of every non-2xx JSON response."""
    
    message: str
    errors: List[FieldError] = Field(default_factory=list)


class RequestValidationFailed(Exception):
    """Raised when request input is well-formed JSON but semantically invalid."""

    def __init__(self, errors: Iterable[FieldError]):
        self.errors = list(errors)
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in self.errors))


class TransactionNotFound(Exception):
    """Raised when an id does not exist or belongs to another owner."""

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} not found")


class AuthenticationRequired(Exception):
    """Raised when the caller identity is missing."""


def field_errors_from_pydantic(errors: Iterable[dict]) -> List[FieldError]:
    """Convert pydantic/FastAPI error dicts to ``FieldError`` entries."""
    out = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        location = None
        if loc and loc[0] in _LOCATION_PREFIXES:
            location = loc.pop(0)
        field = ".".join(loc) if loc else (location or "request")
        message = err.get("msg", "Invalid value")
        # pydantic prefixes messages raised from custom validators
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        out.append(FieldError(field=field, message=message, location=location))
    return out


def _error_body(message: str, errors: Optional[List[FieldError]] = None) -> dict:
    return ErrorResponse(message=message, errors=errors or []).model_dump(exclude_none=True)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to ``app``."""

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = field_errors_from_pydantic(exc.errors())
        logger.info(
            "Request validation failed",
            extra={"path": request.url.path, "fields": [e.field for e in errors]},
        )
        return JSONResponse(status_code=400, content=_error_body("Validation failed", errors))

    @app.exception_handler(RequestValidationFailed)
    async def handle_validation_failed(request: Request, exc: RequestValidationFailed) -> JSONResponse:
        logger.info(
            "Request validation failed",
            extra={"path": request.url.path, "fields": [e.field for e in exc.errors]},
        )
        return JSONResponse(status_code=400, content=_error_body("Validation failed", exc.errors))

    @app.exception_handler(TransactionNotFound)
    async def handle_not_found(request: Request, exc: TransactionNotFound) -> JSONResponse:
        logger.warning("Transaction not found", extra={"transaction_id": exc.transaction_id})
        return JSONResponse(status_code=404, content=_error_body("Transaction not found"))

    @app.exception_handler(AuthenticationRequired)
    async def handle_auth_required(request: Request, exc: AuthenticationRequired) -> JSONResponse:
        return JSONResponse(status_code=401, content=_error_body("Authentication required"))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled exception method=%s path=%s exception_type=%s",
            request.method,
            request.url.path,
            type(exc).__name__,
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content=_error_body("Server error"))
