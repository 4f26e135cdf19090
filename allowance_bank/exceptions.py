"""
Custom exception classes and FastAPI exception handlers.

The store and service layers raise domain-specific errors without importing
HTTP concepts. The handlers registered here translate them into the JSON
error shape the front end expects: {"error": "human readable message"}.

Exception hierarchy:
    AllowanceBankError (base)
    ├── InvalidAmountError         — spend amount missing, non-numeric or <= 0
    ├── InsufficientFundsError     — spend larger than the current balance
    ├── BalanceNotFoundError       — the singleton balance row is missing
    ├── StoreUnavailableError      — any database / connectivity failure
    └── PartialWriteInconsistency  — balance changed but ledger insert failed
                                     (logged only, never returned to a caller)

Validation and business-rule failures map to 400. Storage failures map to
500 with a generic message; the underlying error is logged, not leaked.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from allowance_bank.config import settings
from allowance_bank.money import cents_to_amount


logger = logging.getLogger("allowance_bank.errors")


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class AllowanceBankError(Exception):
    """Base exception for all Allowance Bank domain errors."""

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class InvalidAmountError(AllowanceBankError):
    """Raised when a spend amount fails validation."""

    def __init__(self, detail: str = "Please enter a valid amount"):
        super().__init__(detail)


class InsufficientFundsError(AllowanceBankError):
    """
    Raised when a spend would take the balance below zero.

    Attributes:
        requested_cents: The rounded amount the user tried to spend.
        available_cents: The balance at the time of the check.
    """

    def __init__(self, requested_cents: int, available_cents: int):
        self.requested_cents = requested_cents
        self.available_cents = available_cents
        super().__init__("Not enough money in bank")


class BalanceNotFoundError(AllowanceBankError):
    """Raised when the singleton balance row has not been provisioned."""

    def __init__(self):
        super().__init__("Failed to get balance")


class StoreUnavailableError(AllowanceBankError):
    """Raised when the database cannot be reached or rejects a statement."""

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(detail)


class PartialWriteInconsistency(AllowanceBankError):
    """
    The balance was updated but the matching ledger row was not written.

    Only produced by the non-atomic spend path, which logs it and still
    reports success to the caller.
    """

    def __init__(self, new_balance_cents: int, amount_cents: int):
        self.new_balance_cents = new_balance_cents
        self.amount_cents = amount_cents
        super().__init__(
            f"Balance set to {new_balance_cents} cents but the withdrawal of "
            f"{amount_cents} cents was not recorded in the ledger"
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def _cors_headers(request: Request) -> dict[str, str]:
    origin = request.headers.get("origin")
    if "*" in settings.ALLOWED_ORIGINS:
        return {"Access-Control-Allow-Origin": "*"}
    if origin in settings.ALLOWED_ORIGINS:
        return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    return {}


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register custom exception handlers with the FastAPI application.

    Every handler responds with {"error": "..."} so the presentation layer
    can show the message in a toast without inspecting status codes.
    """

    @app.exception_handler(InvalidAmountError)
    async def invalid_amount_handler(
        request: Request, exc: InvalidAmountError
    ) -> JSONResponse:
        return _error(400, exc.detail)

    @app.exception_handler(InsufficientFundsError)
    async def insufficient_funds_handler(
        request: Request, exc: InsufficientFundsError
    ) -> JSONResponse:
        return _error(
            400,
            exc.detail,
            currentBalance=cents_to_amount(exc.available_cents),
        )

    @app.exception_handler(BalanceNotFoundError)
    async def balance_not_found_handler(
        request: Request, exc: BalanceNotFoundError
    ) -> JSONResponse:
        return _error(500, exc.detail)

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(
        request: Request, exc: StoreUnavailableError
    ) -> JSONResponse:
        return _error(500, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # Unparseable JSON and a bad description are malformed bodies. Anything
        # else (a bad amount, or a body that is not an object and so carries
        # no amount) is reported the same way the spend service reports it.
        for error in exc.errors():
            if error.get("type") == "json_invalid" or "description" in error.get("loc", ()):
                return _error(400, "Invalid request body")
        return _error(400, InvalidAmountError().detail)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == 405:
            return _error(405, "Method not allowed")
        return _error(exc.status_code, str(exc.detail))

    # Starlette serves this handler outside the CORS middleware, so the
    # allow-origin header has to be added here.
    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        response = _error(500, "Internal server error")
        response.headers.update(_cors_headers(request))
        return response
