"""Ledger engine error types.

Every error raised by the engine derives from ``LedgerError`` and carries the
HTTP status the API layer answers with.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse


class LedgerError(Exception):
    """Base class for engine errors."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(LedgerError):
    """Referenced group or expense does not exist."""
    status_code = status.HTTP_404_NOT_FOUND


class ForbiddenError(LedgerError):
    """Actor may not perform the operation."""
    status_code = status.HTTP_403_FORBIDDEN


class MembershipError(ForbiddenError):
    """A member id is not part of the group."""


class InvalidInputError(LedgerError):
    """Rejected before any state was written."""
    status_code = status.HTTP_400_BAD_REQUEST


class ConsistencyFault(LedgerError):
    """Balances of a group no longer sum to zero."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class RecomputeTimeout(LedgerError):
    """Reading the group history took longer than allowed."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
