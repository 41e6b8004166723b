"""HTTP error boundary

Use-case errors (``libs.result.Error``) are raised as ``ClientError`` by the
routes and rendered as ``{"error": {"code", "message", "reason"}}``.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from libs.result import Error

# Default HTTP status per error code; routes may still pass one explicitly
ERROR_STATUS_CODES = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "INVALID_PAGINATION": status.HTTP_400_BAD_REQUEST,
    "CUSTOMER_ACCOUNT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "DISTRIBUTION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INELIGIBLE_PACKAGE": status.HTTP_409_CONFLICT,
    "CONCURRENCY_CONFLICT": status.HTTP_409_CONFLICT,
    "PERSISTENCE_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "IMMUTABILITY_VIOLATION": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "DISTRIBUTION_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ClientError(Exception):
    def __init__(self, error: Error, status_code: int = None):
        self.error = error
        self.status_code = status_code or ERROR_STATUS_CODES.get(
            error.code, status.HTTP_400_BAD_REQUEST
        )
        super().__init__(error.message)


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.error.to_dict()})
