# pos_backend/api/errors.py
import logging

from fastapi.responses import JSONResponse

from pos_backend.domain.sales.errors import ErrorKind, SaleError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.PAYMENT_MISMATCH: 400,
    ErrorKind.INSUFFICIENT_STOCK: 400,
    ErrorKind.INVALID_BUNDLE_CONFIG: 400,
    ErrorKind.TRANSACTION_NOT_FOUND: 400,
    ErrorKind.TRANSACTION_STATE: 400,
    ErrorKind.PRODUCT_NOT_FOUND: 500,
    ErrorKind.EMPTY_TRANSACTION: 500,
}


def http_status_for(kind: ErrorKind) -> int:
    return STATUS_BY_KIND.get(kind, 500)


def error_response(exc: Exception, failure_message: str) -> JSONResponse:
    """Build the JSON error reply for an operation that raised ``exc``."""
    if isinstance(exc, SaleError):
        status = http_status_for(exc.kind)
        if status < 500:
            logger.warning("%s: %s", failure_message, exc)
            return JSONResponse(status_code=status, content={"message": str(exc)})
        logger.error("%s: %s", failure_message, exc)
        return JSONResponse(status_code=status, content={"message": failure_message, "error": str(exc)})

    logger.exception(failure_message)
    return JSONResponse(
        status_code=500,
        content={"message": failure_message, "error": "Internal server error"},
    )
