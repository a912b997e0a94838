"""Translate ledger errors into HTTP responses"""

import logging

from fastapi import HTTPException

from casino_ledger.domain.exceptions import (
    DomainException,
    InsufficientFundsError,
    InsufficientSharesError,
    InvalidArgumentError,
    NotFoundError,
    OverpaymentRejectedError,
    TransientError,
)

STATUS_CODES = {
    NotFoundError: 404,
    InvalidArgumentError: 400,
    InsufficientFundsError: 400,
    InsufficientSharesError: 400,
    OverpaymentRejectedError: 400,
}


def to_http_exception(error: Exception, request_id: str) -> HTTPException:
    """
    Map an exception raised by a service call to an HTTPException.

    Business rejections carry their message and code. Outages become a
    retryable 503 and anything else a 500; neither leaks internal detail.
    """
    if isinstance(error, TransientError):
        logging.error(f"Transient failure: {error}", extra={"request_id": request_id})
        return HTTPException(
            status_code=503,
            detail={"code": error.code, "message": "Service temporarily unavailable"},
            headers={"Retry-After": "1"},
        )

    if isinstance(error, DomainException):
        status_code = STATUS_CODES.get(type(error), 400)
        return HTTPException(status_code=status_code, detail={"code": error.code, "message": str(error)})

    logging.error(f"Unexpected error: {error}", extra={"request_id": request_id}, exc_info=error)
    return HTTPException(status_code=500, detail="Internal server error")
