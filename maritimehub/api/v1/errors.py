from __future__ import annotations

import logging

from fastapi import HTTPException

from maritimehub.application.exceptions import (
    AuthenticationError,
    BookingError,
    FlowNotFoundError,
    GatewayError,
    InvalidTransitionError,
    MaritimeHubError,
    NetworkError,
    PaymentCreationError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[MaritimeHubError], int]] = [
    (ValidationError, 422),
    (AuthenticationError, 401),
    (FlowNotFoundError, 404),
    (BookingError, 409),
    (InvalidTransitionError, 409),
    (PaymentCreationError, 502),
    (NetworkError, 503),
    (GatewayError, 502),
]


def to_http_exception(error: MaritimeHubError) -> HTTPException:
    """Turn a core error into the message + retry affordance the screen shows."""
    status_code = 500
    for error_cls, code in _STATUS_BY_ERROR:
        if isinstance(error, error_cls):
            status_code = code
            break
    logger.info(
        "Screen error",
        extra={"status": status_code, "reason": error.message, "error": type(error).__name__},
    )
    return HTTPException(
        status_code=status_code,
        detail={"message": error.message, "retryable": error.retryable, "error": type(error).__name__},
    )
