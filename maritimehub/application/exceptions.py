from __future__ import annotations


class MaritimeHubError(RuntimeError):
    """Base for every error the booking/payment core surfaces to a screen."""

    retryable: bool = True

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(MaritimeHubError):
    """Raised before any network call when a draft or request is incomplete or inconsistent."""
    pass


class BookingError(MaritimeHubError):
    """Raised when the backend rejects booking creation or the call cannot complete."""
    pass


class SubmissionInProgressError(BookingError):
    """Raised when submit is triggered while a previous submit is still in flight."""
    pass


class PaymentCreationError(MaritimeHubError):
    """Raised when the backend fails to issue a payment session."""
    pass


class ReconciliationAmbiguous(MaritimeHubError):
    """The payment page was closed without reaching a terminal URL. The booking stays Pending."""
    pass


class NetworkError(MaritimeHubError):
    """Raised on transport failures and timeouts."""
    pass


class GatewayError(MaritimeHubError):
    """Raised when the backend answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str, server_message: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message


class AuthenticationError(GatewayError):
    retryable = False


class InvalidTransitionError(MaritimeHubError):
    """Raised when a state machine is asked for a transition its current state does not allow."""

    retryable = False


class FlowNotFoundError(MaritimeHubError):
    retryable = False
