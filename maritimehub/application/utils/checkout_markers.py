from __future__ import annotations

from enum import Enum
from typing import Iterable
from urllib.parse import parse_qs, urlsplit

from maritimehub.core.config import settings


class CheckoutSignal(str, Enum):
    PAID = "paid"
    CANCELLED = "cancelled"
    FAILED = "failed"


_PAID_STATUSES = {"paid"}
_CANCELLED_STATUSES = {"cancelled", "canceled"}
_FAILED_STATUSES = {"failed", "expired"}


def classify_checkout_url(
    url: str | None,
    success_markers: Iterable[str] | None = None,
    failure_markers: Iterable[str] | None = None,
) -> CheckoutSignal | None:
    """
    Map a URL visited by the hosted checkout page to a terminal signal.

    Rules are tried in order and the first match wins, so a URL never maps to
    both outcomes:
      1. an explicit ``status`` query value
      2. ``cancel=true`` in the query
      3. success markers anywhere in the URL
      4. failure markers anywhere in the URL
    Anything else is an intermediate page and returns None.
    """
    if not url:
        return None
    lowered = url.strip().lower()
    if not lowered:
        return None

    query = parse_qs(urlsplit(lowered).query)
    for status in query.get("status", []):
        if status in _PAID_STATUSES:
            return CheckoutSignal.PAID
        if status in _CANCELLED_STATUSES:
            return CheckoutSignal.CANCELLED
        if status in _FAILED_STATUSES:
            return CheckoutSignal.FAILED

    if "true" in query.get("cancel", []):
        return CheckoutSignal.CANCELLED

    success = settings.PAYMENT_SUCCESS_MARKERS if success_markers is None else success_markers
    failure = settings.PAYMENT_FAILURE_MARKERS if failure_markers is None else failure_markers

    if any(marker.lower() in lowered for marker in success):
        return CheckoutSignal.PAID
    for marker in failure:
        if marker.lower() in lowered:
            return CheckoutSignal.CANCELLED if "cancel" in marker.lower() else CheckoutSignal.FAILED
    return None
