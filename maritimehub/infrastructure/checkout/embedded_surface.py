from __future__ import annotations

import logging

from maritimehub.application.ports.checkout_surface import CheckoutSurfacePort


class EmbeddedCheckoutSurface(CheckoutSurfacePort):
    """
    Server-side view of the webview that shows the hosted checkout page.

    The shell renders the page; this object only tracks whether it should be
    visible and which URL it was opened with, so the shell can poll it after
    each navigation report.
    """

    def __init__(self) -> None:
        self._url: str | None = None
        self._open = False
        self._logger = logging.getLogger(__name__)

    def open(self, checkout_url: str) -> None:
        self._url = checkout_url
        self._open = True
        self._logger.info("Checkout page opened", extra={"endpoint": checkout_url})

    def close(self) -> None:
        if self._open:
            self._logger.info("Checkout page closed", extra={"endpoint": self._url})
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def url(self) -> str | None:
        return self._url
