# core/dirty_guard.py

from dataclasses import dataclass, field
from typing import Callable, Optional

from core.logging_config import logger
from core.wizard import WizardController


ESCAPE_KEY = "Escape"


@dataclass(frozen=True)
class ConfirmationRequest:
    title: str
    message: str
    confirm_label: str
    cancel_label: str
    on_confirm: Callable[[], None] = field(repr=False, compare=False)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "message": self.message,
            "confirmLabel": self.confirm_label,
            "cancelLabel": self.cancel_label,
        }


class DirtyStateGuard:
    """
    Arbitrates close requests for an open wizard.

    A clean wizard closes at once. A dirty one produces a ConfirmationRequest:
    confirming discards the input (controller reset) and closes, cancelling
    ("Continue Editing") leaves everything as it was.
    """

    def __init__(self, controller: WizardController, on_close: Optional[Callable[[], None]] = None):
        self.controller = controller
        self._on_close = on_close
        self._pending: Optional[ConfirmationRequest] = None
        self._is_open = True

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def pending(self) -> Optional[ConfirmationRequest]:
        return self._pending

    def open(self) -> None:
        """(Re)open the wizard with a fresh form."""
        self.controller.reset()
        self._pending = None
        self._is_open = True

    def request_close(self) -> Optional[ConfirmationRequest]:
        if not self.controller.is_dirty:
            self._close()
            return None

        if self._pending is None:
            self._pending = ConfirmationRequest(
                title="Unsaved Changes",
                message="You have unsaved changes that will be lost. Are you sure you want to close?",
                confirm_label="Close Without Saving",
                cancel_label="Continue Editing",
                on_confirm=self._discard_and_close,
            )
        return self._pending

    def handle_key(self, key: str) -> Optional[ConfirmationRequest]:
        if key != ESCAPE_KEY:
            return None
        return self.request_close()

    def confirm(self) -> bool:
        """'Close Without Saving'. Returns False when nothing was pending."""
        request = self._pending
        if request is None:
            return False
        self._pending = None
        request.on_confirm()
        return True

    def cancel(self) -> None:
        """'Continue Editing'."""
        self._pending = None

    def _discard_and_close(self) -> None:
        logger.info(f"{self.controller.name}: closing with unsaved changes discarded")
        self._close()

    def _close(self) -> None:
        self.controller.reset()
        self._is_open = False
        if self._on_close is not None:
            self._on_close()
