"""Visible OCR state for one widget surface.

Each submission takes a ticket from a monotonically increasing counter. A
result is applied only if its ticket is still the latest one; anything
older was superseded (or cancelled) and is dropped. Nothing is sent to the
provider when a request is superseded; the in-flight call is simply
abandoned locally.

This is the client-side state model of the OCR widget; it is not mounted on
any route.
"""

import threading
from dataclasses import dataclass
from typing import Callable

from app.core.errors import ProxyError
from app.models.schemas import OcrResult
from app.services.markdown_formatter import format_as_markdown
from app.utils.logger import ocr_logger


@dataclass
class OcrViewState:
    file_name: str = ""
    text: str = ""
    error: str = ""
    busy: bool = False
    markdown_ready: bool = False


class OcrSession:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._seq = 0
        self._state = OcrViewState()

    @property
    def state(self) -> OcrViewState:
        with self._lock:
            return OcrViewState(**vars(self._state))

    def begin(self, file_name: str) -> int:
        with self._lock:
            self._seq += 1
            self._state = OcrViewState(file_name=file_name, busy=True)
            return self._seq

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._seq

    def complete(self, ticket: int, result: OcrResult) -> bool:
        with self._lock:
            if ticket != self._seq:
                ocr_logger.debug(f"Dropping stale OCR result for ticket {ticket} (latest {self._seq})")
                return False
            self._state.text = result.combined_text.strip()
            self._state.error = ""
            self._state.busy = False
            self._state.markdown_ready = True
            return True

    def fail(self, ticket: int, message: str) -> bool:
        with self._lock:
            if ticket != self._seq:
                return False
            self._state.error = message or "Failed to process PDF. Ensure the file is valid and try again."
            self._state.busy = False
            return True

    def cancel(self) -> None:
        with self._lock:
            self._seq += 1
            self._state.busy = False

    def run(self, file_name: str, work: Callable[[], OcrResult]) -> bool:
        """Run one submission; returns whether its outcome became visible."""
        ticket = self.begin(file_name)
        try:
            result = work()
        except ProxyError as exc:
            return self.fail(ticket, exc.message)
        return self.complete(ticket, result)

    def markdown(self) -> str:
        state = self.state
        return format_as_markdown(state.file_name, state.text)
