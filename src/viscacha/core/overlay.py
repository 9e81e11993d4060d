"""Modal command-line overlay."""

import logging
import threading
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ..interfaces import Display

ENTER = "\n"
ESCAPE = "\x1b"
BACKSPACE = "\x7f"


class View(Enum):
    """Which part of the screen receives key presses."""

    PAGE = "page"
    LOGS = "logs"
    OVERLAY = "overlay"


@dataclass
class Focus:
    """The view that currently has input focus."""

    view: View = View.PAGE


@dataclass
class OverlayRequest:
    """A pending request to read one line of input."""

    label: str
    on_submit: Callable[[str], None]


class CommandLineOverlay:
    """Single-line input shown in place of the message bar.

    Only one overlay is open at a time. Requests made while one is open
    are queued and opened in order once it closes. Closing always gives
    focus back to the view that had it before the overlay opened.
    """

    def __init__(
        self,
        display: Display,
        focus: Focus,
        logger: logging.Logger | None = None,
    ):
        self.display = display
        self.focus = focus
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._pending: deque[OverlayRequest] = deque()
        self._active: OverlayRequest | None = None
        self._return_view = View.PAGE
        self._text = ""

    @property
    def is_open(self) -> bool:
        """Whether an overlay is currently taking input."""
        return self._active is not None

    @property
    def text(self) -> str:
        """Text typed so far."""
        return self._text

    def pending_count(self) -> int:
        """Number of requests waiting for the current overlay to close."""
        return len(self._pending)

    def request(self, label: str, on_submit: Callable[[str], None]) -> None:
        """
        Ask for a line of input.

        Args:
            label: Prompt shown before the input, e.g. ": ".
            on_submit: Called with the text when the user presses Enter.
                Not called if the input is cancelled.
        """
        request = OverlayRequest(label=label, on_submit=on_submit)
        if self._lock.acquire(blocking=False):
            self._open(request)
        else:
            self.logger.debug(f"Overlay busy, queued {label!r}")
            self._pending.append(request)

    def handle_key(self, key: str) -> None:
        """Feed a key press to the open overlay."""
        if self._active is None:
            return

        if key == ENTER:
            self._close(submit=True)
        elif key == ESCAPE:
            self._close(submit=False)
        elif key == BACKSPACE:
            self._text = self._text[:-1]
            self.display.show_input(self._active.label, self._text)
        elif len(key) == 1 and key.isprintable():
            self._text += key
            self.display.show_input(self._active.label, self._text)

    def _open(self, request: OverlayRequest) -> None:
        self._active = request
        self._text = ""
        if self.focus.view is not View.OVERLAY:
            self._return_view = self.focus.view
        self.focus.view = View.OVERLAY
        self.display.show_input(request.label, "")

    def _close(self, submit: bool) -> None:
        request, text = self._active, self._text
        self._active = None
        self._text = ""

        self.display.hide_input()
        self.focus.view = self._return_view

        try:
            if submit:
                request.on_submit(text)
        finally:
            if self._pending:
                self._open(self._pending.popleft())
            else:
                self._lock.release()
