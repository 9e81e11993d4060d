"""Curses-based display surface."""

import curses
import queue
from typing import Callable

from ..interfaces import Display
from ..core.overlay import BACKSPACE, ENTER, ESCAPE

# Foreground colors for the named styles; missing styles use the terminal default
STYLE_COLORS = {
    "link": curses.COLOR_GREEN,
    "directory": curses.COLOR_CYAN,
    "search": curses.COLOR_MAGENTA,
    "other": curses.COLOR_YELLOW,
    "error": curses.COLOR_RED,
}

SPECIAL_KEYS = {
    curses.KEY_ENTER: ENTER,
    curses.KEY_BACKSPACE: BACKSPACE,
    curses.KEY_DC: BACKSPACE,
}


class CursesDisplay(Display):
    """Display drawing into a curses screen.

    Layout, top to bottom: the page pane, a reverse-video status bar and
    a message bar that is replaced by the input line while the overlay is
    open. The log view takes over the whole screen.
    """

    TICK_MS = 50

    def __init__(self, screen):
        """
        Initialize the display.

        Args:
            screen: The curses window from curses.wrapper.
        """
        self.screen = screen
        self._lines: list[list[tuple[str, str]]] = [[]]
        self._offset = 0
        self._status = ""
        self._message = ""
        self._input: tuple[str, str] | None = None
        self._log_text: str | None = None
        self._callbacks: queue.Queue[Callable[[], None]] = queue.Queue()
        self._running = False
        self._attrs: dict[str, int] = {}

    def _init_colors(self) -> None:
        if not curses.has_colors():
            return
        curses.start_color()
        curses.use_default_colors()
        for pair, (style, color) in enumerate(STYLE_COLORS.items(), 1):
            curses.init_pair(pair, color, -1)
            self._attrs[style] = curses.color_pair(pair)

    # Page pane

    def clear(self) -> None:
        self._lines = [[]]
        self._offset = 0

    def write(self, text: str, style: str = "default") -> None:
        first, *rest = text.split("\n")
        if first:
            self._lines[-1].append((first, style))
        for part in rest:
            self._lines.append([(part, style)] if part else [])

    def scroll_to(self, offset: int) -> None:
        self._offset = max(0, offset)

    def get_scroll_offset(self) -> int:
        return self._offset

    def get_viewport_size(self) -> tuple[int, int]:
        height, width = self.screen.getmaxyx()
        return width, max(0, height - 2)

    def line_count(self) -> int:
        return len(self._lines)

    # Bars

    def set_status(self, text: str) -> None:
        self._status = text

    def show_message(self, text: str) -> None:
        self._message = text

    def get_message(self) -> str:
        return self._message

    def clear_message(self) -> None:
        self._message = ""

    def show_input(self, label: str, text: str) -> None:
        self._input = (label, text)

    def hide_input(self) -> None:
        self._input = None

    # Views

    def show_logs(self, text: str) -> None:
        self._log_text = text

    def show_page(self) -> None:
        self._log_text = None

    # Loop

    def call_soon(self, callback: Callable[[], None]) -> None:
        self._callbacks.put(callback)

    def stop(self) -> None:
        self._running = False

    def run(self, on_key: Callable[[str], None]) -> None:
        """
        Run the input loop until stop() is called.

        Each tick runs queued callbacks, redraws and waits up to TICK_MS
        for a key.

        Args:
            on_key: Called on the UI thread with each normalised key.
        """
        self._init_colors()
        curses.curs_set(0)
        self.screen.timeout(self.TICK_MS)
        self._running = True

        while self._running:
            self._run_callbacks()
            self.draw()

            try:
                key = self.screen.get_wch()
            except curses.error:
                continue  # no key this tick

            if key == curses.KEY_RESIZE:
                curses.update_lines_cols()
                continue

            normalised = self._normalise_key(key)
            if normalised is not None:
                on_key(normalised)

    def _run_callbacks(self) -> None:
        while True:
            try:
                callback = self._callbacks.get_nowait()
            except queue.Empty:
                return
            callback()

    def _normalise_key(self, key: str | int) -> str | None:
        if isinstance(key, int):
            return SPECIAL_KEYS.get(key)
        if key in ("\r", "\n"):
            return ENTER
        if key in ("\b", "\x7f"):
            return BACKSPACE
        if key == ESCAPE or key.isprintable():
            return key
        return None

    # Drawing

    def draw(self) -> None:
        """Redraw the whole screen."""
        self.screen.erase()
        height, width = self.screen.getmaxyx()

        if self._log_text is not None:
            self._draw_logs(height, width)
        else:
            self._draw_page(height, width)

        self.screen.refresh()

    def _draw_page(self, height: int, width: int) -> None:
        page_height = max(0, height - 2)
        visible = self._lines[self._offset:self._offset + page_height]

        for row, spans in enumerate(visible):
            col = 0
            for text, style in spans:
                if col >= width:
                    break
                chunk = text[:width - col]
                self._put(row, col, chunk, self._attrs.get(style, curses.A_NORMAL))
                col += len(chunk)

        if height >= 2:
            self._put(height - 2, 0, self._status.ljust(width)[:width], curses.A_REVERSE)
        if height >= 1:
            if self._input is not None:
                label, text = self._input
                self._put(height - 1, 0, f"{label}{text}"[-width:], curses.A_NORMAL)
            else:
                self._put(height - 1, 0, self._message.partition("\n")[0][:width], curses.A_NORMAL)

    def _draw_logs(self, height: int, width: int) -> None:
        self._put(0, 0, "Log Messages".center(width)[:width], curses.A_REVERSE)
        lines = self._log_text.split("\n")[-max(0, height - 2):] if height > 2 else []
        for row, line in enumerate(lines, 1):
            self._put(row, 0, line[:width], self._attrs.get("default", curses.A_NORMAL))
        if height >= 1 and self._input is not None:
            label, text = self._input
            self._put(height - 1, 0, f"{label}{text}"[-width:], curses.A_NORMAL)

    def _put(self, row: int, col: int, text: str, attr: int) -> None:
        _, width = self.screen.getmaxyx()
        if col >= width:
            return
        try:
            self.screen.addnstr(row, col, text, width - col, attr)
        except curses.error:
            # Writing the bottom-right cell moves the cursor off screen
            pass
