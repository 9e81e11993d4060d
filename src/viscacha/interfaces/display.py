"""Abstract interface for the display surface."""

from abc import ABC, abstractmethod
from typing import Callable


class Display(ABC):
    """Abstract interface for drawing pages and capturing input.

    The display has a scrollable page pane, a one-line status bar and a
    one-line message bar that doubles as the text input line. All methods
    except call_soon must be called from the UI thread.
    """

    @abstractmethod
    def clear(self) -> None:
        """Remove all text from the page pane."""
        pass

    @abstractmethod
    def write(self, text: str, style: str = "default") -> None:
        """
        Append text to the page pane. Newlines start new lines.

        Args:
            text: Text to append.
            style: One of "default", "text", "info", "link", "directory",
                "search", "other" or "error".
        """
        pass

    @abstractmethod
    def scroll_to(self, offset: int) -> None:
        """Make line offset the first visible line."""
        pass

    @abstractmethod
    def get_scroll_offset(self) -> int:
        """Get the first visible line."""
        pass

    @abstractmethod
    def get_viewport_size(self) -> tuple[int, int]:
        """Get (width, height) of the page pane. (0, 0) if not yet sized."""
        pass

    @abstractmethod
    def line_count(self) -> int:
        """Get the number of lines in the page pane."""
        pass

    @abstractmethod
    def set_status(self, text: str) -> None:
        """Replace the status bar text."""
        pass

    @abstractmethod
    def show_message(self, text: str) -> None:
        """Replace the message bar text."""
        pass

    @abstractmethod
    def get_message(self) -> str:
        """Get the message bar text."""
        pass

    @abstractmethod
    def clear_message(self) -> None:
        """Empty the message bar."""
        pass

    @abstractmethod
    def show_input(self, label: str, text: str) -> None:
        """Show the input line in place of the message bar."""
        pass

    @abstractmethod
    def hide_input(self) -> None:
        """Put the message bar back in place of the input line."""
        pass

    @abstractmethod
    def show_logs(self, text: str) -> None:
        """Replace the page view with a full-screen log view."""
        pass

    @abstractmethod
    def show_page(self) -> None:
        """Return from the log view to the page view."""
        pass

    @abstractmethod
    def call_soon(self, callback: Callable[[], None]) -> None:
        """Run callback on the UI thread. Safe to call from any thread."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Leave the input loop."""
        pass
