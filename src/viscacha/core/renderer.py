"""Renderer for text and directory pages."""

import logging

from ..interfaces import ContentKind, Display, ParseError, Resolver
from .resource import Page

# Three letter labels shown before each link
ITEM_LABELS = {
    "0": "TXT",
    "1": "DIR",
    "2": "PHO",
    "3": "ERR",
    "4": "HEX",
    "5": "ARC",
    "6": "UUE",
    "7": "QRY",
    "8": "TEL",
    "9": "BIN",
    "+": "DUP",
    "T": "TN3",
    "g": "GIF",
    "I": "IMG",
    "h": "HTM",
    "s": "SND",
    "p": "PNG",
    "d": "DOC",
}

ENTRY_STYLES = {
    ContentKind.TEXT: "text",
    ContentKind.DIRECTORY: "directory",
    ContentKind.QUERY: "search",
    ContentKind.IMAGE: "other",
    ContentKind.BINARY: "other",
}

# Room left between the URL and the percentage in the status bar
STATUS_MARGIN = 5


def escape_text(text: str) -> str:
    """
    Make text safe to write to the terminal.

    Tabs are expanded and every other control character except newline is
    shown in caret notation, so page content cannot send escape sequences.
    """
    out = []
    for char in text.expandtabs():
        code = ord(char)
        if char == "\n" or (32 <= code < 127) or code > 159:
            out.append(char)
        elif code == 127:
            out.append("^?")
        elif code < 32:
            out.append("^" + chr(code + 64))
        else:
            out.append(f"\\x{code:02x}")
    return "".join(out)


def link_number_width(link_count: int) -> int:
    """Digits needed for the largest link number (at least 1)."""
    return max(1, len(str(link_count)))


class ContentRenderer:
    """Draws pages on a display and keeps the status bar up to date."""

    def __init__(
        self,
        display: Display,
        resolver: Resolver,
        logger: logging.Logger | None = None,
    ):
        self.display = display
        self.resolver = resolver
        self.logger = logger or logging.getLogger(__name__)
        self.current_url = ""

    def render(self, page: Page) -> None:
        """
        Clear the display and draw page.

        Text pages are written as-is, directories as numbered menus.
        Any other kind is shown as a single error line.

        Args:
            page: The page to draw.
        """
        self.display.clear()
        self.current_url = page.url

        if page.kind is ContentKind.TEXT:
            self._render_text(page)
        elif page.kind is ContentKind.DIRECTORY:
            self._render_directory(page)
        else:
            self.display.write(f'page type not recognized "{page.kind.value}"', "error")
            self.logger.error(f'Page type not recognized "{page.kind.value}" for {page.url}')

        self.update_status()

    def _render_text(self, page: Page) -> None:
        self.display.write(escape_text(page.content), "text")
        self.display.scroll_to(page.scroll_offset)

    def _render_directory(self, page: Page) -> None:
        width = link_number_width(len(page.links))
        indent = " " * (3 + 1 + 2 + width + 1)
        link_number = 1

        for line in page.content.split("\n"):
            try:
                entry = self.resolver.parse_directory_line(line)
            except ParseError:
                self.display.write("\n")
                continue

            if entry.is_info:
                self.display.write(indent)
                style = "info"
            else:
                label = ITEM_LABELS.get(entry.item_type, "???")
                self.display.write(f"{label} [{link_number:>{width}}] ", "link")
                link_number += 1
                style = ENTRY_STYLES.get(entry.kind, "error")

            self.display.write(escape_text(entry.description), style)
            self.display.write("\n")

        self.display.scroll_to(page.scroll_offset)

    def scroll_percentage(self) -> int:
        """How much of the page has been seen, 0 when the view is not sized."""
        _, height = self.display.get_viewport_size()
        total = self.display.line_count()
        if height <= 0 or total <= 0:
            return 0

        bottom = self.display.get_scroll_offset() + height
        return int(min(1.0, bottom / total) * 100)

    def update_status(self) -> None:
        """Write "<url><padding> <percent>%" to the status bar."""
        width, _ = self.display.get_viewport_size()
        percentage = self.scroll_percentage() if width > 0 else 0

        available = max(0, width - STATUS_MARGIN)
        url = self.current_url[:available]
        padding = " " * (available - len(url))
        self.display.set_status(f"{url}{padding} {percentage:3d}%")
