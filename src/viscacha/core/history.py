"""Browsing history with a movable cursor."""

from .resource import Page


class HistoryManager:
    """Ordered list of visited pages plus the position of the current one.

    Navigating to a new page drops every page forward of the cursor,
    the way browser history works.
    """

    def __init__(self):
        self._pages: list[Page] = []
        self._index = -1

    def navigate(self, page: Page) -> None:
        """
        Make page the current page.

        Pages forward of the cursor are discarded before appending.

        Args:
            page: The newly loaded page.
        """
        if not self._pages:
            self._pages = [page]
            self._index = 0
            return

        del self._pages[self._index + 1:]
        self._pages.append(page)
        self._index = len(self._pages) - 1

    def back(self) -> Page | None:
        """Move back one page. Returns None if already on the first page."""
        if self._index <= 0:
            return None
        self._index -= 1
        return self._pages[self._index]

    def forward(self) -> Page | None:
        """Move forward one page. Returns None if already on the last page."""
        if self._index >= len(self._pages) - 1:
            return None
        self._index += 1
        return self._pages[self._index]

    def current(self) -> Page | None:
        """Get the current page, or None if nothing has loaded yet."""
        if not self._pages:
            return None
        return self._pages[self._index]

    @property
    def cursor(self) -> int:
        """Index of the current page (-1 when empty)."""
        return self._index

    def pages(self) -> tuple[Page, ...]:
        """Snapshot of the history in visit order."""
        return tuple(self._pages)

    def __len__(self) -> int:
        return len(self._pages)
