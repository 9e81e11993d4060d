"""Tests for the HistoryManager module."""

import pytest
from viscacha.core.resource import ContentKind, Page


def make_page(name: str) -> Page:
    return Page(kind=ContentKind.TEXT, url=f"gopher://example.org:70/0/{name}", content=name)


class TestHistoryManager:
    """Tests for HistoryManager."""

    @pytest.fixture
    def pages(self):
        return [make_page(name) for name in "abcde"]

    def test_empty_history(self, history):
        """A new history has no current page."""
        assert history.current() is None
        assert len(history) == 0
        assert history.cursor == -1

    def test_back_on_empty_history(self, history):
        """back on an empty history returns None and keeps the cursor."""
        assert history.back() is None
        assert history.cursor == -1
        assert history.current() is None

    def test_forward_on_empty_history(self, history):
        """forward on an empty history returns None."""
        assert history.forward() is None
        assert history.cursor == -1

    def test_first_navigate(self, history, pages):
        """The first page becomes current at index 0."""
        history.navigate(pages[0])
        assert history.current() is pages[0]
        assert history.cursor == 0

    def test_current_is_last_navigated(self, history, pages):
        """After navigating without going back, current is the last page."""
        for page in pages:
            history.navigate(page)
            assert history.current() is page

    def test_back_walks_to_first_page(self, history, pages):
        """back called n-1 times returns the first page."""
        for page in pages:
            history.navigate(page)

        result = None
        for _ in range(len(pages) - 1):
            result = history.back()

        assert result is pages[0]
        assert history.back() is None
        assert history.current() is pages[0]

    def test_back_returns_previous_pages_in_order(self, history, pages):
        """back returns pages in reverse visit order."""
        for page in pages:
            history.navigate(page)

        assert history.back() is pages[3]
        assert history.back() is pages[2]

    def test_forward_after_back(self, history, pages):
        """forward undoes back."""
        for page in pages[:3]:
            history.navigate(page)

        history.back()
        history.back()

        assert history.forward() is pages[1]
        assert history.forward() is pages[2]
        assert history.forward() is None
        assert history.current() is pages[2]

    def test_forward_at_last_page(self, history, pages):
        """forward on the last page returns None and changes nothing."""
        history.navigate(pages[0])
        history.navigate(pages[1])

        assert history.forward() is None
        assert history.cursor == 1

    def test_navigate_truncates_forward_history(self, history):
        """Navigating after going back drops the forward pages."""
        a, b, c, d = (make_page(name) for name in "abcd")
        history.navigate(a)
        history.navigate(b)
        history.navigate(c)
        history.back()
        history.back()
        history.navigate(d)

        assert history.pages() == (a, d)
        assert history.current() is d
        assert history.forward() is None
        assert history.back() is a

    def test_navigate_same_page_twice(self, history):
        """The same page can appear twice in the history."""
        a = make_page("a")
        history.navigate(a)
        history.navigate(a)
        assert len(history) == 2

    def test_pages_snapshot_is_immutable(self, history, pages):
        """pages returns a tuple copy."""
        history.navigate(pages[0])
        snapshot = history.pages()
        history.navigate(pages[1])
        assert snapshot == (pages[0],)
