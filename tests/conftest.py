"""Pytest configuration and fixtures."""

import queue
import threading

import pytest

from viscacha.core import ContentRenderer, HistoryManager, Page, PageLoader
from viscacha.interfaces import (
    ContentKind,
    Display,
    HostUnreachableError,
    RawResource,
)
from viscacha.providers import GopherResolver

SAMPLE_DIRECTORY = "\n".join([
    "iWelcome to the test server\tfake\t(NULL)\t0",
    "1Documents\t/docs\texample.org\t70",
    "0About this server\t/about.txt\texample.org\t70",
    "7Search the archive\t/search\texample.org\t70",
    "iAnother info line\tfake\t(NULL)\t0",
    "9Archive\t/files/archive.zip\texample.org\t70",
])

ROOT_URL = "gopher://example.org:70/1"


class FakeDisplay(Display):
    """In-memory display. call_soon runs callbacks immediately."""

    def __init__(self, width: int = 80, height: int = 24):
        self.width = width
        self.height = height
        self.lines: list[list[tuple[str, str]]] = [[]]
        self.offset = 0
        self.status = ""
        self.message = ""
        self.input: tuple[str, str] | None = None
        self.log_text: str | None = None
        self.stopped = False
        self.clear_count = 0

    def text(self) -> str:
        """All page text without styles."""
        return "\n".join("".join(text for text, _ in line) for line in self.lines)

    def line_text(self, row: int) -> str:
        return "".join(text for text, _ in self.lines[row])

    def styles(self, row: int) -> list[str]:
        return [style for _, style in self.lines[row]]

    def clear(self) -> None:
        self.lines = [[]]
        self.offset = 0
        self.clear_count += 1

    def write(self, text: str, style: str = "default") -> None:
        first, *rest = text.split("\n")
        if first:
            self.lines[-1].append((first, style))
        for part in rest:
            self.lines.append([(part, style)] if part else [])

    def scroll_to(self, offset: int) -> None:
        self.offset = max(0, offset)

    def get_scroll_offset(self) -> int:
        return self.offset

    def get_viewport_size(self) -> tuple[int, int]:
        return self.width, self.height

    def line_count(self) -> int:
        return len(self.lines)

    def set_status(self, text: str) -> None:
        self.status = text

    def show_message(self, text: str) -> None:
        self.message = text

    def get_message(self) -> str:
        return self.message

    def clear_message(self) -> None:
        self.message = ""

    def show_input(self, label: str, text: str) -> None:
        self.input = (label, text)

    def hide_input(self) -> None:
        self.input = None

    def show_logs(self, text: str) -> None:
        self.log_text = text

    def show_page(self) -> None:
        self.log_text = None

    def call_soon(self, callback) -> None:
        callback()

    def stop(self) -> None:
        self.stopped = True


class QueuedDisplay(FakeDisplay):
    """FakeDisplay whose call_soon queues callbacks like the key loop does.

    Tests run the queued callbacks on their own thread with run_next.
    """

    def __init__(self, width: int = 80, height: int = 24):
        super().__init__(width, height)
        self.pending: queue.Queue = queue.Queue()

    def call_soon(self, callback) -> None:
        self.pending.put(callback)

    def run_next(self, timeout: float = 2) -> None:
        """Wait for the next queued callback and run it."""
        self.pending.get(timeout=timeout)()


class FakeResolver(GopherResolver):
    """GopherResolver that serves canned resources instead of using sockets.

    Records every fetch in order. A fetch blocks while its URL has an
    unset gate event, and on_fetch is called as each fetch starts.
    """

    def __init__(self):
        super().__init__()
        self.resources: dict[str, RawResource] = {}
        self.errors: dict[str, Exception] = {}
        self.gates: dict[str, threading.Event] = {}
        self.started: list[str] = []
        self.finished: list[str] = []
        self.on_fetch = None

    def add_text(self, url: str, text: str) -> None:
        self.resources[url] = RawResource(kind=ContentKind.TEXT, url=url, text=text)

    def add_directory(self, url: str, text: str = SAMPLE_DIRECTORY) -> None:
        self.resources[url] = RawResource(
            kind=ContentKind.DIRECTORY,
            url=url,
            text=text,
            entries=self._parse_directory(text, url),
        )

    def add_binary(self, url: str, data: bytes) -> None:
        self.resources[url] = RawResource(kind=ContentKind.BINARY, url=url, body=data)

    def fetch(self, url: str) -> RawResource:
        self.started.append(url)
        if self.on_fetch is not None:
            self.on_fetch(url)

        gate = self.gates.get(url)
        if gate is not None:
            gate.wait(timeout=5)

        try:
            if url in self.errors:
                raise self.errors[url]
            if url not in self.resources:
                raise HostUnreachableError(f"No such resource: {url}")
            return self.resources[url]
        finally:
            self.finished.append(url)


@pytest.fixture
def display():
    """A fake display 80 columns wide with a 24 line page pane."""
    return FakeDisplay()


@pytest.fixture
def resolver():
    """A fake resolver with the sample directory at ROOT_URL."""
    fake = FakeResolver()
    fake.add_directory(ROOT_URL)
    return fake


@pytest.fixture
def make_directory_page(resolver):
    """Factory for directory pages built from directory text."""
    def make(url: str = ROOT_URL, text: str = SAMPLE_DIRECTORY) -> Page:
        resource = RawResource(
            kind=ContentKind.DIRECTORY,
            url=url,
            text=text,
            entries=resolver._parse_directory(text, url),
        )
        return Page(kind=ContentKind.DIRECTORY, url=url, content=text, links=resource.links())
    return make


@pytest.fixture
def history():
    return HistoryManager()


@pytest.fixture
def renderer(display, resolver):
    return ContentRenderer(display, resolver)


@pytest.fixture
def loader(resolver, history, renderer, display, tmp_path):
    return PageLoader(resolver, history, renderer, display, download_directory=tmp_path / "downloads")
