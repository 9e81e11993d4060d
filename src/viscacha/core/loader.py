"""Background page loading, one fetch at a time."""

import logging
import threading
from pathlib import Path

from ..interfaces import ContentKind, Display, FetchError, RawResource, Resolver
from ..urls import parse_url
from .history import HistoryManager
from .renderer import ContentRenderer
from .resource import Page

DOWNLOAD_KINDS = {ContentKind.IMAGE, ContentKind.BINARY}


class PageLoader:
    """Fetches pages off the UI thread and commits them to the history.

    Requests run strictly one after another: a request does not start
    fetching until the previous one has been committed (or has failed).
    Results are applied on the UI thread through Display.call_soon.
    Worker threads are daemons so quitting never waits for a fetch.
    """

    LOADING_MESSAGE = "Loading..."

    def __init__(
        self,
        resolver: Resolver,
        history: HistoryManager,
        renderer: ContentRenderer,
        display: Display,
        download_directory: str | Path = "~/Downloads",
        logger: logging.Logger | None = None,
    ):
        self.resolver = resolver
        self.history = history
        self.renderer = renderer
        self.display = display
        self.download_directory = Path(download_directory).expanduser()
        self.logger = logger or logging.getLogger(__name__)

        self._loading_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._last_done: threading.Event | None = None
        self._outstanding = 0

    @property
    def idle(self) -> bool:
        """Whether no request is waiting or in flight."""
        with self._state_lock:
            return self._outstanding == 0

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until every issued request has finished."""
        with self._state_lock:
            last = self._last_done
        if last is None:
            return True
        return last.wait(timeout)

    def load(self, url: str, origin: tuple[Page, int] | None = None) -> threading.Thread:
        """
        Start loading url in the background.

        Must be called on the UI thread.

        Args:
            url: The URL to load.
            origin: (parent page, 1-based link index) when following a link.

        Returns:
            The worker thread.
        """
        current = self.history.current()
        if current is not None:
            current.save_scroll(self.display.get_scroll_offset())
        self.display.show_message(self.LOADING_MESSAGE)

        done = threading.Event()
        with self._state_lock:
            previous, self._last_done = self._last_done, done
            self._outstanding += 1

        worker = threading.Thread(
            target=self._run,
            args=(url, origin, previous, done),
            name=f"loader-{url}",
            daemon=True,
        )
        worker.start()
        return worker

    def fetch_page(self, url: str) -> Page | None:
        """
        Fetch url on the calling thread.

        Downloads are saved and return None.

        Raises:
            FetchError: If the fetch fails.
        """
        resource = self.resolver.fetch(url)
        if resource.kind in DOWNLOAD_KINDS:
            self._save_download(resource)
            return None
        return self._to_page(resource)

    def _run(
        self,
        url: str,
        origin: tuple[Page, int] | None,
        previous: threading.Event | None,
        done: threading.Event,
    ) -> None:
        if previous is not None:
            previous.wait()

        try:
            with self._loading_lock:
                self.logger.debug(f"Fetching {url}")
                try:
                    page = self.fetch_page(url)
                except FetchError as e:
                    self.logger.error(f"Failed to load {url}: {e}")
                    return
                except OSError as e:
                    self.logger.error(f"Could not download {url}: {e}")
                    return
                except Exception as e:
                    self.logger.error(f"Failed to load {url}: {e}")
                    return

                if page is None:
                    return

                committed = threading.Event()
                self.display.call_soon(lambda: self._commit(page, origin, committed))
                committed.wait()
        finally:
            with self._state_lock:
                self._outstanding -= 1
            done.set()

    def _commit(self, page: Page, origin: tuple[Page, int] | None, committed: threading.Event) -> None:
        try:
            self.history.navigate(page)
            if origin is not None:
                parent, index = origin
                page.attach_parent(parent, index)
            self.renderer.render(page)
            self.display.clear_message()
            self.logger.debug(f"Loaded {page.url}")
        finally:
            committed.set()

    def _to_page(self, resource: RawResource) -> Page:
        if resource.kind is ContentKind.DIRECTORY:
            return Page(
                kind=resource.kind,
                url=resource.url,
                content=resource.text,
                links=resource.links(),
            )
        return Page(kind=resource.kind, url=resource.url, content=resource.text)

    def _save_download(self, resource: RawResource) -> Path:
        name = Path(parse_url(resource.url).selector).name
        if name in ("", ".", ".."):
            name = "download"

        self.download_directory.mkdir(parents=True, exist_ok=True)
        path = self.download_directory / name
        path.write_bytes(resource.body)
        self.logger.info(f"Download saved to {path}")
        return path
