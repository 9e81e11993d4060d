"""GopherClient - browsing session tying history, loading and display together."""

import logging
from pathlib import Path

from pubsub import pub

from .interfaces import ContentKind, Display, Resolver
from .core import (
    CommandParser,
    Command,
    CommandName,
    NamedCommand,
    FollowLinkCommand,
    GotoUrlCommand,
    InvalidCommand,
    KeyBindings,
    KeyDispatcher,
    HistoryManager,
    PageLoader,
    CommandLineOverlay,
    Focus,
    View,
    ContentRenderer,
    Page,
)
from .core.overlay import ESCAPE
from .logsink import LogSink
from .urls import get_root_url, get_up_url


class GopherClient:
    """One interactive browsing session.

    Turns key presses and typed commands into scrolling, history moves
    and page loads. Every method runs on the UI thread; only the page
    loader does work in the background.
    """

    def __init__(
        self,
        display: Display,
        resolver: Resolver,
        bindings: KeyBindings | None = None,
        log_sink: LogSink | None = None,
        download_directory: str | Path = "~/Downloads",
        logger: logging.Logger | None = None,
    ):
        """
        Initialize the session.

        Args:
            display: Surface pages are drawn on.
            resolver: Resolver used to fetch and parse resources.
            bindings: Key bindings (defaults if None).
            log_sink: Log buffer shown by the log view and mirrored to the
                message bar.
            download_directory: Where images and binaries are saved.
            logger: Logger for every component (module loggers if None).
        """
        self.display = display
        self.resolver = resolver
        self.log_sink = log_sink
        self.logger = logger or logging.getLogger(__name__)

        self.history = HistoryManager()
        self.renderer = ContentRenderer(display, resolver, logger=logger)
        self.loader = PageLoader(
            resolver,
            self.history,
            self.renderer,
            display,
            download_directory=download_directory,
            logger=logger,
        )
        self.focus = Focus()
        self.overlay = CommandLineOverlay(display, self.focus, logger=logger)
        self.keys = KeyDispatcher(bindings)
        self.parser = CommandParser()

        if log_sink is not None:
            pub.subscribe(self._on_log_message, log_sink.topic)

    def start(self, page: Page) -> None:
        """Show the first page of the session."""
        self.history.navigate(page)
        self.renderer.render(page)

    def handle_key(self, key: str) -> None:
        """
        Handle a key press from the display.

        Keys go to whichever view has focus: the overlay, the log view
        or the page.

        Args:
            key: The key pressed (a single character).
        """
        if self.focus.view is View.OVERLAY:
            self.overlay.handle_key(key)
        elif self.focus.view is View.LOGS:
            self._handle_log_key(key)
        else:
            self._handle_page_key(key)

    def _handle_page_key(self, key: str) -> None:
        if self.display.get_message() != PageLoader.LOADING_MESSAGE:
            self.display.clear_message()

        command = self.keys.resolve(key)
        if command is not None:
            self.execute(command)

    def _handle_log_key(self, key: str) -> None:
        command = self.keys.resolve(key)
        if key == ESCAPE or command == NamedCommand(CommandName.SHOW_LOGS):
            self.hide_logs()
        elif command in (NamedCommand(CommandName.CMD_PROMPT), NamedCommand(CommandName.QUIT)):
            self.execute(command)

    def execute(self, command: Command) -> None:
        """
        Carry out a parsed command.

        Args:
            command: The command from a key press or the command line.
        """
        self.logger.debug(f"Command: {command}")

        if isinstance(command, NamedCommand):
            self.run_command(command.name)
        elif isinstance(command, FollowLinkCommand):
            self.follow_link(self.history.current(), command.index)
        elif isinstance(command, GotoUrlCommand):
            self.go_to(command.url)
        elif isinstance(command, InvalidCommand):
            self.logger.error(f'{command.reason}: "{command.original_input}"')
        else:
            self.logger.error(f"Unknown command type: {command!r}")

    def run_command(self, name: CommandName) -> None:
        """Run a named command."""
        if name is CommandName.SCROLL_DOWN:
            self.scroll_by(1)
        elif name is CommandName.SCROLL_UP:
            self.scroll_by(-1)
        elif name is CommandName.SCROLL_TOP:
            self.scroll_to(0)
        elif name is CommandName.SCROLL_BOTTOM:
            self.scroll_to(self._bottom_offset())
        elif name is CommandName.SCROLL_HALF_DOWN:
            self.scroll_by(self._half_page())
        elif name is CommandName.SCROLL_HALF_UP:
            self.scroll_by(-self._half_page())
        elif name is CommandName.BACK:
            self.back()
        elif name is CommandName.FORWARD:
            self.forward()
        elif name is CommandName.UP:
            self.go_up()
        elif name is CommandName.NEXT:
            self.go_sibling(1)
        elif name is CommandName.PREV:
            self.go_sibling(-1)
        elif name is CommandName.ROOT:
            self.go_to_root()
        elif name is CommandName.SHOW_LOGS:
            self.toggle_logs()
        elif name is CommandName.CMD_PROMPT:
            self.command_prompt()
        elif name is CommandName.QUIT:
            self.quit()
        else:
            self.logger.error(f'Not a valid command: "{name.value}"')

    # Scrolling

    def scroll_by(self, lines: int) -> None:
        """Scroll the page by a number of lines (negative scrolls up)."""
        self.scroll_to(self.display.get_scroll_offset() + lines)

    def scroll_to(self, offset: int) -> None:
        """Scroll to a line, kept between the top and the last screenful."""
        offset = max(0, min(offset, self._bottom_offset()))
        self.display.scroll_to(offset)
        self.renderer.update_status()

    def _bottom_offset(self) -> int:
        _, height = self.display.get_viewport_size()
        return max(0, self.display.line_count() - max(height, 1))

    def _half_page(self) -> int:
        _, height = self.display.get_viewport_size()
        return max(1, height // 2)

    # History

    def _save_scroll(self) -> None:
        page = self.history.current()
        if page is not None:
            page.save_scroll(self.display.get_scroll_offset())

    def back(self) -> None:
        """Show the previous page in the history."""
        self._save_scroll()
        page = self.history.back()
        if page is None:
            self.logger.info("Already at first page")
            return
        self.renderer.render(page)

    def forward(self) -> None:
        """Show the next page in the history."""
        self._save_scroll()
        page = self.history.forward()
        if page is None:
            self.logger.info("Already at last page")
            return
        self.renderer.render(page)

    # Loading

    def go_to(self, url: str, origin: tuple[Page, int] | None = None) -> None:
        """
        Load a URL in the background.

        Args:
            url: The URL to load.
            origin: (parent page, link index) when following a link.
        """
        self.loader.load(url, origin=origin)

    def follow_link(self, page: Page | None, index: int) -> None:
        """
        Follow link #index (1-based) on page.

        Query links ask for a search term first.

        Args:
            page: The page holding the link.
            index: The link number shown on screen.
        """
        if page is None or not 1 <= index <= len(page.links):
            self.logger.error(f"No link #{index} on the current page")
            return

        link = page.links[index - 1]
        if link.kind is ContentKind.QUERY:
            self.overlay.request("Query: ", lambda term: self._submit_query(page, index, term))
        else:
            self.go_to(link.target, origin=(page, index))

    def _submit_query(self, page: Page, index: int, term: str) -> None:
        link = page.links[index - 1]
        try:
            url = self.resolver.build_query_url(link, term)
        except ValueError as e:
            self.logger.error(f"Could not build search URL for {link.target}: {e}")
            return
        self.go_to(url, origin=(page, index))

    def go_up(self) -> None:
        """Load the directory above the current URL."""
        page = self.history.current()
        if page is None:
            self.logger.error("No page to go up from")
            return
        self.go_to(get_up_url(page.url))

    def go_to_root(self) -> None:
        """Load the root directory of the current server."""
        page = self.history.current()
        if page is None:
            self.logger.error("No page to find the root of")
            return
        self.go_to(get_root_url(page.url))

    def go_sibling(self, step: int) -> None:
        """
        Follow the link next to the one that led to the current page.

        Args:
            step: 1 for the next link, -1 for the previous one.
        """
        direction = "next" if step > 0 else "previous"
        page = self.history.current()
        parent = page.parent if page is not None else None

        if parent is None or page.origin_link_index is None:
            self.logger.error(f"No {direction} link in parent page to navigate to")
            return

        index = page.origin_link_index + step
        if not 1 <= index <= len(parent.links):
            self.logger.error(f"No {direction} link in parent page to navigate to")
            return

        self.follow_link(parent, index)

    # Command line and log view

    def command_prompt(self) -> None:
        """Open the command line."""
        self.overlay.request(": ", self._submit_command_line)

    def _submit_command_line(self, text: str) -> None:
        self.execute(self.parser.parse(text))

    def toggle_logs(self) -> None:
        """Switch between the page and the log view."""
        if self.focus.view is View.LOGS:
            self.hide_logs()
        else:
            self.show_logs()

    def show_logs(self) -> None:
        """Replace the page with the log messages."""
        text = self.log_sink.text() if self.log_sink is not None else ""
        self.display.show_logs(text)
        self.focus.view = View.LOGS

    def hide_logs(self) -> None:
        """Return from the log view to the page."""
        self.display.show_page()
        self.focus.view = View.PAGE

    def quit(self) -> None:
        """End the session. Outstanding loads are abandoned."""
        self.logger.debug("Quit requested")
        self.display.stop()

    def _on_log_message(self, message: str, level: int) -> None:
        """Mirror a log message to the message bar."""
        self.display.call_soon(lambda: self.display.show_message(message))
