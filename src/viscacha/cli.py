"""Command-line interface for the viscacha gopher client."""

import argparse
import curses
import logging
import os
import signal
import sys

from .config import Config, load_config, load_default_config
from .client import GopherClient
from .display import CursesDisplay
from .interfaces import FetchError
from .logsink import LogSink
from .providers import GopherResolver


def setup_logging(verbose: bool = False, log_path: str = "viscacha.log") -> None:
    """Configure logging to a file, since curses owns the terminal."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        filename=log_path,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="viscacha - a terminal gopher client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                  # Open the home page
  %(prog)s gopher://gopher.floodgap.com/    # Open a specific URL
  %(prog)s -c config.yaml                   # Use specific config file

Keys:
  j/k scroll, d/u half page, g/G top/bottom, h/l back/forward,
  1-9 follow link, : command line, \\ log messages, q quit
""",
    )

    parser.add_argument(
        "url",
        nargs="?",
        help="URL to open (default: configured home page)",
    )

    parser.add_argument(
        "-c", "--config",
        metavar="FILE",
        help="Path to YAML configuration file",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args(argv)


def run_session(screen, config: Config, url: str, log_sink: LogSink) -> None:
    """
    Run one browsing session inside curses.

    Args:
        screen: The curses window from curses.wrapper.
        config: Loaded configuration.
        url: The first URL to show.
        log_sink: Log buffer for the log view.

    Raises:
        FetchError: If the first page cannot be loaded.
    """
    display = CursesDisplay(screen)
    client = GopherClient(
        display,
        GopherResolver(timeout=config.timeout_seconds),
        bindings=config.key_bindings(),
        log_sink=log_sink,
        download_directory=config.get_download_path(),
    )

    display.show_message(client.loader.LOADING_MESSAGE)
    display.draw()

    page = client.loader.fetch_page(url)
    if page is None:
        raise FetchError(f"Nothing to display at {url}")
    display.clear_message()
    client.start(page)

    signal.signal(signal.SIGTERM, lambda sig, frame: display.stop())
    display.run(client.handle_key)


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Load configuration
    if args.config:
        try:
            config = load_config(args.config)
        except FileNotFoundError:
            print(f"Config file not found: {args.config}", file=sys.stderr)
            return 1
    else:
        config = load_default_config()

    setup_logging(args.verbose, config.log_path)
    logger = logging.getLogger(__name__)

    log_sink = LogSink()
    logging.getLogger("viscacha").addHandler(log_sink)

    url = args.url or config.home_page
    logger.info(f"Starting at {url}")

    # Short escape delay so Esc closes the command line promptly
    os.environ.setdefault("ESCDELAY", "25")

    try:
        curses.wrapper(run_session, config, url, log_sink)
    except (FetchError, OSError) as e:
        logger.error(f"Could not open {url}: {e}")
        print(f"Could not open {url}: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")

    return 0


if __name__ == "__main__":
    sys.exit(main())
