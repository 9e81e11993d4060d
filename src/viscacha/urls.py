"""Gopher URL handling."""

from dataclasses import dataclass
from urllib.parse import quote, unquote, urlsplit

SCHEME = "gopher"
DEFAULT_PORT = 70
DEFAULT_ITEM_TYPE = "1"

# Characters left unescaped when a selector is put into a URL
SELECTOR_SAFE = "/:;=?&@,+$!~*'()"


@dataclass(frozen=True)
class GopherAddress:
    """The parts of a gopher URL needed to make a request."""

    host: str
    port: int = DEFAULT_PORT
    item_type: str = DEFAULT_ITEM_TYPE
    selector: str = ""
    search: str | None = None

    def request_line(self) -> str:
        """Build the line sent to the server."""
        if self.search is None:
            return f"{self.selector}\r\n"
        return f"{self.selector}\t{self.search}\r\n"


def parse_url(url: str) -> GopherAddress:
    """
    Split a gopher URL into host, port, item type, selector and search.

    Args:
        url: URL of the form gopher://host[:port]/<type><selector>[%09<search>].

    Returns:
        The parsed address.

    Raises:
        ValueError: If the URL is not a gopher URL with a host.
    """
    parts = urlsplit(url.strip())
    if parts.scheme != SCHEME:
        raise ValueError(f"Not a gopher URL: {url}")
    if not parts.hostname:
        raise ValueError(f"No host in URL: {url}")

    port = parts.port or DEFAULT_PORT

    path = parts.path
    if parts.query:
        path = f"{path}?{parts.query}"

    if path in ("", "/"):
        return GopherAddress(host=parts.hostname, port=port)

    item_type = path[1]
    selector, tab, search = unquote(path[2:]).partition("\t")
    return GopherAddress(
        host=parts.hostname,
        port=port,
        item_type=item_type,
        selector=selector,
        search=search if tab else None,
    )


def build_url(host: str, port: int, item_type: str, selector: str) -> str:
    """Build the URL of a directory entry."""
    return f"{SCHEME}://{host}:{port}/{item_type}{quote(selector, safe=SELECTOR_SAFE)}"


def get_root_url(url: str) -> str:
    """Strip everything after the host (and port) from a URL."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


def get_up_url(url: str) -> str:
    """
    Get the URL of the directory containing url.

    The first path segment is the item type, so the parent is always
    requested as a directory ("1"). With at most one selector segment the
    result is the server root.

    Examples:
        gopher://host/1/a/b -> gopher://host/1/a
        gopher://host/1/a   -> gopher://host
    """
    parts = urlsplit(url)
    segments = parts.path.rstrip("/").split("/")[1:]
    if len(segments) <= 2:
        return f"{parts.scheme}://{parts.netloc}"

    up_path = [DEFAULT_ITEM_TYPE] + segments[1:-1]
    return f"{parts.scheme}://{parts.netloc}/{'/'.join(up_path)}"
