"""Socket-based gopher resolver."""

import logging
import socket
from urllib.parse import quote

from ..interfaces import (
    ContentKind,
    DirectoryEntry,
    HostUnreachableError,
    InvalidUrlError,
    Link,
    MalformedResponseError,
    ParseError,
    RawResource,
    Resolver,
    UnsupportedItemTypeError,
)
from ..interfaces.resolver import INFO_TYPE, ITEM_KINDS
from ..urls import GopherAddress, build_url, parse_url

logger = logging.getLogger(__name__)

TEXT_KINDS = {ContentKind.TEXT, ContentKind.DIRECTORY, ContentKind.QUERY}


class GopherResolver(Resolver):
    """Resolver that talks to gopher servers over TCP (RFC 1436).

    Text and directory responses are decoded as UTF-8 with CRLF line
    endings normalised and the closing "." line removed.
    """

    BUFFER_SIZE = 4096

    def __init__(self, timeout: float | None = None, encoding: str = "utf-8"):
        """
        Initialize the resolver.

        Args:
            timeout: Socket timeout in seconds, None to wait forever.
            encoding: Encoding used for text and directory responses.
        """
        self.timeout = timeout
        self.encoding = encoding

    def fetch(self, url: str) -> RawResource:
        """
        Fetch and classify a gopher resource.

        Args:
            url: The gopher URL to fetch.

        Returns:
            The fetched resource. Directories come with parsed entries.

        Raises:
            InvalidUrlError: If url is not a gopher URL.
            UnsupportedItemTypeError: If the item type cannot be handled.
            HostUnreachableError: If the server cannot be reached.
            MalformedResponseError: If a directory has no parseable line.
        """
        try:
            address = parse_url(url)
        except ValueError as e:
            raise InvalidUrlError(str(e)) from e

        kind = ITEM_KINDS.get(address.item_type)
        if kind is None:
            raise UnsupportedItemTypeError(f"Unrecognized gopher item type {address.item_type!r}")

        # Search results come back as a directory
        if kind is ContentKind.QUERY and address.search is not None:
            kind = ContentKind.DIRECTORY

        data = self._request(address)
        logger.debug(f"Received {len(data)} bytes from {address.host}:{address.port}")

        if kind not in TEXT_KINDS:
            return RawResource(kind=kind, url=url, body=data)

        text = self._decode(data)
        if kind is not ContentKind.DIRECTORY:
            return RawResource(kind=kind, url=url, body=data, text=text)

        return RawResource(
            kind=kind,
            url=url,
            body=data,
            text=text,
            entries=self._parse_directory(text, url),
        )

    def parse_directory_line(self, line: str) -> DirectoryEntry:
        """
        Parse one line of a gopher directory.

        Informational lines only need a description; every other line
        needs description, selector, host and port separated by tabs.

        Args:
            line: A single directory line without its line ending.

        Returns:
            The parsed entry.

        Raises:
            ParseError: If the line is not a valid entry.
        """
        line = line.rstrip("\r")
        if not line:
            raise ParseError("Empty directory line")

        item_type = line[0]
        fields = line[1:].split("\t")

        if item_type == INFO_TYPE:
            return DirectoryEntry(item_type=item_type, description=fields[0])

        if len(fields) < 4:
            raise ParseError(f"Expected 4 fields, got {len(fields)}: {line!r}")

        description, selector, host, port = fields[:4]
        if not host:
            raise ParseError(f"No host in directory line: {line!r}")
        try:
            port_number = int(port)
        except ValueError:
            raise ParseError(f"Invalid port {port!r} in directory line")

        return DirectoryEntry(
            item_type=item_type,
            description=description,
            selector=selector,
            host=host,
            port=port_number,
        )

    def build_query_url(self, link: Link, search_term: str) -> str:
        """
        Build the URL that sends search_term to a search server.

        The results are requested as a directory, with the term after a
        tab (%09) following the selector.

        Raises:
            ValueError: If link is not a query link or has a bad URL.
        """
        if link.kind is not ContentKind.QUERY:
            raise ValueError(f"Not a query link: {link.target}")

        address = parse_url(link.target)
        base = build_url(address.host, address.port, "1", address.selector)
        return f"{base}%09{quote(search_term, safe='')}"

    def _request(self, address: GopherAddress) -> bytes:
        """Send the request line and read the response until the server closes."""
        chunks = []
        try:
            with socket.create_connection((address.host, address.port), timeout=self.timeout) as sock:
                sock.sendall(address.request_line().encode(self.encoding))
                while True:
                    chunk = sock.recv(self.BUFFER_SIZE)
                    if not chunk:
                        break
                    chunks.append(chunk)
        except OSError as e:
            raise HostUnreachableError(f"{address.host}:{address.port}: {e}") from e
        except UnicodeError as e:
            # Host names that cannot be IDNA encoded
            raise InvalidUrlError(f"Invalid host {address.host!r}: {e}") from e

        return b"".join(chunks)

    def _decode(self, data: bytes) -> str:
        lines = data.decode(self.encoding, errors="replace").replace("\r\n", "\n").split("\n")

        while lines and not lines[-1]:
            lines.pop()
        if lines and lines[-1] == ".":
            lines.pop()

        return "\n".join(lines)

    def _parse_directory(self, text: str, url: str) -> tuple[DirectoryEntry, ...]:
        lines = text.split("\n") if text else []
        entries = []

        for line in lines:
            try:
                entries.append(self.parse_directory_line(line))
            except ParseError as e:
                logger.debug(f"Skipping directory line: {e}")

        if lines and not entries:
            raise MalformedResponseError(f"No valid directory lines in response from {url}")

        return tuple(entries)
