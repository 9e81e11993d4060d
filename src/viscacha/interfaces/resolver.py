"""Abstract interface for protocol resolvers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from ..urls import build_url


class ContentKind(Enum):
    """Kind of resource a URL points to."""

    TEXT = "text"
    DIRECTORY = "directory"
    QUERY = "query"
    IMAGE = "image"
    BINARY = "binary"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Link:
    """A typed reference from a directory page to another resource."""

    kind: ContentKind
    target: str


# Gopher item type characters mapped to content kinds.
ITEM_KINDS = {
    "0": ContentKind.TEXT,
    "1": ContentKind.DIRECTORY,
    "7": ContentKind.QUERY,
    "g": ContentKind.IMAGE,
    "I": ContentKind.IMAGE,
    "p": ContentKind.IMAGE,
    "4": ContentKind.BINARY,
    "5": ContentKind.BINARY,
    "6": ContentKind.BINARY,
    "9": ContentKind.BINARY,
    "d": ContentKind.BINARY,
    "s": ContentKind.BINARY,
}

INFO_TYPE = "i"


class FetchError(Exception):
    """Base class for failures to fetch a resource."""


class InvalidUrlError(FetchError):
    """The URL could not be understood."""


class HostUnreachableError(FetchError):
    """The server could not be reached or the connection failed."""


class MalformedResponseError(FetchError):
    """The server replied with something that could not be parsed."""


class UnsupportedItemTypeError(FetchError):
    """The item type has no supported content kind."""


class ParseError(ValueError):
    """A directory line could not be parsed."""


@dataclass(frozen=True)
class DirectoryEntry:
    """One parsed line of a gopher directory listing."""

    item_type: str
    description: str
    selector: str = ""
    host: str = ""
    port: int = 70

    @property
    def is_info(self) -> bool:
        """Whether this is an informational (non-link) line."""
        return self.item_type == INFO_TYPE

    @property
    def kind(self) -> ContentKind | None:
        """Content kind of the target, None for informational lines."""
        if self.is_info:
            return None
        return ITEM_KINDS.get(self.item_type, ContentKind.UNKNOWN)

    @property
    def url(self) -> str:
        """URL of the entry target."""
        return build_url(self.host, self.port, self.item_type, self.selector)

    def to_link(self) -> Link:
        """Convert to a Link. Informational lines cannot be links."""
        if self.is_info:
            raise ValueError("Informational lines are not links")
        return Link(kind=self.kind, target=self.url)


@dataclass(frozen=True)
class RawResource:
    """A fetched resource before it becomes a Page.

    Attributes:
        kind: Content kind of the resource.
        url: The URL that was fetched.
        body: Raw response bytes.
        text: Decoded text for text and directory resources.
        entries: Parsed directory entries, in source order.
    """

    kind: ContentKind
    url: str
    body: bytes = b""
    text: str = ""
    entries: tuple[DirectoryEntry, ...] = ()

    def links(self) -> tuple[Link, ...]:
        """Links of every non-informational entry."""
        return tuple(entry.to_link() for entry in self.entries if not entry.is_info)


class Resolver(ABC):
    """Abstract interface for fetching and parsing protocol resources."""

    @abstractmethod
    def fetch(self, url: str) -> RawResource:
        """Fetch a resource.

        Raises:
            FetchError: If the resource cannot be fetched or classified.
        """
        pass

    @abstractmethod
    def parse_directory_line(self, line: str) -> DirectoryEntry:
        """Parse one line of a directory listing.

        Raises:
            ParseError: If the line is not a valid entry.
        """
        pass

    @abstractmethod
    def build_query_url(self, link: Link, search_term: str) -> str:
        """Build the URL that submits search_term to a query link.

        Raises:
            ValueError: If the link is not a query or its URL is malformed.
        """
        pass
