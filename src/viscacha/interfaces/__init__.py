"""Abstract interfaces for the viscacha gopher client."""

from .display import Display
from .resolver import (
    ContentKind,
    DirectoryEntry,
    FetchError,
    HostUnreachableError,
    InvalidUrlError,
    Link,
    MalformedResponseError,
    ParseError,
    RawResource,
    Resolver,
    UnsupportedItemTypeError,
)

__all__ = [
    "ContentKind",
    "DirectoryEntry",
    "Display",
    "FetchError",
    "HostUnreachableError",
    "InvalidUrlError",
    "Link",
    "MalformedResponseError",
    "ParseError",
    "RawResource",
    "Resolver",
    "UnsupportedItemTypeError",
]
