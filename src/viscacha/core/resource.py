"""Page model for the browsing history."""

import weakref
from dataclasses import dataclass, field

from ..interfaces.resolver import ContentKind, Link

__all__ = ["ContentKind", "Link", "Page"]


@dataclass(eq=False)
class Page:
    """A fetched resource held in the browsing history.

    Pages compare by identity. The parent page is held weakly since it is
    owned by the history, not by its children.

    Attributes:
        kind: Content kind of the page.
        url: The URL the page was fetched from.
        content: Text content (raw directory text for directories).
        links: Links of a directory, in source order.
        scroll_offset: First visible line, restored when the page is shown again.
        origin_link_index: 1-based index of the parent link that led here.
    """

    kind: ContentKind
    url: str
    content: str = ""
    links: tuple[Link, ...] = ()
    scroll_offset: int = 0
    origin_link_index: int | None = field(default=None, init=False)
    _parent_ref: weakref.ref | None = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self.links = tuple(self.links)
        if self.links and self.kind is not ContentKind.DIRECTORY:
            raise ValueError(f"Only directory pages carry links, got {self.kind.value}")
        self.scroll_offset = max(0, self.scroll_offset)

    @property
    def parent(self) -> "Page | None":
        """The page this one was reached from, if it is still alive."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def attach_parent(self, parent: "Page", link_index: int) -> None:
        """Record that this page was reached by following parent link #link_index."""
        if not 1 <= link_index <= len(parent.links):
            raise IndexError(f"No link #{link_index} on {parent.url}")
        self._parent_ref = weakref.ref(parent)
        self.origin_link_index = link_index

    def save_scroll(self, offset: int) -> None:
        """Store the scroll position to restore later."""
        self.scroll_offset = max(0, offset)
