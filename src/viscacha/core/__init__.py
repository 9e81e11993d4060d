"""Core components for the viscacha gopher client."""

from .commands import (
    CommandParser,
    Command,
    CommandName,
    NamedCommand,
    FollowLinkCommand,
    GotoUrlCommand,
    InvalidCommand,
    KeyBindings,
    KeyDispatcher,
)
from .history import HistoryManager
from .loader import PageLoader
from .overlay import CommandLineOverlay, Focus, View
from .renderer import ContentRenderer
from .resource import ContentKind, Link, Page

__all__ = [
    "CommandParser",
    "Command",
    "CommandName",
    "NamedCommand",
    "FollowLinkCommand",
    "GotoUrlCommand",
    "InvalidCommand",
    "KeyBindings",
    "KeyDispatcher",
    "HistoryManager",
    "PageLoader",
    "CommandLineOverlay",
    "Focus",
    "View",
    "ContentRenderer",
    "ContentKind",
    "Link",
    "Page",
]
