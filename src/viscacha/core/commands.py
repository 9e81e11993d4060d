"""Commands, key bindings and the command-line parser."""

import logging
from abc import ABC
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping
from urllib.parse import urlsplit

from ..urls import SCHEME


class CommandName(Enum):
    """Every named command a key or the command line can invoke."""

    SCROLL_DOWN = "scroll-down"
    SCROLL_UP = "scroll-up"
    SCROLL_TOP = "scroll-top"
    SCROLL_BOTTOM = "scroll-bottom"
    SCROLL_HALF_DOWN = "scroll-hpage-down"
    SCROLL_HALF_UP = "scroll-hpage-up"
    BACK = "back"
    FORWARD = "forward"
    UP = "up"
    NEXT = "next"
    PREV = "prev"
    ROOT = "root"
    SHOW_LOGS = "show-logs"
    CMD_PROMPT = "cmd-prompt"
    QUIT = "quit"

    @classmethod
    def lookup(cls, word: str) -> "CommandName | None":
        """Find a command by name. Hyphens are optional ("showlogs")."""
        wanted = word.strip().lower().replace("-", "")
        for name in cls:
            if name.value.replace("-", "") == wanted:
                return name
        return None


class Command(ABC):
    """Base class for all commands."""

    pass


@dataclass(frozen=True)
class NamedCommand(Command):
    """Command to run one of the named commands."""

    name: CommandName


@dataclass(frozen=True)
class FollowLinkCommand(Command):
    """Command to follow a numbered link on the current page."""

    index: int


@dataclass(frozen=True)
class GotoUrlCommand(Command):
    """Command to load a URL."""

    url: str


@dataclass(frozen=True)
class InvalidCommand(Command):
    """Represents an invalid or unrecognized command."""

    original_input: str
    reason: str = "Not a valid command"


DEFAULT_KEY_BINDINGS = MappingProxyType({
    "j": CommandName.SCROLL_DOWN,
    "k": CommandName.SCROLL_UP,
    "g": CommandName.SCROLL_TOP,
    "G": CommandName.SCROLL_BOTTOM,
    "d": CommandName.SCROLL_HALF_DOWN,
    "u": CommandName.SCROLL_HALF_UP,
    "h": CommandName.BACK,
    "l": CommandName.FORWARD,
    "\\": CommandName.SHOW_LOGS,
    ":": CommandName.CMD_PROMPT,
    "q": CommandName.QUIT,
})


@dataclass(frozen=True)
class KeyBindings:
    """Immutable mapping from single keys to command names."""

    bindings: Mapping[str, CommandName] = field(default_factory=lambda: DEFAULT_KEY_BINDINGS)

    @classmethod
    def from_overrides(
        cls,
        overrides: Mapping[str, str] | None = None,
        logger: logging.Logger | None = None,
    ) -> "KeyBindings":
        """
        Build bindings from the defaults overlaid with user overrides.

        Overrides naming an unknown command are logged and skipped.

        Args:
            overrides: Mapping of key to command name, e.g. {"n": "scroll-down"}.
            logger: Where to report bad overrides.

        Returns:
            The merged bindings.
        """
        logger = logger or logging.getLogger(__name__)
        merged = dict(DEFAULT_KEY_BINDINGS)

        for key, command in (overrides or {}).items():
            name = CommandName.lookup(str(command))
            if name is None:
                logger.warning(f'Not a valid command: "{command}" (bound to "{key}")')
                continue
            merged[str(key)] = name

        return cls(bindings=MappingProxyType(merged))

    def get(self, key: str) -> CommandName | None:
        """Get the command bound to key."""
        return self.bindings.get(key)


class KeyDispatcher:
    """Turns single key presses into commands."""

    # Number keys follow links 1 to 9
    LINK_KEYS = {str(i): i for i in range(1, 10)}

    def __init__(self, bindings: KeyBindings | None = None):
        self.bindings = bindings or KeyBindings()

    def resolve(self, key: str) -> Command | None:
        """
        Get the command for a key press.

        Bound keys win over the number keys.

        Args:
            key: The key that was pressed.

        Returns:
            The command, or None if the key does nothing.
        """
        name = self.bindings.get(key)
        if name is not None:
            return NamedCommand(name)

        if key in self.LINK_KEYS:
            return FollowLinkCommand(index=self.LINK_KEYS[key])

        return None


class CommandParser:
    """Parses command-line input into Command objects."""

    SUPPORTED_SCHEMES = {SCHEME}

    def parse(self, input_str: str) -> Command:
        """
        Parse a typed command line.

        The first word decides: a number follows that link, a command name
        runs that command, and an absolute gopher URL is loaded.

        Args:
            input_str: The text typed into the command line.

        Returns:
            A Command object representing the parsed input.
        """
        cleaned = input_str.strip()
        if not cleaned:
            return InvalidCommand(original_input=input_str, reason="Empty input")

        word = cleaned.split()[0]

        try:
            return FollowLinkCommand(index=int(word))
        except ValueError:
            pass

        name = CommandName.lookup(word)
        if name is not None:
            return NamedCommand(name)

        parts = urlsplit(cleaned)
        if parts.scheme and parts.netloc:
            if parts.scheme in self.SUPPORTED_SCHEMES:
                return GotoUrlCommand(url=cleaned)
            return InvalidCommand(
                original_input=input_str,
                reason=f'Protocol "{parts.scheme}" not supported',
            )

        return InvalidCommand(original_input=word)
