"""Tests for commands, key bindings and the command parser."""

import logging

import pytest
from viscacha.core.commands import (
    DEFAULT_KEY_BINDINGS,
    CommandName,
    CommandParser,
    FollowLinkCommand,
    GotoUrlCommand,
    InvalidCommand,
    KeyBindings,
    KeyDispatcher,
    NamedCommand,
)


class TestCommandName:
    """Tests for CommandName.lookup."""

    def test_lookup_exact(self):
        """Names are found by their value."""
        assert CommandName.lookup("scroll-down") is CommandName.SCROLL_DOWN

    def test_lookup_without_hyphens(self):
        """Hyphens can be left out."""
        assert CommandName.lookup("showlogs") is CommandName.SHOW_LOGS
        assert CommandName.lookup("scrollhpagedown") is CommandName.SCROLL_HALF_DOWN

    def test_lookup_case_insensitive(self):
        """Case does not matter."""
        assert CommandName.lookup("BACK") is CommandName.BACK

    def test_lookup_unknown(self):
        """Unknown names give None."""
        assert CommandName.lookup("fly") is None


class TestKeyBindings:
    """Tests for KeyBindings."""

    def test_defaults(self):
        """The default bindings cover the usual keys."""
        bindings = KeyBindings()
        assert bindings.get("j") is CommandName.SCROLL_DOWN
        assert bindings.get("k") is CommandName.SCROLL_UP
        assert bindings.get("g") is CommandName.SCROLL_TOP
        assert bindings.get("G") is CommandName.SCROLL_BOTTOM
        assert bindings.get("d") is CommandName.SCROLL_HALF_DOWN
        assert bindings.get("u") is CommandName.SCROLL_HALF_UP
        assert bindings.get("h") is CommandName.BACK
        assert bindings.get("l") is CommandName.FORWARD
        assert bindings.get("\\") is CommandName.SHOW_LOGS
        assert bindings.get(":") is CommandName.CMD_PROMPT
        assert bindings.get("q") is CommandName.QUIT

    def test_unbound_key(self):
        """Keys without a binding give None."""
        assert KeyBindings().get("z") is None

    def test_immutable(self):
        """Bindings cannot be changed after creation."""
        bindings = KeyBindings()
        with pytest.raises(TypeError):
            bindings.bindings["z"] = CommandName.QUIT
        with pytest.raises(AttributeError):
            bindings.bindings = {}

    def test_overrides_merge_with_defaults(self):
        """Overrides add to and replace default bindings."""
        bindings = KeyBindings.from_overrides({"n": "scroll-down", "j": "next"})

        assert bindings.get("n") is CommandName.SCROLL_DOWN
        assert bindings.get("j") is CommandName.NEXT
        assert bindings.get("k") is CommandName.SCROLL_UP
        assert DEFAULT_KEY_BINDINGS["j"] is CommandName.SCROLL_DOWN

    def test_bad_override_skipped(self, caplog):
        """Overrides naming unknown commands are logged and ignored."""
        with caplog.at_level(logging.WARNING):
            bindings = KeyBindings.from_overrides({"x": "explode"})

        assert bindings.get("x") is None
        assert 'Not a valid command: "explode"' in caplog.text


class TestKeyDispatcher:
    """Tests for KeyDispatcher."""

    def test_bound_key(self):
        """Bound keys give named commands."""
        assert KeyDispatcher().resolve("h") == NamedCommand(CommandName.BACK)

    def test_number_keys_follow_links(self):
        """Keys 1 to 9 follow links."""
        dispatcher = KeyDispatcher()
        assert dispatcher.resolve("1") == FollowLinkCommand(index=1)
        assert dispatcher.resolve("9") == FollowLinkCommand(index=9)

    def test_zero_does_nothing(self):
        """0 is not a link key."""
        assert KeyDispatcher().resolve("0") is None

    def test_binding_beats_number(self):
        """A number key bound to a command runs the command."""
        dispatcher = KeyDispatcher(KeyBindings.from_overrides({"1": "root"}))
        assert dispatcher.resolve("1") == NamedCommand(CommandName.ROOT)

    def test_unknown_key(self):
        """Unbound keys give None."""
        assert KeyDispatcher().resolve("z") is None


class TestCommandParser:
    """Tests for CommandParser."""

    @pytest.fixture
    def parser(self):
        return CommandParser()

    def test_empty_input(self, parser):
        """Empty input is invalid."""
        result = parser.parse("   ")
        assert isinstance(result, InvalidCommand)
        assert result.reason == "Empty input"

    def test_link_number(self, parser):
        """A number follows that link."""
        assert parser.parse("12") == FollowLinkCommand(index=12)

    def test_link_number_with_whitespace(self, parser):
        """Surrounding whitespace and extra words are ignored."""
        assert parser.parse("  3 please ") == FollowLinkCommand(index=3)

    def test_named_command(self, parser):
        """Command names run that command."""
        assert parser.parse("back") == NamedCommand(CommandName.BACK)
        assert parser.parse("up") == NamedCommand(CommandName.UP)
        assert parser.parse("root") == NamedCommand(CommandName.ROOT)

    def test_named_command_without_hyphen(self, parser):
        """showlogs means show-logs."""
        assert parser.parse("showlogs") == NamedCommand(CommandName.SHOW_LOGS)

    def test_gopher_url(self, parser):
        """Absolute gopher URLs are loaded."""
        url = "gopher://gopher.floodgap.com/1/world"
        assert parser.parse(url) == GotoUrlCommand(url=url)

    def test_unsupported_protocol(self, parser):
        """Other schemes are rejected with the scheme named."""
        result = parser.parse("http://example.org/")
        assert isinstance(result, InvalidCommand)
        assert result.reason == 'Protocol "http" not supported'

    def test_unknown_word(self, parser):
        """Anything else is not a valid command."""
        result = parser.parse("fly away")
        assert result == InvalidCommand(original_input="fly")
        assert result.reason == "Not a valid command"
