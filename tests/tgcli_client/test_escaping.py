"""Tests for wire token escaping and the daemon-compatible tokenizer."""

from pathlib import Path

import pytest

from tgcli_client.errors import EscapingError
from tgcli_client.escaping import (
    clean_phone_number,
    escape_peer,
    escape_string_argument,
    format_file_name,
    format_peer_list,
    split_tokens,
)

TRICKY_STRINGS = [
    "",
    "John Doe",
    "user#12345",
    "123456789",
    '"',
    '""""',
    'say "hi" to me',
    "back\\slash\\",
    'trailing \\"',
    "semi; colon && pipe | msg other",
    "tab\there",
    "emoji 🎉 и юникод",
]


class TestEscapePeer:
    """Peer names become one quoted token."""

    @pytest.mark.parametrize("peer", TRICKY_STRINGS)
    def test_round_trip(self, peer: str) -> None:
        """Tokenizer reads the escaped peer back as exactly the input string."""
        assert split_tokens(escape_peer(peer)) == [peer]

    def test_quotes_plain_peer(self) -> None:
        """Even safe peers are wrapped in quotes."""
        assert escape_peer("alice") == '"alice"'

    def test_none(self) -> None:
        """Missing peer is rejected."""
        with pytest.raises(EscapingError):
            escape_peer(None)

    def test_line_break(self) -> None:
        """Peers cannot span lines."""
        with pytest.raises(EscapingError) as exc_info:
            escape_peer("alice\nsafe_quit")
        assert exc_info.value.code == "invalid_argument"


class TestEscapeStringArgument:
    """Free text becomes one quoted token."""

    @pytest.mark.parametrize("text", [*TRICKY_STRINGS, "line one\nline two", "crlf\r\nend"])
    def test_round_trip(self, text: str) -> None:
        """Tokenizer reads the escaped text back unchanged, line breaks included."""
        assert split_tokens(escape_string_argument(text)) == [text]

    def test_none_is_empty_token(self) -> None:
        """None keeps its argument position as an empty token."""
        assert escape_string_argument(None) == '""'
        assert split_tokens("msg " + escape_string_argument(None)) == ["msg", ""]

    def test_no_raw_line_breaks(self) -> None:
        """Escaped text never contains a raw newline that would end the request."""
        token = escape_string_argument("a\nb\rc")
        assert "\n" not in token
        assert "\r" not in token

    def test_cannot_inject_command(self) -> None:
        """A message trying to close the quote and append a command stays one token."""
        text = 'hi" \nsafe_quit "'
        line = "msg " + escape_peer("bob") + " " + escape_string_argument(text)
        assert split_tokens(line) == ["msg", "bob", text]


class TestFormatPeerList:
    """Peer lists become one token per peer."""

    def test_tokens(self) -> None:
        """Each peer is escaped separately."""
        assert format_peer_list(["alice", "Bob Smith"]) == ['"alice"', '"Bob Smith"']

    def test_empty_required(self) -> None:
        """Empty list is rejected when a recipient is required."""
        with pytest.raises(EscapingError):
            format_peer_list([])

    def test_empty_optional(self) -> None:
        """Empty list is allowed when not required."""
        assert format_peer_list([], required=False) == []

    def test_accepts_iterables(self) -> None:
        """Generators work as well as lists."""
        assert len(format_peer_list(p for p in ("a", "b", "c"))) == 3


class TestFormatFileName:
    """File paths become absolute quoted tokens."""

    def test_absolute_path_with_spaces(self) -> None:
        """Absolute path with spaces survives as one token."""
        assert split_tokens(format_file_name("/tmp/my photos/cat 1.jpg")) == ["/tmp/my photos/cat 1.jpg"]

    def test_relative_path_resolved(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Relative paths are resolved against the caller's working directory."""
        monkeypatch.chdir(tmp_path)
        assert split_tokens(format_file_name("doc.pdf")) == [str(Path.cwd() / "doc.pdf")]

    def test_home_expanded(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """~ expands to the home directory."""
        monkeypatch.setenv("HOME", "/home/tester")
        assert split_tokens(format_file_name("~/a.txt")) == ["/home/tester/a.txt"]

    def test_missing_file_not_checked(self) -> None:
        """Existence is the daemon's concern."""
        assert format_file_name(Path("/does/not/exist.png")) == '"/does/not/exist.png"'

    def test_empty(self) -> None:
        """Empty path is rejected."""
        with pytest.raises(EscapingError):
            format_file_name("")


class TestCleanPhoneNumber:
    """Phone numbers keep digits only."""

    def test_strips_formatting(self) -> None:
        """Spaces, plus, dashes, and parentheses are removed."""
        assert clean_phone_number("+1 (555) 010-99") == "155501099"

    def test_int(self) -> None:
        """Integers are accepted."""
        assert clean_phone_number(4915112345) == "4915112345"

    def test_no_digits(self) -> None:
        """Nothing left after cleaning is an error."""
        with pytest.raises(EscapingError):
            clean_phone_number("+-")


class TestSplitTokens:
    """The daemon-compatible tokenizer."""

    def test_bare_tokens(self) -> None:
        """Runs of whitespace separate bare tokens."""
        assert split_tokens("history  user#1   20 ") == ["history", "user#1", "20"]

    def test_mixed(self) -> None:
        """Quoted and bare tokens mix."""
        assert split_tokens('msg "a b" 5') == ["msg", "a b", "5"]

    def test_escapes(self) -> None:
        """Backslash escapes decode inside quotes."""
        assert split_tokens(r'"a\"b\\c\nd"') == ['a"b\\c\nd']

    def test_unterminated(self) -> None:
        """Unterminated quote is an error."""
        with pytest.raises(EscapingError):
            split_tokens('msg "open')
