"""Tests for the telegram-cli command wrappers."""

import json
from pathlib import Path

import pytest
from fake_daemon import answer, echo

from tgcli_client.daemon.connection import ConnectionState
from tgcli_client.daemon.protocol import Failure, FailureKind, Record
from tgcli_client.escaping import split_tokens
from tgcli_client.telegram import ChannelRole, TelegramClient


@pytest.fixture
def client(fake_daemon, make_config):
    """TelegramClient talking to a daemon that echoes the parsed tokens back."""
    daemon = fake_daemon(echo)
    with TelegramClient(make_config(daemon.port)) as c:
        yield c


def sent(result) -> list[str]:
    """Tokens the echo daemon received, command name first."""
    assert isinstance(result, Record)
    return [result.data["command"], *result.data["args"]]


class TestMessages:
    """Message commands."""

    def test_msg(self, client):
        """Peer and text each arrive as one argument."""
        assert sent(client.msg("Bob Smith", 'hey "Bob"\nsee you')) == ["msg", "Bob Smith", 'hey "Bob"\nsee you']

    def test_broadcast(self, client):
        """Recipients are separate arguments, followed by the text."""
        assert sent(client.broadcast(["alice", "bob"], "hi all")) == ["broadcast", "alice", "bob", "hi all"]

    def test_broadcast_without_recipients(self, fake_daemon, make_config):
        """Empty recipient list fails without touching the daemon."""
        daemon = fake_daemon(echo)
        with TelegramClient(make_config(daemon.port)) as c:
            result = c.broadcast([], "hi")
        assert isinstance(result, Failure)
        assert result.kind is FailureKind.INVALID_ARGUMENT
        assert daemon.requests == []

    def test_history_defaults(self, client):
        """No limit or offset means just the peer."""
        assert sent(client.get_history("alice")) == ["history", "alice"]

    def test_history_limit_clamped(self, client):
        """Limits below 1 are raised to 1."""
        assert sent(client.get_history("alice", 0)) == ["history", "alice", "1"]

    def test_history_offset(self, client):
        """Offset follows the limit and may be negative."""
        assert sent(client.get_history("alice", 50, -10)) == ["history", "alice", "50", "-10"]

    def test_history_offset_without_limit(self, client):
        """An offset alone would be read as a limit, so it is refused."""
        result = client.get_history("alice", offset=10)
        assert isinstance(result, Failure)
        assert result.kind is FailureKind.INVALID_ARGUMENT

    def test_delete_msg(self, client):
        """Message ids are sent bare."""
        assert sent(client.delete_msg(1234)) == ["delete_msg", "1234"]

    def test_bad_message_id(self, client):
        """A message id that is not one token fails without I/O."""
        result = client.load_photo("12 safe_quit")
        assert isinstance(result, Failure)
        assert result.kind is FailureKind.INVALID_ARGUMENT


class TestMedia:
    """File-sending commands."""

    def test_send_file_relative_path(self, client, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Relative paths are sent as absolute paths."""
        monkeypatch.chdir(tmp_path)
        assert sent(client.send_file("alice", "my file.pdf")) == ["send_file", "alice", str(Path.cwd() / "my file.pdf")]

    def test_send_photo_without_caption(self, client):
        """Missing caption keeps its position as an empty argument."""
        assert sent(client.send_photo("alice", "/tmp/cat.jpg")) == ["send_photo", "alice", "/tmp/cat.jpg", ""]

    def test_send_video_with_caption(self, client):
        """Caption is one argument."""
        assert sent(client.send_video("alice", "/tmp/v.mp4", "our trip")) == ["send_video", "alice", "/tmp/v.mp4", "our trip"]

    def test_send_location(self, client):
        """Coordinates are sent as plain numbers."""
        assert sent(client.send_location("alice", 55.75, "37.62")) == ["send_location", "alice", "55.75", "37.62"]

    def test_send_location_invalid(self, client):
        """Non-numeric coordinates fail without I/O."""
        result = client.send_location("alice", "north", 1)
        assert isinstance(result, Failure)
        assert result.kind is FailureKind.INVALID_ARGUMENT


class TestChatsAndContacts:
    """Group chat and contact commands."""

    def test_create_group_chat_round_trip(self, fake_daemon, make_config):
        """Title and members are sent intact; the confirmation record decodes without loss or reordering."""
        confirmation = {
            "id": "$010000002a",
            "peer_type": "chat",
            "peer_id": 42,
            "print_name": "Weekend_plans",
            "title": "Weekend plans",
            "members_num": 4,
            "admin": {"id": "$01000000ff", "print_name": "me"},
            "members": [{"print_name": "alice"}, {"print_name": "Bob_Smith"}, {"print_name": 'say "hi"'}],
        }
        received: list[list[str]] = []

        def respond(line: str) -> bytes:
            received.append(split_tokens(line))
            return answer(json.dumps(confirmation))

        daemon = fake_daemon(respond)
        with TelegramClient(make_config(daemon.port)) as c:
            result = c.create_group_chat("Weekend plans", ["alice", "Bob Smith", 'say "hi"'])
        assert received == [["create_group_chat", "Weekend plans", "alice", "Bob Smith", 'say "hi"']]
        assert isinstance(result, Record)
        assert result.data == confirmation
        assert list(result.data) == list(confirmation)

    def test_create_group_chat_without_members(self, make_config, closed_port):
        """At least one member is required; nothing is dialed."""
        c = TelegramClient(make_config(closed_port), connect=False)
        result = c.create_group_chat("Empty", [])
        assert isinstance(result, Failure)
        assert result.kind is FailureKind.INVALID_ARGUMENT
        assert c.state is ConnectionState.DISCONNECTED

    def test_chat_add_user_default_forward(self, client):
        """By default the new member sees the last 100 messages."""
        assert sent(client.chat_add_user("team", "carol")) == ["chat_add_user", "team", "carol", "100"]

    def test_add_contact_cleans_phone(self, client):
        """Phone numbers are reduced to digits."""
        assert sent(client.add_contact("+49 151 123-45", "Ann", "Lee")) == ["add_contact", "4915112345", "Ann", "Lee"]

    def test_add_contact_without_digits(self, client):
        """A phone number without digits fails without I/O."""
        result = client.add_contact("none", "Ann", "Lee")
        assert isinstance(result, Failure)
        assert result.kind is FailureKind.INVALID_ARGUMENT

    def test_delete_contact_command_name(self, client):
        """Wrapper names map onto the daemon's command names."""
        assert sent(client.delete_contact("alice")) == ["del_contact", "alice"]

    def test_contact_search_trims(self, client):
        """Usernames are trimmed."""
        assert sent(client.contact_search("  durov ")) == ["contact_search", "durov"]


class TestChannels:
    """Channel commands."""

    def test_set_admin_role(self, client):
        """Roles are sent as their numeric level."""
        assert sent(client.channel_set_admin("news", "bob", ChannelRole.EDITOR)) == ["channel_set_admin", "news", "bob", "2"]

    def test_channel_info_requires_channel(self, client):
        """Empty channel fails without I/O."""
        result = client.channel_info("")
        assert isinstance(result, Failure)
        assert result.kind is FailureKind.INVALID_ARGUMENT

    def test_channel_set_about(self, client):
        """Free text is one argument."""
        assert sent(client.channel_set_about("news", "Daily news; no spam")) == [
            "channel_set_about",
            "news",
            "Daily news; no spam",
        ]


class TestFlattening:
    """Results read as plain success/failure."""

    def test_success_is_truthy(self, fake_daemon, make_config):
        """A successful command is truthy."""
        daemon = fake_daemon(lambda _line: answer('{"result": "SUCCESS"}'))
        with TelegramClient(make_config(daemon.port)) as c:
            assert c.set_status_online()
            assert c.mark_read("alice")

    def test_daemon_error_is_falsy(self, fake_daemon, make_config):
        """A daemon-reported error is falsy but keeps its details."""
        daemon = fake_daemon(lambda _line: answer('{"result": "FAIL", "error_code": 71, "error": "PEER_ID_INVALID"}'))
        with TelegramClient(make_config(daemon.port)) as c:
            result = c.block_user("nobody")
        assert not result
        assert isinstance(result, Failure)
        assert result.kind is FailureKind.DAEMON
        assert result.message == "PEER_ID_INVALID"
