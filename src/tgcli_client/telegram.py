"""One method per telegram-cli command, built on DaemonClient.exec().

Every method returns a Result. Failures are falsy, so ``if client.msg(...)`` reads
as plain success/failure, while ``result.kind`` still tells what went wrong.
Arguments that cannot be escaped yield an ``INVALID_ARGUMENT`` failure and
nothing is sent to the daemon.
"""

import functools
import os
from collections.abc import Callable, Iterable
from enum import IntEnum
from typing import ParamSpec, TypeAlias

from tgcli_client.daemon.client import DaemonClient
from tgcli_client.daemon.protocol import Failure, FailureKind, Result
from tgcli_client.errors import EscapingError
from tgcli_client.escaping import (
    clean_phone_number,
    escape_peer,
    escape_string_argument,
    format_file_name,
    format_peer_list,
)

PathArg: TypeAlias = str | os.PathLike[str]


P = ParamSpec("P")


class ChannelRole(IntEnum):
    """Admin level for channel_set_admin."""

    USER = 0
    MODERATOR = 1
    EDITOR = 2


def _escaping_as_failure(method: Callable[P, Result]) -> Callable[P, Result]:
    """Turn an EscapingError raised while building the command into a Failure."""

    @functools.wraps(method)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result:
        try:
            return method(*args, **kwargs)
        except EscapingError as e:
            return Failure(FailureKind.INVALID_ARGUMENT, str(e))

    return wrapper


def _coordinate(value: float | str) -> str:
    try:
        return repr(float(value))
    except ValueError:
        raise EscapingError(f"Not a coordinate: {value!r}") from None


class TelegramClient(DaemonClient):
    """Command wrappers for telegram-cli."""

    # --- Status ---

    @_escaping_as_failure
    def set_status_online(self) -> Result:
        """Set status as online."""
        return self.exec("status_online")

    @_escaping_as_failure
    def set_status_offline(self) -> Result:
        """Set status as offline."""
        return self.exec("status_offline")

    @_escaping_as_failure
    def send_typing(self, peer: str, action: int = 1) -> Result:
        """Send a typing notification to a peer.

        Lasts a couple of seconds or until a message is sent. ``action`` selects the
        kind of activity: 1 typing, 2 cancel, 3 record video, 5 record audio, 9 geo,
        10 choose contact.
        """
        return self.exec("send_typing", escape_peer(peer), action)

    @_escaping_as_failure
    def mark_read(self, peer: str) -> Result:
        """Mark all messages with a peer as read."""
        return self.exec("mark_read", escape_peer(peer))

    # --- Messages ---

    @_escaping_as_failure
    def msg(self, peer: str, text: str) -> Result:
        """Send a text message to a peer."""
        return self.exec("msg", escape_peer(peer), escape_string_argument(text))

    @_escaping_as_failure
    def broadcast(self, users: Iterable[str], text: str) -> Result:
        """Send a text message to several users at once."""
        return self.exec("broadcast", *format_peer_list(users), escape_string_argument(text))

    @_escaping_as_failure
    def get_history(self, peer: str, limit: int | None = None, offset: int | None = None) -> Result:
        """Return past messages with a peer, newest last. Marks them as read.

        Args:
            peer: User, chat, or channel.
            limit: Maximum number of messages; values below 1 are raised to 1.
            offset: Skip this many newer messages (may be negative). Requires ``limit``.

        """
        args: list[str | int] = [escape_peer(peer)]
        if limit is not None:
            args.append(max(1, int(limit)))
        if offset is not None:
            if limit is None:
                raise EscapingError("History offset requires a limit.")
            args.append(int(offset))
        return self.exec("history", *args)

    @_escaping_as_failure
    def delete_msg(self, msg_id: str | int) -> Result:
        """Delete a message by id."""
        return self.exec("delete_msg", msg_id)

    # --- Media ---

    @_escaping_as_failure
    def send_file(self, peer: str, path: PathArg) -> Result:
        """Send a local file to a peer."""
        return self.exec("send_file", escape_peer(peer), format_file_name(path))

    @_escaping_as_failure
    def send_photo(self, peer: str, path: PathArg, caption: str | None = None) -> Result:
        """Send a photo with an optional caption."""
        return self.exec("send_photo", escape_peer(peer), format_file_name(path), escape_string_argument(caption))

    @_escaping_as_failure
    def send_video(self, peer: str, path: PathArg, caption: str | None = None) -> Result:
        """Send a video with an optional caption."""
        return self.exec("send_video", escape_peer(peer), format_file_name(path), escape_string_argument(caption))

    @_escaping_as_failure
    def send_audio(self, peer: str, path: PathArg) -> Result:
        return self.exec("send_audio", escape_peer(peer), format_file_name(path))

    @_escaping_as_failure
    def send_document(self, peer: str, path: PathArg) -> Result:
        return self.exec("send_document", escape_peer(peer), format_file_name(path))

    @_escaping_as_failure
    def send_location(self, peer: str, latitude: float | str, longitude: float | str) -> Result:
        return self.exec("send_location", escape_peer(peer), _coordinate(latitude), _coordinate(longitude))

    @_escaping_as_failure
    def send_contact(self, peer: str, phone: str, first_name: str, last_name: str) -> Result:
        """Send a contact card."""
        return self.exec(
            "send_contact",
            escape_peer(peer),
            escape_string_argument(phone),
            escape_string_argument(first_name),
            escape_string_argument(last_name),
        )

    @_escaping_as_failure
    def load_photo(self, msg_id: str | int) -> Result:
        """Download the photo attached to a message. The answer names the local file."""
        return self.exec("load_photo", msg_id)

    @_escaping_as_failure
    def load_document(self, msg_id: str | int) -> Result:
        """Download the document attached to a message."""
        return self.exec("load_document", msg_id)

    # --- Group chats ---

    @_escaping_as_failure
    def create_group_chat(self, title: str, users: Iterable[str]) -> Result:
        """Create a group chat. The current user is added automatically."""
        return self.exec("create_group_chat", escape_string_argument(title), *format_peer_list(users))

    @_escaping_as_failure
    def chat_info(self, chat: str) -> Result:
        """Return chat info (title, members, admin)."""
        return self.exec("chat_info", escape_peer(chat))

    @_escaping_as_failure
    def rename_chat(self, chat: str, title: str) -> Result:
        """Rename a chat; both title and print name change."""
        return self.exec("rename_chat", escape_peer(chat), escape_string_argument(title))

    @_escaping_as_failure
    def chat_add_user(self, chat: str, user: str, forward_messages: int = 100) -> Result:
        """Add a user to a chat, showing them the last ``forward_messages`` messages."""
        return self.exec("chat_add_user", escape_peer(chat), escape_peer(user), int(forward_messages))

    @_escaping_as_failure
    def chat_del_user(self, chat: str, user: str) -> Result:
        return self.exec("chat_del_user", escape_peer(chat), escape_peer(user))

    # --- Contacts and users ---

    @_escaping_as_failure
    def get_contact_list(self) -> Result:
        """Return all contacts, each shaped like get_user_info()."""
        return self.exec("contact_list")

    @_escaping_as_failure
    def contact_search(self, username: str) -> Result:
        return self.exec("contact_search", escape_string_argument(username.strip()))

    @_escaping_as_failure
    def add_contact(self, phone: str | int, first_name: str, last_name: str) -> Result:
        """Add a contact by phone number. Non-digits in the phone number are dropped."""
        return self.exec(
            "add_contact",
            clean_phone_number(phone),
            escape_string_argument(first_name),
            escape_string_argument(last_name),
        )

    @_escaping_as_failure
    def rename_contact(self, contact: str, first_name: str, last_name: str) -> Result:
        return self.exec(
            "rename_contact", escape_peer(contact), escape_string_argument(first_name), escape_string_argument(last_name)
        )

    @_escaping_as_failure
    def delete_contact(self, contact: str) -> Result:
        return self.exec("del_contact", escape_peer(contact))

    @_escaping_as_failure
    def block_user(self, user: str) -> Result:
        return self.exec("block_user", escape_peer(user))

    @_escaping_as_failure
    def unblock_user(self, user: str) -> Result:
        return self.exec("unblock_user", escape_peer(user))

    @_escaping_as_failure
    def get_user_info(self, user: str) -> Result:
        """Return user info (id, last online, phone)."""
        return self.exec("user_info", escape_peer(user))

    @_escaping_as_failure
    def view_user_photo(self, user: str) -> Result:
        return self.exec("view_user_photo", escape_peer(user))

    @_escaping_as_failure
    def get_dialog_list(self) -> Result:
        """Return all dialogs; each has type "user", "chat", or "channel"."""
        return self.exec("dialog_list")

    # --- Own profile ---

    @_escaping_as_failure
    def get_self(self) -> Result:
        """Return info about the logged-in user."""
        return self.exec("get_self")

    @_escaping_as_failure
    def set_profile_name(self, first_name: str, last_name: str) -> Result:
        """Set the profile name. Returns the updated user info."""
        return self.exec("set_profile_name", escape_string_argument(first_name), escape_string_argument(last_name))

    @_escaping_as_failure
    def set_profile_photo(self, path: PathArg) -> Result:
        return self.exec("set_profile_photo", format_file_name(path))

    @_escaping_as_failure
    def set_username(self, username: str) -> Result:
        return self.exec("set_username", escape_string_argument(username))

    # --- Channels ---

    @_escaping_as_failure
    def create_channel(self, name: str, about: str) -> Result:
        return self.exec("create_channel", escape_string_argument(name), escape_string_argument(about))

    @_escaping_as_failure
    def channel_list(self) -> Result:
        return self.exec("channel_list")

    @_escaping_as_failure
    def channel_info(self, channel: str) -> Result:
        if not channel:
            raise EscapingError("Channel is required.")
        return self.exec("channel_info", escape_peer(channel))

    @_escaping_as_failure
    def channel_set_photo(self, channel: str, path: PathArg) -> Result:
        return self.exec("channel_set_photo", escape_peer(channel), format_file_name(path))

    @_escaping_as_failure
    def channel_set_username(self, channel: str, username: str) -> Result:
        return self.exec("channel_set_username", escape_peer(channel), escape_string_argument(username))

    @_escaping_as_failure
    def channel_set_about(self, channel: str, about: str) -> Result:
        return self.exec("channel_set_about", escape_peer(channel), escape_string_argument(about))

    @_escaping_as_failure
    def rename_channel(self, channel: str, name: str) -> Result:
        return self.exec("rename_channel", escape_peer(channel), escape_string_argument(name))

    @_escaping_as_failure
    def export_channel_link(self, channel: str) -> Result:
        return self.exec("export_channel_link", escape_peer(channel))

    @_escaping_as_failure
    def channel_get_admins(self, channel: str) -> Result:
        return self.exec("channel_get_admins", escape_peer(channel))

    @_escaping_as_failure
    def channel_get_members(self, channel: str) -> Result:
        return self.exec("channel_get_members", escape_peer(channel))

    @_escaping_as_failure
    def channel_invite(self, channel: str, user: str) -> Result:
        return self.exec("channel_invite", escape_peer(channel), escape_peer(user))

    @_escaping_as_failure
    def channel_kick(self, channel: str, user: str) -> Result:
        return self.exec("channel_kick", escape_peer(channel), escape_peer(user))

    @_escaping_as_failure
    def channel_set_admin(self, channel: str, user: str, role: ChannelRole = ChannelRole.MODERATOR) -> Result:
        """Set a channel member's admin level."""
        return self.exec("channel_set_admin", escape_peer(channel), escape_peer(user), int(role))

    # --- Session ---

    @_escaping_as_failure
    def main_session(self) -> Result:
        """Make this connection the one that receives update notifications."""
        return self.exec("main_session")

    @_escaping_as_failure
    def safe_quit(self) -> Result:
        """Ask the daemon to exit once pending queries finish."""
        return self.exec("safe_quit")
