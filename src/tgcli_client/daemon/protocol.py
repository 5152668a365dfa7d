"""Request/answer protocol of the telegram-cli daemon.

Line-oriented text over a Unix or TCP socket. A request is one line of
space-separated tokens; an answer is a length-prefixed block.

Request:  msg "user#42" "hello there"\\n
Answer:   ANSWER 21\\n{"result": "SUCCESS"}\\n
Payload:  JSON when the daemon runs with --json ({"result": "SUCCESS"}, an object,
          or a list of objects); plain text otherwise (SUCCESS, FAIL: 71: ...).
"""

import json
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Literal, NoReturn

from tgcli_client.errors import ClientError, DaemonReportedError, EscapingError, ProtocolError, TransportError
from tgcli_client.escaping import split_tokens

ANSWER_PREFIX = b"ANSWER "
# Longest header we accept before giving up on finding its newline
MAX_HEADER_SIZE = 64
MAX_ANSWER_SIZE = 64 * 1024 * 1024

_FAIL_LINE = re.compile(r"FAIL: (-?\d+): (.*)", re.DOTALL)


class FailureKind(StrEnum):
    """Why a command did not produce a usable answer."""

    INVALID_ARGUMENT = "invalid_argument"
    CONNECT_FAILED = "connect_failed"
    TIMEOUT = "timeout"
    CONNECTION_LOST = "connection_lost"
    PROTOCOL = "protocol"
    DAEMON = "daemon"


@dataclass(frozen=True)
class Success:
    """Bare acknowledgement: the command succeeded and returned no data."""

    ok: Literal[True] = field(default=True, init=False)

    def __bool__(self) -> bool:
        return True

    def unwrap(self) -> bool:
        """Return True."""
        return True


@dataclass(frozen=True)
class Record:
    """A single structured entity (user, chat, channel, message)."""

    data: dict[str, Any]
    ok: Literal[True] = field(default=True, init=False)

    def __bool__(self) -> bool:
        return True

    def unwrap(self) -> dict[str, Any]:
        """Return the decoded record."""
        return self.data


@dataclass(frozen=True)
class RecordList:
    """A list of entities (history, dialogs, contacts). May be empty."""

    items: list[dict[str, Any]]
    ok: Literal[True] = field(default=True, init=False)

    def __bool__(self) -> bool:
        return True

    def unwrap(self) -> list[dict[str, Any]]:
        """Return the decoded records."""
        return self.items


@dataclass(frozen=True)
class Failure:
    """The command could not be completed; ``kind`` tells why."""

    kind: FailureKind
    message: str
    raw: bytes = b""  # undecodable answer, kept for diagnostics
    error_code: int | None = None  # daemon's own error code, for DAEMON failures
    ok: Literal[False] = field(default=False, init=False)

    def __bool__(self) -> bool:
        return False

    def to_error(self) -> ClientError:
        """Build the exception matching this failure kind."""
        match self.kind:
            case FailureKind.INVALID_ARGUMENT:
                return EscapingError(self.message)
            case FailureKind.PROTOCOL:
                return ProtocolError(self.message, self.raw)
            case FailureKind.DAEMON:
                return DaemonReportedError(self.message, self.error_code)
            case _:
                return TransportError(self.kind.value, self.message)

    def unwrap(self) -> NoReturn:
        """Raise the exception matching this failure kind.

        Raises:
            ClientError: Always; the subclass depends on ``kind``.

        """
        raise self.to_error()


Result = Success | Record | RecordList | Failure

SUCCESS = Success()


def encode_command(name: str, args: Sequence[str | int] = ()) -> bytes:
    """Serialize a command name and pre-escaped tokens into one request line.

    Raises:
        EscapingError: Invalid command name, or a token that would not reach the
            daemon as exactly one argument.

    """
    if not name or any(ch.isspace() or ch == '"' for ch in name):
        raise EscapingError(f"Invalid command name: {name!r}")
    tokens = [name]
    for arg in args:
        # bool is an int subclass but never a meaningful daemon argument
        if isinstance(arg, bool) or not isinstance(arg, str | int):
            raise EscapingError(f"Unsupported argument type for '{name}': {type(arg).__name__}")
        token = str(arg)
        _check_token(name, token)
        tokens.append(token)
    return (" ".join(tokens) + "\n").encode()


def _check_token(name: str, token: str) -> None:
    """Ensure a token reads back as exactly one argument."""
    if not token:
        raise EscapingError(f"Empty token for '{name}'; escape empty text with escape_string_argument().")
    if "\n" in token or "\r" in token:
        raise EscapingError(f"Token for '{name}' contains a line break: {token!r}")
    if not token.startswith('"') and '"' in token:
        raise EscapingError(f"Unquoted token for '{name}' contains a quote: {token!r}")
    if token != token.strip() or len(split_tokens(token)) != 1:
        raise EscapingError(f"Token for '{name}' is not a single argument: {token!r}")


def parse_answer_header(line: bytes) -> int:
    """Return the payload size announced by an ``ANSWER <n>`` header line.

    Raises:
        ProtocolError: Not an answer header, or the size is missing or out of range.

    """
    if not line.startswith(ANSWER_PREFIX) or not line.endswith(b"\n"):
        raise ProtocolError("Unrecognized answer header.", line)
    size_text = line[len(ANSWER_PREFIX) :].strip()
    if not size_text.isdigit():
        raise ProtocolError("Answer header has no valid size.", line)
    size = int(size_text)
    if size == 0 or size > MAX_ANSWER_SIZE:
        raise ProtocolError(f"Answer size out of range: {size}.", line)
    return size


def decode_payload(payload: bytes) -> Result:
    """Decode an answer payload into a result. Never raises."""
    try:
        text = payload.decode()
    except UnicodeDecodeError:
        return Failure(FailureKind.PROTOCOL, "Answer is not valid UTF-8.", raw=payload)
    text = text.strip()
    try:
        obj = json.loads(text)
    except json.JSONDecodeError:
        return _decode_text(text, payload)
    except RecursionError:
        return Failure(FailureKind.PROTOCOL, "Answer JSON is nested too deeply.", raw=payload)
    return _decode_json(obj, payload)


def _decode_json(obj: object, payload: bytes) -> Result:
    match obj:
        case {"error": error, **rest}:
            code = rest.get("error_code")
            return Failure(FailureKind.DAEMON, str(error), raw=payload, error_code=code if _is_int(code) else None)
        case {"result": "SUCCESS"}:
            return SUCCESS
        case {"result": "FAIL"}:
            return Failure(FailureKind.DAEMON, "Command failed.", raw=payload)
        case dict():
            return Record(obj)
        case list() if all(isinstance(item, dict) for item in obj):
            return RecordList(obj)
        case list():
            return Failure(FailureKind.PROTOCOL, "Answer list contains non-object items.", raw=payload)
        case _:
            return Failure(FailureKind.PROTOCOL, f"Unexpected JSON answer of type {type(obj).__name__}.", raw=payload)


def _decode_text(text: str, payload: bytes) -> Result:
    if text == "SUCCESS":
        return SUCCESS
    if m := _FAIL_LINE.fullmatch(text):
        return Failure(FailureKind.DAEMON, m.group(2), raw=payload, error_code=int(m.group(1)))
    return Failure(FailureKind.PROTOCOL, "Answer is neither JSON nor a status line.", raw=payload)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
