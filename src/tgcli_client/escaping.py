"""Turn raw values into wire-safe tokens for the daemon's command line.

Every quoted token uses the daemon tokenizer's string syntax: the value is
wrapped in double quotes and ``\\``, ``"`` and line breaks are backslash-escaped,
so spaces, quotes and command separators inside it stay part of one argument.
"""

import os
import re
from collections.abc import Iterable
from pathlib import Path

from tgcli_client.errors import EscapingError

_ESCAPE_TABLE = str.maketrans({"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r"})
_UNESCAPES = {"n": "\n", "r": "\r", "t": "\t"}
_NON_DIGITS = re.compile(r"[^0-9]")


def _quote(value: str) -> str:
    return '"' + value.translate(_ESCAPE_TABLE) + '"'


def escape_peer(raw: str | None) -> str:
    """Escape a peer name (user, chat, or channel) as one quoted token.

    Raises:
        EscapingError: Peer is missing or contains a line break.

    """
    if raw is None:
        raise EscapingError("Peer is required.")
    if "\n" in raw or "\r" in raw:
        raise EscapingError(f"Peer name cannot contain line breaks: {raw!r}")
    return _quote(raw)


def escape_string_argument(raw: str | None) -> str:
    """Escape free text (message body, title, caption) as one quoted token.

    ``None`` becomes an empty token so the daemon still sees the argument position.
    """
    if raw is None:
        return '""'
    return _quote(raw)


def format_peer_list(peers: Iterable[str], *, required: bool = True) -> list[str]:
    """Escape each peer into its own token, for commands taking ``<peer>+``.

    Raises:
        EscapingError: The list is empty and at least one peer is required.

    """
    tokens = [escape_peer(peer) for peer in peers]
    if required and not tokens:
        raise EscapingError("At least one peer is required.")
    return tokens


def format_file_name(path: str | os.PathLike[str]) -> str:
    """Quote a local file path as the absolute path the daemon should open.

    Relative paths are resolved against the caller's working directory, not the
    daemon's. The file is not checked for existence.

    Raises:
        EscapingError: Empty path.

    """
    raw = os.fspath(path)
    if not raw:
        raise EscapingError("File name cannot be empty.")
    return escape_string_argument(str(Path(raw).expanduser().absolute()))


def clean_phone_number(raw: str | int) -> str:
    """Strip every non-digit from a phone number (spaces, ``+``, dashes).

    Raises:
        EscapingError: No digits left.

    """
    digits = _NON_DIGITS.sub("", str(raw))
    if not digits:
        raise EscapingError(f"Phone number has no digits: {raw!r}")
    return digits


def split_tokens(line: str) -> list[str]:
    """Split a command line into tokens the way the daemon tokenizer does.

    Bare tokens end at whitespace. Quoted tokens end at the next unescaped quote
    and may contain any character.

    Raises:
        EscapingError: Unterminated quoted token.

    """
    tokens: list[str] = []
    i = 0
    n = len(line)
    while i < n:
        if line[i].isspace():
            i += 1
            continue
        if line[i] != '"':
            start = i
            while i < n and not line[i].isspace():
                i += 1
            tokens.append(line[start:i])
            continue

        i += 1
        chars: list[str] = []
        while True:
            if i >= n:
                raise EscapingError(f"Unterminated quoted token in: {line!r}")
            ch = line[i]
            if ch == '"':
                i += 1
                break
            if ch == "\\" and i + 1 < n:
                nxt = line[i + 1]
                chars.append(_UNESCAPES.get(nxt, nxt))
                i += 2
                continue
            chars.append(ch)
            i += 1
        tokens.append("".join(chars))
    return tokens
