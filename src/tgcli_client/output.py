"""Structured output for CLI and JSON modes."""

# ruff: noqa: T201

import json
import sys
from datetime import datetime
from typing import Any, NoReturn

import typer

from tgcli_client.daemon.protocol import Failure, Record, RecordList, Result, Success

# Fields tried in order to name an entity in one line
_NAME_KEYS = ("print_name", "title", "username", "phone", "id")


def _entity_name(entity: object) -> str:
    if isinstance(entity, dict):
        for key in _NAME_KEYS:
            if entity.get(key):
                return str(entity[key])
    return "?"


def _format_date(value: object) -> str:
    if isinstance(value, int):
        return datetime.fromtimestamp(value).strftime("%Y-%m-%d %H:%M")
    return str(value) if value is not None else "?"


class Output:
    """Handles all CLI output in JSON or human-readable format."""

    def __init__(self, *, json_mode: bool) -> None:
        """Initialize output handler.

        Args:
            json_mode: If True, output JSON envelopes; otherwise human-readable text.

        """
        self._json_mode = json_mode

    def _success(self, data: dict[str, Any] | list[dict[str, Any]], message: str) -> None:
        """Print a success result in JSON or human-readable format."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": data}, ensure_ascii=False))
        else:
            print(message)

    def print_error_and_exit(self, code: str, message: str) -> NoReturn:
        """Print an error in JSON or human-readable format and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        if self._json_mode:
            print(json.dumps({"ok": False, "error": code, "message": message}))
        else:
            print(f"Error: {message}", file=sys.stderr)
        raise typer.Exit(code=1)

    def print_failure_and_exit(self, failure: Failure) -> NoReturn:
        """Print a command failure and exit with code 1."""
        self.print_error_and_exit(failure.kind.value, failure.message)

    # --- Daemon ---

    def print_started(self, target: str) -> None:
        """Print daemon reachable confirmation."""
        self._success({"target": target}, f"Daemon is running at {target}.")

    def print_status(self, *, running: bool, target: str, user: dict[str, Any] | None = None) -> None:
        """Print daemon status and the logged-in user."""
        state = f"running at {target}" if running else f"not reachable at {target}"
        message = f"Daemon: {state}."
        if user is not None:
            message += f" Logged in as {_entity_name(user)}."
        self._success({"running": running, "target": target, "user": user}, message)

    def print_quit(self) -> None:
        """Print daemon quit confirmation."""
        self._success({}, "Daemon is shutting down.")

    # --- Messages ---

    def print_sent(self, peers: list[str]) -> None:
        """Print message sent confirmation."""
        self._success({"peers": peers}, f"Sent to {', '.join(peers)}.")

    def print_history(self, messages: list[dict[str, Any]]) -> None:
        """Print messages one per line: date, sender, text."""
        if self._json_mode:
            self._success(messages, "")
            return
        for message in messages:
            body = message.get("text") or f"<{message.get('media', {}).get('type', 'service')}>"
            print(f"[{_format_date(message.get('date'))}] {_entity_name(message.get('from'))}: {body}")

    # --- Entities ---

    def print_record(self, record: dict[str, Any]) -> None:
        """Print one entity as key: value lines."""
        if self._json_mode:
            self._success(record, "")
            return
        for key, value in record.items():
            shown = json.dumps(value, ensure_ascii=False) if isinstance(value, dict | list) else value
            print(f"{key}: {shown}")

    def print_records(self, records: list[dict[str, Any]]) -> None:
        """Print entities one name per line."""
        if self._json_mode:
            self._success(records, "")
            return
        for record in records:
            kind = record.get("peer_type") or record.get("type")
            print(f"{_entity_name(record)} ({kind})" if kind else _entity_name(record))

    def print_ok(self) -> None:
        """Print a bare success acknowledgement."""
        self._success({}, "OK.")

    def print_result(self, result: Result) -> None:
        """Print any command result; failures exit with code 1."""
        match result:
            case Success():
                self.print_ok()
            case Record(data=data):
                self.print_record(data)
            case RecordList(items=items):
                self.print_records(items)
            case Failure():
                self.print_failure_and_exit(result)
