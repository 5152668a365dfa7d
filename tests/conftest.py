"""Shared fixtures: simulated daemons and configs pointing at them."""

import socket
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from fake_daemon import FakeDaemon, Responder

from tgcli_client.config import Config


@pytest.fixture
def fake_daemon() -> Iterator[Callable[[Responder], FakeDaemon]]:
    """Factory starting FakeDaemons that are stopped after the test."""
    daemons: list[FakeDaemon] = []

    def start(respond: Responder) -> FakeDaemon:
        daemon = FakeDaemon(respond)
        daemons.append(daemon)
        return daemon

    yield start
    for daemon in daemons:
        daemon.stop()


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., Config]:
    """Build a Config for a TCP port with short timeouts and no retries by default."""

    def build(port: int, **overrides: Any) -> Config:
        kwargs: dict[str, Any] = {"timeout": 2.0, "reconnect_attempts": 0, "reconnect_backoff": 0.01}
        kwargs.update(overrides)
        return Config(data_dir=tmp_path, port=port, **kwargs)

    return build


@pytest.fixture
def closed_port() -> int:
    """A local TCP port with nothing listening on it."""
    with socket.create_server(("127.0.0.1", 0)) as s:
        return s.getsockname()[1]
