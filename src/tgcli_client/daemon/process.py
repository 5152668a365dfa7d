"""Daemon reachability checks and spawning of telegram-cli."""

import subprocess  # nosec B404
import time

from tgcli_client.config import Config
from tgcli_client.daemon.connection import dial

# Polling parameters for ensure_daemon
_POLL_INTERVAL = 0.1
_POLL_TIMEOUT = 15.0


def is_connectable(cfg: Config) -> bool:
    """Check if the daemon socket is accepting connections."""
    try:
        with dial(cfg, 1.0):
            pass
    except OSError:
        return False
    else:
        return True


def daemon_args(cfg: Config) -> list[str]:
    """Build the telegram-cli command line: JSON answers, daemon mode, listening on our address."""
    args = [cfg.daemon_command, "--json", "-d", "-W"]
    if cfg.uses_tcp:
        args.extend(["-P", str(cfg.port)])
    else:
        args.extend(["-S", str(cfg.daemon_sock_path)])
    return args


def spawn_daemon(cfg: Config) -> None:
    """Launch telegram-cli as a detached background process."""
    # S603: args come from our own configuration, not from untrusted input
    subprocess.Popen(  # noqa: S603  # nosec B603
        daemon_args(cfg),
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        stdin=subprocess.DEVNULL,
        start_new_session=True,
    )


def ensure_daemon(cfg: Config) -> None:
    """Ensure the daemon is running and accepting connections. Spawns if needed.

    Raises:
        RuntimeError: Daemon fails to start within timeout.

    """
    if is_connectable(cfg):
        return

    # Nothing listening, spawn a new daemon
    cfg.daemon_sock_path.parent.mkdir(parents=True, exist_ok=True)
    spawn_daemon(cfg)

    # Poll until socket is ready
    deadline = time.monotonic() + _POLL_TIMEOUT
    while time.monotonic() < deadline:
        if is_connectable(cfg):
            return
        time.sleep(_POLL_INTERVAL)

    msg = f"Daemon failed to start within {_POLL_TIMEOUT}s at {cfg.target}."
    raise RuntimeError(msg)
