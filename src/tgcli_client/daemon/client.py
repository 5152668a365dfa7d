"""Synchronous execution engine for client → daemon commands."""

import logging
import threading
import time
from types import TracebackType
from typing import Self

from tgcli_client.config import Config
from tgcli_client.daemon.connection import Connection, ConnectionState
from tgcli_client.daemon.protocol import Failure, FailureKind, Result, decode_payload, encode_command
from tgcli_client.errors import ConnectionClosedError, ProtocolError, TransportError

logger = logging.getLogger(__name__)


class DaemonClient:
    """Executes commands over one held-open connection to the daemon.

    The daemon's answers carry no request identifiers, so exchanges are strictly
    one at a time: a lock covers the write, the read, and the decode. Callers on
    any number of threads may share one client.
    """

    def __init__(self, cfg: Config, *, connect: bool = True) -> None:
        """Initialize the client and, by default, dial the daemon.

        Args:
            cfg: Application configuration (daemon address, timeout, reconnect policy).
            connect: Dial immediately. When False the first exec() dials instead.

        Raises:
            TransportError: The daemon is unreachable after the reconnect budget.

        """
        self._cfg = cfg
        self._conn = Connection(cfg)
        self._lock = threading.Lock()
        if connect:
            with self._lock:
                failure = self._connect()
            if failure is not None:
                raise failure.to_error()

    @property
    def state(self) -> ConnectionState:
        """Lifecycle state of the underlying connection."""
        return self._conn.state

    def exec(self, name: str, *args: str | int) -> Result:
        """Run one command and decode its answer.

        Args:
            name: Daemon command name, e.g. ``msg``.
            args: Tokens already escaped with the ``escaping`` helpers; integers are sent as-is.

        Returns:
            Success, Record, or RecordList; a Failure for timeouts, lost or
            unreachable connections, malformed answers, and daemon-reported errors.
            A failed command is never retried, since it may already have taken effect.

        Raises:
            EscapingError: The command cannot be serialized. Nothing is sent.
            ConnectionClosedError: The client was closed.

        """
        request = encode_command(name, args)
        with self._lock:
            if self._conn.state is ConnectionState.CLOSED:
                raise ConnectionClosedError
            if self._conn.state is not ConnectionState.READY:
                failure = self._connect()
                if failure is not None:
                    return failure

            logger.debug("exec %s (%d args)", name, len(args))
            try:
                payload = self._conn.exchange(request, self._cfg.timeout)
            except ProtocolError as e:
                logger.warning("Command %s: malformed answer: %s", name, e)
                return Failure(FailureKind.PROTOCOL, str(e), raw=e.raw)
            except TransportError as e:
                logger.warning("Command %s: %s", name, e)
                return Failure(FailureKind(e.code), str(e))

            result = decode_payload(payload)
        if isinstance(result, Failure):
            logger.warning("Command %s failed (%s): %s", name, result.kind, result.message)
        return result

    def close(self) -> None:
        """Close the connection for good. Idempotent."""
        with self._lock:
            if self._conn.state is not ConnectionState.CLOSED:
                logger.debug("Closing connection to %s", self._cfg.target)
            self._conn.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc: BaseException | None, tb: TracebackType | None
    ) -> None:
        self.close()

    def _connect(self) -> Failure | None:
        """Dial with bounded retries and exponential backoff. Caller holds the lock."""
        attempts = 1 + self._cfg.reconnect_attempts
        error: TransportError | None = None
        for attempt in range(attempts):
            if attempt:
                time.sleep(self._cfg.reconnect_backoff * 2 ** (attempt - 1))
            try:
                self._conn.open()
            except TransportError as e:
                error = e
                logger.warning("Connect attempt %d/%d failed: %s", attempt + 1, attempts, e)
                continue
            logger.info("Connected to daemon at %s", self._cfg.target)
            return None
        return Failure(FailureKind.CONNECT_FAILED, f"Gave up after {attempts} connect attempts: {error}")
