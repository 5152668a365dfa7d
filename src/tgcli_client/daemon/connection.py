"""A single socket to the daemon with an explicit lifecycle.

DISCONNECTED -> CONNECTING -> READY -> (BUSY -> READY)* -> CLOSED
READY | BUSY -> DISCONNECTED on any I/O or framing error.
Only close() reaches CLOSED.
"""

import contextlib
import logging
import socket
import time
from enum import StrEnum

from tgcli_client.config import Config
from tgcli_client.daemon.protocol import MAX_HEADER_SIZE, parse_answer_header
from tgcli_client.errors import ConnectionClosedError, ProtocolError, TransportError

logger = logging.getLogger(__name__)

# Read buffer size
_BUFSIZE = 65536


class ConnectionState(StrEnum):
    """Lifecycle state of a Connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    READY = "ready"
    BUSY = "busy"
    CLOSED = "closed"


def dial(cfg: Config, timeout: float) -> socket.socket:
    """Open a stream socket to the daemon (TCP when a port is configured, Unix otherwise).

    Raises:
        OSError: Connection refused, missing socket file, timeout.

    """
    if cfg.uses_tcp:
        return socket.create_connection((cfg.host, cfg.port), timeout=timeout)
    s = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        s.settimeout(timeout)
        s.connect(str(cfg.daemon_sock_path))
    except BaseException:
        s.close()
        raise
    return s


class Connection:
    """One ordered duplex byte stream to the daemon. Not thread-safe; DaemonClient serializes access."""

    def __init__(self, cfg: Config) -> None:
        """Initialize a disconnected connection.

        Args:
            cfg: Application configuration (provides the daemon address).

        """
        self._cfg = cfg
        self._sock: socket.socket | None = None
        self._buffer = bytearray()
        self._state = ConnectionState.DISCONNECTED

    @property
    def state(self) -> ConnectionState:
        """Current lifecycle state."""
        return self._state

    def open(self) -> None:
        """Dial the daemon once.

        Raises:
            ConnectionClosedError: The connection was closed explicitly.
            TransportError: Connect failed (code: ``connect_failed``).

        """
        if self._state is ConnectionState.CLOSED:
            raise ConnectionClosedError
        self._drop()
        self._state = ConnectionState.CONNECTING
        try:
            self._sock = dial(self._cfg, self._cfg.timeout)
        except OSError as e:
            self._state = ConnectionState.DISCONNECTED
            raise TransportError("connect_failed", f"Cannot connect to daemon at {self._cfg.target}: {e}") from e
        self._state = ConnectionState.READY

    def exchange(self, request: bytes, timeout: float) -> bytes:
        """Write one request line and read back one framed answer payload.

        The whole exchange shares a single deadline. Any failure drops the socket,
        since the stream can no longer be trusted to line up with requests.

        Raises:
            TransportError: Not ready, timeout (code: ``timeout``), or reset/EOF
                (code: ``connection_lost``).
            ProtocolError: The answer framing is broken.

        """
        if self._state is not ConnectionState.READY:
            raise TransportError("connection_lost", f"Connection is {self._state}, not ready.")
        deadline = time.monotonic() + timeout
        self._state = ConnectionState.BUSY
        try:
            self._send(request, deadline)
            header = self._read_line(deadline)
            size = parse_answer_header(header)
            # Payload is followed by one newline that is not counted in the size
            block = self._read_exact(size + 1, deadline)
            if not block.endswith(b"\n"):
                raise ProtocolError("Answer payload is not newline-terminated.", header + block)
        except BaseException:
            self._drop()
            raise

        if self._buffer:
            logger.warning("Dropping %d unexpected bytes after answer; reconnecting on next command.", len(self._buffer))
            self._drop()
        else:
            self._state = ConnectionState.READY
        return block[:-1]

    def close(self) -> None:
        """Close the socket for good. Idempotent."""
        self._drop()
        self._state = ConnectionState.CLOSED

    # --- Private helpers ---

    def _drop(self) -> None:
        """Close the socket and forget buffered bytes, keeping CLOSED sticky."""
        if self._sock is not None:
            with contextlib.suppress(OSError):
                self._sock.close()
            self._sock = None
        self._buffer.clear()
        if self._state is not ConnectionState.CLOSED:
            self._state = ConnectionState.DISCONNECTED

    def _require_sock(self) -> socket.socket:
        if self._sock is None:
            raise TransportError("connection_lost", "Connection is not open.")
        return self._sock

    def _apply_deadline(self, sock: socket.socket, deadline: float) -> None:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise TransportError("timeout", f"No answer from daemon within {self._cfg.timeout}s.")
        sock.settimeout(remaining)

    def _send(self, data: bytes, deadline: float) -> None:
        sock = self._require_sock()
        self._apply_deadline(sock, deadline)
        try:
            sock.sendall(data)
        except TimeoutError as e:
            raise TransportError("timeout", f"Timed out writing to daemon after {self._cfg.timeout}s.") from e
        except OSError as e:
            raise TransportError("connection_lost", f"Write to daemon failed: {e}") from e

    def _recv(self, deadline: float) -> None:
        """Append one chunk from the socket to the buffer."""
        sock = self._require_sock()
        self._apply_deadline(sock, deadline)
        try:
            chunk = sock.recv(_BUFSIZE)
        except TimeoutError as e:
            raise TransportError("timeout", f"No answer from daemon within {self._cfg.timeout}s.") from e
        except OSError as e:
            raise TransportError("connection_lost", f"Read from daemon failed: {e}") from e
        if not chunk:
            raise TransportError("connection_lost", "Daemon closed the connection.")
        self._buffer.extend(chunk)

    def _read_line(self, deadline: float) -> bytes:
        """Read up to and including the next newline."""
        while True:
            idx = self._buffer.find(b"\n")
            if idx >= 0:
                line = bytes(self._buffer[: idx + 1])
                del self._buffer[: idx + 1]
                return line
            if len(self._buffer) > MAX_HEADER_SIZE:
                raise ProtocolError("Answer header is too long.", bytes(self._buffer))
            self._recv(deadline)

    def _read_exact(self, size: int, deadline: float) -> bytes:
        """Read exactly ``size`` bytes."""
        while len(self._buffer) < size:
            self._recv(deadline)
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data
