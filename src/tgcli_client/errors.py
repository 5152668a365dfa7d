"""Exception hierarchy for client-side failures."""


class ClientError(Exception):
    """Base error carrying a machine-readable code."""

    def __init__(self, code: str, message: str) -> None:
        """Initialize with a machine-readable code and a human-readable message.

        Args:
            code: Machine-readable error code (e.g. "timeout").
            message: Human-readable error description.

        """
        super().__init__(message)
        self.code = code


class EscapingError(ClientError, ValueError):
    """A value cannot be represented as a wire token. Raised before any I/O."""

    def __init__(self, message: str) -> None:
        """Initialize with the ``invalid_argument`` code."""
        super().__init__("invalid_argument", message)


class TransportError(ClientError):
    """Connect failure, write failure, read timeout, or unexpected disconnect."""


class ConnectionClosedError(TransportError):
    """The client was closed explicitly and cannot be used anymore."""

    def __init__(self) -> None:
        """Initialize with the ``closed`` code."""
        super().__init__("closed", "Client is closed.")


class ProtocolError(ClientError):
    """The daemon answered with something that matches no known shape."""

    def __init__(self, message: str, raw: bytes = b"") -> None:
        """Initialize with the raw answer preserved for diagnostics.

        Args:
            message: Human-readable error description.
            raw: Raw bytes received from the daemon.

        """
        super().__init__("protocol", message)
        self.raw = raw


class DaemonReportedError(ClientError):
    """The exchange was valid but the daemon reported that the command failed."""

    def __init__(self, message: str, error_code: int | None = None) -> None:
        """Initialize with the daemon's numeric error code, when it sent one."""
        super().__init__("daemon", message)
        self.error_code = error_code
