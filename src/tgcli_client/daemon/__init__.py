"""Daemon subsystem: wire protocol, connection, execution engine, and process management."""

from tgcli_client.daemon.client import DaemonClient as DaemonClient
from tgcli_client.daemon.connection import ConnectionState as ConnectionState
from tgcli_client.daemon.process import ensure_daemon as ensure_daemon
from tgcli_client.daemon.process import is_connectable as is_connectable
from tgcli_client.daemon.protocol import Failure as Failure
from tgcli_client.daemon.protocol import FailureKind as FailureKind
from tgcli_client.daemon.protocol import Record as Record
from tgcli_client.daemon.protocol import RecordList as RecordList
from tgcli_client.daemon.protocol import Result as Result
from tgcli_client.daemon.protocol import Success as Success
