"""Centralized application configuration."""

import tomllib
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field

DEFAULT_DATA_DIR = Path.home() / ".local" / "tgcli-client"

# config.toml keys and the value types accepted for them
_TOML_KEYS: dict[str, tuple[type, ...]] = {
    "socket_path": (str,),
    "host": (str,),
    "port": (int,),
    "timeout": (int, float),
    "reconnect_attempts": (int,),
    "reconnect_backoff": (int, float),
    "daemon_command": (str,),
}


class Config(BaseModel):
    """Application-wide configuration."""

    model_config = ConfigDict(frozen=True)

    data_dir: Path = Field(description="Base directory for all application data")
    socket_path: Path | None = Field(default=None, description="Daemon Unix socket (defaults to data_dir / tg.sck)")
    host: str = Field(default="127.0.0.1", description="Daemon host, used when port is set")
    port: int | None = Field(default=None, ge=1, le=65535, description="Daemon TCP port (overrides the Unix socket)")
    timeout: float = Field(default=10.0, gt=0, description="Per-command timeout in seconds, covering write and read")
    reconnect_attempts: int = Field(default=3, ge=0, description="Extra connect attempts before giving up")
    reconnect_backoff: float = Field(default=0.5, ge=0, description="Initial delay between connect attempts, doubled each time")
    daemon_command: str = Field(default="telegram-cli", description="Executable used to launch the daemon")

    @computed_field(description="Optional TOML configuration file")
    @property
    def config_path(self) -> Path:
        """Optional TOML configuration file."""
        return self.data_dir / "config.toml"

    @computed_field(description="Unix domain socket of the daemon")
    @property
    def daemon_sock_path(self) -> Path:
        """Unix domain socket of the daemon."""
        return self.socket_path if self.socket_path is not None else self.data_dir / "tg.sck"

    @computed_field(description="Log file")
    @property
    def log_path(self) -> Path:
        """Log file."""
        return self.data_dir / "tgcli-client.log"

    @property
    def uses_tcp(self) -> bool:
        """Whether the daemon is reached over TCP instead of a Unix socket."""
        return self.port is not None

    @property
    def target(self) -> str:
        """Human-readable daemon address for logs and error messages."""
        return f"{self.host}:{self.port}" if self.uses_tcp else str(self.daemon_sock_path)

    @classmethod
    def build(cls, data_dir: Path | None = None, **overrides: Any) -> Self:
        """Build a Config from defaults, optional config.toml, and explicit overrides.

        Overrides set to None are ignored, so unset CLI options keep file values.
        """
        resolved_dir = data_dir if data_dir is not None else DEFAULT_DATA_DIR
        config_path = resolved_dir / "config.toml"

        kwargs: dict[str, Any] = {"data_dir": resolved_dir}
        if config_path.is_file():
            with config_path.open("rb") as f:
                toml_data = tomllib.load(f)
            for key, types in _TOML_KEYS.items():
                value = toml_data.get(key)
                if isinstance(value, types) and not isinstance(value, bool):
                    kwargs[key] = value

        kwargs.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**kwargs)
