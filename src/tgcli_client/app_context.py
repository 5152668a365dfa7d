"""Application context shared across CLI commands."""

from dataclasses import dataclass

import typer

from tgcli_client.config import Config
from tgcli_client.errors import TransportError
from tgcli_client.output import Output
from tgcli_client.telegram import TelegramClient


@dataclass(frozen=True, slots=True)
class AppContext:
    """Shared application state passed through Typer context."""

    out: Output
    cfg: Config

    def open_client(self) -> TelegramClient:
        """Connect to the daemon, exiting with an error if it is unreachable."""
        try:
            return TelegramClient(self.cfg)
        except TransportError as e:
            self.out.print_error_and_exit(e.code, f"{e} Is telegram-cli running? Try 'tgcli-client start'.")


def use_context(ctx: typer.Context) -> AppContext:
    """Extract application context from Typer context."""
    result: AppContext = ctx.obj
    return result
