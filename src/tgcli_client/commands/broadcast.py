"""Send one message to several users."""

from typing import Annotated

import typer

from tgcli_client.app_context import use_context
from tgcli_client.daemon.protocol import Failure


def broadcast(
    ctx: typer.Context,
    text: str,
    peers: Annotated[list[str], typer.Argument(help="Recipients")],
) -> None:
    """Send the same text message to several users at once."""
    app = use_context(ctx)
    with app.open_client() as client:
        result = client.broadcast(peers, text)
    if isinstance(result, Failure):
        app.out.print_failure_and_exit(result)
    app.out.print_sent(peers)
