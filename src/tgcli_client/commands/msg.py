"""Send a text message."""

import typer

from tgcli_client.app_context import use_context
from tgcli_client.daemon.protocol import Failure


def msg(ctx: typer.Context, peer: str, text: str) -> None:
    """Send a text message to a user, chat, or channel."""
    app = use_context(ctx)
    with app.open_client() as client:
        result = client.msg(peer, text)
    if isinstance(result, Failure):
        app.out.print_failure_and_exit(result)
    app.out.print_sent([peer])
