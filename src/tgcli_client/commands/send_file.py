"""Send a local file."""

from pathlib import Path

import typer

from tgcli_client.app_context import use_context
from tgcli_client.daemon.protocol import Failure


def send_file(
    ctx: typer.Context,
    peer: str,
    path: Path,
    *,
    caption: str | None = typer.Option(None, help="Caption, sends the file as a photo"),
) -> None:
    """Send a local file to a peer. The daemon reads the file itself."""
    app = use_context(ctx)
    with app.open_client() as client:
        result = client.send_photo(peer, path, caption) if caption is not None else client.send_file(peer, path)
    if isinstance(result, Failure):
        app.out.print_failure_and_exit(result)
    app.out.print_sent([peer])
