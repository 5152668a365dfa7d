"""Show message history with a peer."""

import typer

from tgcli_client.app_context import use_context
from tgcli_client.daemon.protocol import Failure, RecordList


def history(
    ctx: typer.Context,
    peer: str,
    *,
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Number of messages"),
    offset: int | None = typer.Option(None, "--offset", help="Skip this many newer messages"),
) -> None:
    """Show recent messages with a peer (marks them as read)."""
    app = use_context(ctx)
    with app.open_client() as client:
        result = client.get_history(peer, limit, offset)
    match result:
        case RecordList(items=items):
            app.out.print_history(items)
        case Failure():
            app.out.print_failure_and_exit(result)
        case _:
            app.out.print_result(result)
