"""Show daemon status."""

import typer

from tgcli_client.app_context import use_context
from tgcli_client.daemon.process import is_connectable
from tgcli_client.daemon.protocol import Failure, Record


def status(ctx: typer.Context) -> None:
    """Show whether the daemon is reachable and who is logged in."""
    app = use_context(ctx)

    if not is_connectable(app.cfg):
        app.out.print_status(running=False, target=app.cfg.target)
        return

    with app.open_client() as client:
        result = client.get_self()
    if isinstance(result, Failure):
        app.out.print_failure_and_exit(result)
    user = result.data if isinstance(result, Record) else None
    app.out.print_status(running=True, target=app.cfg.target, user=user)
