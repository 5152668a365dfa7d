"""Stop the daemon."""

import typer

from tgcli_client.app_context import use_context
from tgcli_client.daemon.process import is_connectable
from tgcli_client.daemon.protocol import Failure, FailureKind


def quit_(ctx: typer.Context) -> None:
    """Ask the daemon to exit once pending queries finish."""
    app = use_context(ctx)
    if not is_connectable(app.cfg):
        app.out.print_error_and_exit("not_running", f"Daemon is not reachable at {app.cfg.target}.")
    with app.open_client() as client:
        result = client.safe_quit()
    # The daemon may hang up before answering once it starts exiting
    if isinstance(result, Failure) and result.kind is not FailureKind.CONNECTION_LOST:
        app.out.print_failure_and_exit(result)
    app.out.print_quit()
