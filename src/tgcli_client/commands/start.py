"""Start telegram-cli in daemon mode."""

import typer

from tgcli_client.app_context import use_context
from tgcli_client.daemon.process import ensure_daemon


def start(ctx: typer.Context) -> None:
    """Start telegram-cli in daemon mode unless it is already reachable."""
    app = use_context(ctx)
    try:
        ensure_daemon(app.cfg)
    except (RuntimeError, OSError) as e:
        app.out.print_error_and_exit("start_failed", str(e))
    app.out.print_started(app.cfg.target)
