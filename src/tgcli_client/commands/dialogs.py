"""List dialogs."""

import typer

from tgcli_client.app_context import use_context


def dialogs(ctx: typer.Context) -> None:
    """List dialogs (users, chats, channels)."""
    app = use_context(ctx)
    with app.open_client() as client:
        result = client.get_dialog_list()
    app.out.print_result(result)
