"""Show info about a user, chat, or channel."""

import typer

from tgcli_client.app_context import use_context


def info(
    ctx: typer.Context,
    peer: str,
    *,
    chat: bool = typer.Option(default=False, help="Peer is a group chat"),
    channel: bool = typer.Option(default=False, help="Peer is a channel"),
) -> None:
    """Show info about a user (default), a group chat, or a channel."""
    app = use_context(ctx)
    if chat and channel:
        app.out.print_error_and_exit("invalid_argument", "Use only one of --chat and --channel.")
    with app.open_client() as client:
        if chat:
            result = client.chat_info(peer)
        elif channel:
            result = client.channel_info(peer)
        else:
            result = client.get_user_info(peer)
    app.out.print_result(result)
