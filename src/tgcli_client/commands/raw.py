"""Run an arbitrary daemon command."""

from typing import Annotated

import typer

from tgcli_client.app_context import use_context
from tgcli_client.errors import EscapingError
from tgcli_client.escaping import escape_string_argument


def raw(
    ctx: typer.Context,
    name: str,
    args: Annotated[list[str] | None, typer.Argument(help="Arguments, each sent as one quoted token")] = None,
    *,
    bare: bool = typer.Option(default=False, help="Send arguments unquoted (numbers, message ids)"),
) -> None:
    """Run any telegram-cli command and print its decoded answer."""
    app = use_context(ctx)
    tokens = list(args or []) if bare else [escape_string_argument(arg) for arg in args or []]
    with app.open_client() as client:
        try:
            result = client.exec(name, *tokens)
        except EscapingError as e:
            app.out.print_error_and_exit(e.code, str(e))
    app.out.print_result(result)
