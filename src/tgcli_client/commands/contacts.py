"""List contacts."""

import typer

from tgcli_client.app_context import use_context


def contacts(
    ctx: typer.Context,
    search: str | None = typer.Argument(default=None, help="Search users by username instead"),
) -> None:
    """List contacts, or search users by username."""
    app = use_context(ctx)
    with app.open_client() as client:
        result = client.contact_search(search) if search else client.get_contact_list()
    app.out.print_result(result)
