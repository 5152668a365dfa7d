"""CLI entry point for tgcli-client."""

from pathlib import Path
from typing import Annotated

import typer
from mm_clikit import TyperPlus
from pydantic import ValidationError

from tgcli_client.app_context import AppContext
from tgcli_client.commands.broadcast import broadcast
from tgcli_client.commands.contacts import contacts
from tgcli_client.commands.dialogs import dialogs
from tgcli_client.commands.history import history
from tgcli_client.commands.info import info
from tgcli_client.commands.msg import msg
from tgcli_client.commands.quit import quit_
from tgcli_client.commands.raw import raw
from tgcli_client.commands.send_file import send_file
from tgcli_client.commands.start import start
from tgcli_client.commands.status import status
from tgcli_client.config import Config
from tgcli_client.log import setup_logging
from tgcli_client.output import Output

app = TyperPlus(package_name="tgcli-client")


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    json_output: Annotated[bool, typer.Option("--json", help="Output results as JSON.")] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", envvar="TGCLI_DATA_DIR", help="Data directory path.")] = None,
    socket_path: Annotated[Path | None, typer.Option("--socket", envvar="TGCLI_SOCKET", help="Daemon Unix socket.")] = None,
    port: Annotated[int | None, typer.Option("--port", envvar="TGCLI_PORT", help="Daemon TCP port.")] = None,
    timeout: Annotated[float | None, typer.Option("--timeout", envvar="TGCLI_TIMEOUT", help="Command timeout in seconds.")] = None,
) -> None:
    """Talk to a running telegram-cli daemon from the terminal."""
    out = Output(json_mode=json_output)
    try:
        cfg = Config.build(data_dir, socket_path=socket_path, port=port, timeout=timeout)
    except ValidationError as e:
        out.print_error_and_exit("invalid_config", _describe_validation_error(e))
    cfg.data_dir.mkdir(parents=True, exist_ok=True)
    setup_logging(cfg.log_path)
    ctx.obj = AppContext(out=out, cfg=cfg)


def _describe_validation_error(error: ValidationError) -> str:
    problems = ["{}: {}".format(".".join(str(part) for part in err["loc"]), err["msg"]) for err in error.errors()]
    return "Invalid settings: " + "; ".join(problems)


# Daemon
app.command()(start)
app.command(aliases=["s"])(status)
app.command("quit")(quit_)

# Messages
app.command(aliases=["m"])(msg)
app.command()(broadcast)
app.command(aliases=["h"])(history)
app.command("send-file")(send_file)

# Peers
app.command(aliases=["c"])(contacts)
app.command(aliases=["d"])(dialogs)
app.command(aliases=["i"])(info)

# Anything else
app.command()(raw)
