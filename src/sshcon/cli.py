"""CLI commands for sshcon."""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from sshcon import __version__
from sshcon.commands import (
    Copy,
    DynamicForward,
    Export,
    LocalForward,
    LOOPBACK,
    RemoteForward,
    Tunnel,
    Use,
    build_command,
)
from sshcon.config import Settings, load_settings, resolve_ssh_config, save_settings
from sshcon.editor import CONFIRM_TOKEN, append_host, confirm_and_delete
from sshcon.errors import SshconError
from sshcon.filter import filter_table
from sshcon.runner import copy_to_clipboard, run
from sshcon.selector import resolve
from sshcon.ssh_config import RecordTable, parse_config, read_config_text

app = typer.Typer(
    name="sshcon",
    help="Browse, use and edit the connections in your SSH config.",
    add_completion=False,
)

console = Console()

PORT_RANGE = {"min": 0, "max": 65535}


class TunnelKind(str, Enum):
    local = "local"
    remote = "remote"
    dynamic = "dynamic"


@dataclass
class AppState:
    """Per-invocation state handed from the callback to the commands."""

    settings: Settings
    config_override: Path | None = None

    def ssh_config(self) -> Path:
        return resolve_ssh_config(self.settings, self.config_override)

    def table(self) -> RecordTable:
        return parse_config(read_config_text(self.ssh_config()))


def setup_logging(verbose: bool = False):
    """Configure logging with rich handler."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


@contextmanager
def reported_errors():
    """Print sshcon errors in red and exit with their status."""
    try:
        yield
    except SshconError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(e.exit_code)


def version_callback(value: bool):
    if value:
        console.print(f"[bold cyan]sshcon[/bold cyan] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        metavar="FILE",
        help="SSH config file to use instead of the configured one.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
):
    """Browse, use and edit the connections in your SSH config."""
    setup_logging(verbose)
    ctx.obj = AppState(settings=load_settings(), config_override=config)


def _state(ctx: typer.Context) -> AppState:
    return ctx.obj


def _run_action(ctx: typer.Context, selection: str, action) -> None:
    with reported_errors():
        host = resolve(_state(ctx).table(), selection)
        invocation = build_command(host, action)
        run(invocation)


# ============================================================================
# Browsing
# ============================================================================


@app.command()
def show(
    ctx: typer.Context,
    pattern: str | None = typer.Option(
        None, "--filter", "-f", help="Only show rows matching this text or glob."
    ),
):
    """Show the connections in the SSH config."""
    with reported_errors():
        table = filter_table(_state(ctx).table(), pattern)

    header, *rows = table
    output = Table(show_header=True, header_style="bold green")
    for label in header:
        output.add_column(label, style="bright_blue")
    for row in rows:
        output.add_row(*(escape(cell) for cell in row))

    console.print(output)


# ============================================================================
# Remote access
# ============================================================================


@app.command()
def use(
    ctx: typer.Context,
    selection: str = typer.Argument(..., help="Index or name of the connection"),
    args: list[str] = typer.Option(
        [], "--args", "-a", help="Extra argument for the command (repeatable)"
    ),
    command: str | None = typer.Option(
        None, "--command", "-c", help="Command to run instead of ssh"
    ),
):
    """Open an ssh session to the selected connection."""
    state = _state(ctx)
    action = Use(extra_args=list(args), command=command or state.settings.ssh_command)
    _run_action(ctx, selection, action)


@app.command()
def export(
    ctx: typer.Context,
    selection: str = typer.Argument(..., help="Index or name of the connection"),
    args: list[str] = typer.Option(
        [], "--args", "-a", help="Extra argument for the command (repeatable)"
    ),
    command: str | None = typer.Option(
        None, "--command", "-c", help="Command to export instead of ssh"
    ),
):
    """Copy the ssh command for the selected connection to the clipboard."""
    state = _state(ctx)
    action = Export(extra_args=list(args), command=command or state.settings.ssh_command)

    with reported_errors():
        host = resolve(state.table(), selection)
        line = build_command(host, action)
        copy_to_clipboard(line)

    console.print(f"[bold green]✓[/bold green] Copied: [cyan]{escape(line)}[/cyan]")


@app.command()
def copy(
    ctx: typer.Context,
    selection: str = typer.Argument(..., help="Index or name of the connection"),
    source: str = typer.Argument(..., help="Source path, con: marks the remote side"),
    destination: str = typer.Argument(
        ..., help="Destination path, con: marks the remote side"
    ),
    args: list[str] = typer.Option(
        [], "--args", "-a", help="Extra argument for the command (repeatable)"
    ),
    command: str | None = typer.Option(
        None, "--command", "-c", help="Command to run instead of scp"
    ),
):
    """Copy files to or from the selected connection.

    Every con: in a path is replaced by the connection name.

    Examples:
        sshcon copy web ./site.tar con:/tmp/       # Upload
        sshcon copy 2 con:/var/log/syslog .        # Download
        sshcon copy db con:dump.sql . --args=-C    # Extra scp flag
    """
    state = _state(ctx)
    action = Copy(
        source=source,
        destination=destination,
        extra_args=list(args),
        command=command or state.settings.scp_command,
    )
    _run_action(ctx, selection, action)


@app.command()
def tunnel(
    ctx: typer.Context,
    selection: str = typer.Argument(..., help="Index or name of the connection"),
    mode: TunnelKind | None = typer.Argument(None, help="local, remote or dynamic"),
    local_port: int | None = typer.Option(
        None, "--local-port", "-l", help="Port on this machine", **PORT_RANGE
    ),
    remote_port: int | None = typer.Option(
        None, "--remote-port", "-r", help="Port on the far side", **PORT_RANGE
    ),
    host: str = typer.Option(
        LOOPBACK, "--host", "-H", help="Host the forwarded port points at"
    ),
    args: list[str] = typer.Option(
        [], "--args", "-a", help="Extra argument for the command (repeatable)"
    ),
    command: str | None = typer.Option(
        None, "--command", "-c", help="Command to run instead of ssh"
    ),
):
    """Open a port-forwarding tunnel through the selected connection.

    Examples:
        sshcon tunnel web local -l 8080 -r 80             # -L 8080 : 127.0.0.1 : 80
        sshcon tunnel web remote -l 3000 -r 9000          # -R 9000 : 127.0.0.1 : 3000
        sshcon tunnel web dynamic -l 1080                 # -D 1080
    """
    spec = None
    if mode is not None:
        if local_port is None:
            raise typer.BadParameter("--local-port is required", param_hint="--local-port")
        if mode is TunnelKind.dynamic:
            spec = DynamicForward(local_port=local_port)
        elif remote_port is None:
            raise typer.BadParameter(
                "--remote-port is required", param_hint="--remote-port"
            )
        elif mode is TunnelKind.local:
            spec = LocalForward(
                local_port=local_port, remote_port=remote_port, remote_host=host
            )
        else:
            spec = RemoteForward(
                local_port=local_port, remote_port=remote_port, local_host=host
            )

    state = _state(ctx)
    action = Tunnel(
        spec=spec, extra_args=list(args), command=command or state.settings.ssh_command
    )
    _run_action(ctx, selection, action)


# ============================================================================
# Editing
# ============================================================================


@app.command()
def add(
    ctx: typer.Context,
    host: str = typer.Argument(..., help="Name of the new connection"),
    hostname: str = typer.Argument(..., help="Real host name or address"),
    user: str = typer.Option(..., "--user", "-u", help="Login user"),
    port: int = typer.Option(22, "--port", "-p", help="SSH port", **PORT_RANGE),
    identity_file: str | None = typer.Option(
        None, "--identity-file", "-i", help="Private key to use"
    ),
    identities_only: bool = typer.Option(
        False, "--identities-only", help="Only use the given identity file"
    ),
):
    """Append a new connection to the SSH config."""
    with reported_errors():
        append_host(
            _state(ctx).ssh_config(),
            host,
            hostname,
            user,
            port=port,
            identity_file=identity_file,
            identities_only=identities_only,
        )

    console.print(
        f"[bold green]✓[/bold green] Added connection [cyan]{escape(host)}[/cyan]"
    )


@app.command()
def delete(
    ctx: typer.Context,
    index: str = typer.Argument(..., help="Index of the connection to delete"),
):
    """Delete a connection from the SSH config, after confirmation."""

    def ask(alias: str) -> str:
        console.print(
            Panel(
                f"Connection [bold cyan]{escape(alias)}[/bold cyan] will be removed.",
                title="Delete",
                border_style="yellow",
            )
        )
        return typer.prompt(
            f"Type '{CONFIRM_TOKEN}' to confirm", default="", show_default=False
        )

    with reported_errors():
        result = confirm_and_delete(_state(ctx).ssh_config(), index, ask)

    if not result.matched:
        console.print(
            f"[yellow]No connection at index {escape(index)}, nothing deleted[/yellow]"
        )
    elif result.written:
        alias = escape(result.alias)
        console.print(f"[bold green]✓[/bold green] Deleted connection [cyan]{alias}[/cyan]")
    else:
        console.print("[yellow]Deletion cancelled[/yellow]")


# ============================================================================
# Settings
# ============================================================================


@app.command("settings")
def settings_cmd(
    ctx: typer.Context,
    ssh_config: Path | None = typer.Option(
        None, "--ssh-config", help="Default SSH config file"
    ),
    ssh_command: str | None = typer.Option(
        None, "--ssh-command", help="Default command for use, export and tunnel"
    ),
    scp_command: str | None = typer.Option(
        None, "--scp-command", help="Default command for copy"
    ),
):
    """Show or change the saved defaults."""
    settings = _state(ctx).settings

    if ssh_config is not None or ssh_command is not None or scp_command is not None:
        if ssh_config is not None:
            settings.ssh_config = ssh_config.expanduser()
        if ssh_command is not None:
            settings.ssh_command = ssh_command
        if scp_command is not None:
            settings.scp_command = scp_command
        save_settings(settings)
        console.print("[bold green]✓[/bold green] Settings saved")

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="dim")
    table.add_column("Value", style="bold")
    table.add_row("SSH config", str(settings.ssh_config))
    table.add_row("ssh command", settings.ssh_command)
    table.add_row("scp command", settings.scp_command)

    console.print(
        Panel(table, title="[bold green]Settings[/bold green]", border_style="green")
    )


if __name__ == "__main__":
    app()
