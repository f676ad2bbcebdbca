"""Build the ssh/scp command lines for a resolved host."""

import logging
import shlex
from dataclasses import dataclass, field

from sshcon.errors import TunnelModeError

logger = logging.getLogger(__name__)

LOOPBACK = "127.0.0.1"
HOST_TOKEN = "con:"


# ============================================================================
# Tunnel specs
# ============================================================================


@dataclass(frozen=True)
class LocalForward:
    """Forward a local port to a host reachable from the remote side (-L)."""

    local_port: int
    remote_port: int
    remote_host: str = LOOPBACK


@dataclass(frozen=True)
class RemoteForward:
    """Forward a remote port back to a host reachable from here (-R)."""

    local_port: int
    remote_port: int
    local_host: str = LOOPBACK


@dataclass(frozen=True)
class DynamicForward:
    """Open a SOCKS proxy on a local port (-D)."""

    local_port: int


TunnelSpec = LocalForward | RemoteForward | DynamicForward


# ============================================================================
# Actions
# ============================================================================


@dataclass
class Use:
    """Open an interactive session."""

    extra_args: list[str] = field(default_factory=list)
    command: str = "ssh"


@dataclass
class Export:
    """Produce the command line as text instead of running it."""

    extra_args: list[str] = field(default_factory=list)
    command: str = "ssh"


@dataclass
class Copy:
    """Copy files, with ``con:`` in either path standing for the host."""

    source: str
    destination: str
    extra_args: list[str] = field(default_factory=list)
    command: str = "scp"


@dataclass
class Tunnel:
    """Open a port-forwarding session."""

    spec: TunnelSpec | None = None
    extra_args: list[str] = field(default_factory=list)
    command: str = "ssh"


Action = Use | Export | Copy | Tunnel


@dataclass
class Invocation:
    """A program to run and its arguments."""

    program: str
    args: list[str]

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def __str__(self) -> str:
        return shlex.join(self.argv)


# ============================================================================
# Builders
# ============================================================================


def rewrite_path(path: str, host: str) -> str:
    """Replace every ``con:`` in a path with ``<host>:``."""
    return path.replace(HOST_TOKEN, f"{host}:")


def tunnel_flags(spec: TunnelSpec) -> list[str]:
    """Return the forwarding flags for a tunnel spec.

    The colons are emitted as separate arguments, e.g.
    ``["-L", "8080", ":", "10.0.0.1", ":", "80"]``.
    """
    if isinstance(spec, LocalForward):
        return [
            "-L", str(spec.local_port), ":", spec.remote_host, ":", str(spec.remote_port)
        ]
    if isinstance(spec, RemoteForward):
        return [
            "-R", str(spec.remote_port), ":", spec.local_host, ":", str(spec.local_port)
        ]
    if isinstance(spec, DynamicForward):
        return ["-D", str(spec.local_port)]
    raise TypeError(f"Unknown tunnel spec: {spec!r}")


def export_line(host: str, action: Export) -> str:
    """Return the shell line copied to the clipboard by ``export``."""
    return f"{action.command} {host} {' '.join(action.extra_args)}"


def build_command(host: str, action: Action) -> Invocation | str:
    """Build what to run for an action against a resolved host.

    Args:
        host: Alias returned by the selector resolver.
        action: The requested action and its parameters.

    Returns:
        An Invocation for Use, Copy and Tunnel; a shell line for Export.

    Raises:
        TunnelModeError: If a Tunnel action carries no tunnel spec.
    """
    if isinstance(action, Use):
        result = Invocation(action.command, [host, *action.extra_args])
    elif isinstance(action, Export):
        result = export_line(host, action)
    elif isinstance(action, Copy):
        result = Invocation(
            action.command,
            [
                *action.extra_args,
                rewrite_path(action.source, host),
                rewrite_path(action.destination, host),
            ],
        )
    elif isinstance(action, Tunnel):
        if action.spec is None:
            raise TunnelModeError()
        result = Invocation(
            action.command,
            [*tunnel_flags(action.spec), host, *action.extra_args],
        )
    else:
        raise TypeError(f"Unknown action: {action!r}")

    logger.debug("Built command: %s", result)
    return result
