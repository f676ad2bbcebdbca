"""Error types raised by sshcon."""

from pathlib import Path


class SshconError(Exception):
    """Base class for every error that terminates an invocation."""

    exit_code: int = 1


# ============================================================================
# Config file errors
# ============================================================================


class ConfigFileError(SshconError):
    """The SSH config file cannot be used."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(message)


class ConfigFileNotFound(ConfigFileError):
    def __init__(self, path: Path):
        super().__init__(path, f"couldn't open {path}: file does not exist")


class NotAFile(ConfigFileError):
    def __init__(self, path: Path):
        super().__init__(path, f"couldn't open {path}: not a regular file")


class IoFailure(ConfigFileError):
    """Reading, writing or opening the config file failed."""

    def __init__(self, path: Path, error: OSError):
        self.error = error
        super().__init__(path, f"I/O error on {path}: {error.strerror or error}")


class ConfigDecodeError(ConfigFileError):
    """The config file is not valid UTF-8."""

    def __init__(self, path: Path, error: UnicodeDecodeError):
        self.error = error
        super().__init__(path, f"couldn't read {path}: not valid UTF-8")


# ============================================================================
# Selection errors
# ============================================================================


class SelectionError(SshconError):
    """A selector did not resolve to exactly one connection."""


class IndexOutOfRange(SelectionError):
    def __init__(self, index: int, max_index: int):
        self.index = index
        self.max_index = max_index
        if max_index < 0:
            message = f"incorrect index ({index}), no connections configured"
        else:
            message = f"incorrect index ({index}), max index = {max_index}"
        super().__init__(message)


class NoSuchConnection(SelectionError):
    def __init__(self, name: str, known: list[str]):
        self.name = name
        self.known = known
        message = f"no connection in the list with the name {name}"
        if known:
            message += f" (known: {', '.join(known)})"
        super().__init__(message)


class IndexParseError(SshconError):
    """An index argument is not a non-negative integer."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"invalid index {value!r}: expected a non-negative integer")


# ============================================================================
# Command errors
# ============================================================================


class TunnelModeError(SshconError):
    def __init__(self):
        super().__init__(
            "tunnel mode not specified, choose one of: local, remote, dynamic"
        )


class ChildProcessFailure(SshconError):
    """The external remote-access command failed to start or exited non-zero."""

    def __init__(self, program: str, return_code: int, message: str | None = None):
        self.program = program
        self.return_code = return_code
        if return_code > 0:
            self.exit_code = return_code
        elif return_code < 0:
            # killed by signal
            self.exit_code = 128 - return_code
        super().__init__(message or f"{program} exited with status {return_code}")


class ClipboardError(SshconError):
    """The exported line could not be placed on the clipboard."""
