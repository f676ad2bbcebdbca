"""Append and delete ``Host`` blocks while leaving every other line untouched."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from sshcon.errors import ConfigFileNotFound, IndexParseError, IoFailure, NotAFile
from sshcon.selector import parse_index
from sshcon.ssh_config import (
    HOST_PREFIX,
    read_config_text,
    split_lines,
    write_config_text,
)

logger = logging.getLogger(__name__)

CONFIRM_TOKEN = "yes"
INDENT = "    "


@dataclass
class DeleteResult:
    """Outcome of removing a block from config text."""

    alias: str | None
    text: str
    written: bool = False

    @property
    def matched(self) -> bool:
        return self.alias is not None


def render_host_block(
    host: str,
    host_name: str,
    user: str,
    port: int = 22,
    identity_file: str | None = None,
    identities_only: bool = False,
) -> str:
    """Render a new ``Host`` block, preceded by a blank separator line."""
    lines = [
        "",
        f"Host {host}",
        f"{INDENT}HostName {host_name}",
        f"{INDENT}user {user}",
        f"{INDENT}port {port}",
    ]
    if identity_file:
        lines.append(f"{INDENT}IdentityFile {identity_file}")
    if identities_only:
        lines.append(f"{INDENT}IdentityFilesOnly yes")
    return "\n".join(lines) + "\n"


def append_host(
    config_path: Path,
    host: str,
    host_name: str,
    user: str,
    port: int = 22,
    identity_file: str | None = None,
    identities_only: bool = False,
) -> None:
    """Append a new ``Host`` block to an existing SSH config file.

    Raises:
        ConfigFileNotFound: If the file does not exist.
        NotAFile: If the path is not a regular file.
        IoFailure: If the file cannot be opened for appending.
    """
    if not config_path.exists():
        raise ConfigFileNotFound(config_path)
    if not config_path.is_file():
        raise NotAFile(config_path)

    block = render_host_block(host, host_name, user, port, identity_file, identities_only)
    try:
        with open(config_path, "a", encoding="utf-8", newline="") as f:
            f.write(block)
    except OSError as e:
        raise IoFailure(config_path, e) from e

    logger.debug("Appended host %s to %s", host, config_path)


def delete_host(text: str, index: str) -> DeleteResult:
    """Remove the block at a zero-based position from config text.

    The block runs from its ``Host`` line up to, but not including, the next
    ``Host`` line or the end of the text. All other lines, blank separators
    included, are copied through unchanged. If no block has that position the
    text is returned as is and ``alias`` is None.

    Raises:
        IndexParseError: If ``index`` is not a non-negative integer.
    """
    position = parse_index(index)
    if position is None:
        raise IndexParseError(index)

    remaining = position + 1
    alias: str | None = None
    kept: list[str] = []

    for line in split_lines(text):
        stripped = line.strip()
        if stripped.startswith(HOST_PREFIX):
            remaining -= 1
            if remaining == 0:
                alias = stripped[len(HOST_PREFIX):].strip()
        if remaining != 0:
            kept.append(line)

    return DeleteResult(alias=alias, text="".join(kept))


def confirm_and_delete(
    config_path: Path,
    index: str,
    ask: Callable[[str], str],
) -> DeleteResult:
    """Delete a block from the config file once the user confirms.

    ``ask`` is called with the alias of the block about to be removed and must
    return the user's reply. The file is rewritten only when the reply is
    exactly ``yes``; otherwise, or when no block matches, nothing is written.

    Returns:
        DeleteResult with the alias of the matched block, the text now on
        disk and whether the file was rewritten.
    """
    original = read_config_text(config_path)
    result = delete_host(original, index)

    if not result.matched:
        logger.debug("No host block at index %s, nothing to delete", index)
        return result

    if ask(result.alias).rstrip("\r\n") != CONFIRM_TOKEN:
        logger.debug("Deletion of %s not confirmed", result.alias)
        return DeleteResult(alias=result.alias, text=original)

    write_config_text(config_path, result.text)
    logger.debug("Deleted host %s from %s", result.alias, config_path)
    return DeleteResult(alias=result.alias, text=result.text, written=True)
