"""Run built commands and place exported lines on the clipboard."""

import logging
import subprocess

import pyperclip

from sshcon.commands import Invocation
from sshcon.errors import ChildProcessFailure, ClipboardError

logger = logging.getLogger(__name__)


def run(invocation: Invocation) -> int:
    """Run a command with the terminal's stdin, stdout and stderr.

    Returns:
        The command's exit status (always 0).

    Raises:
        ChildProcessFailure: If the program cannot be started or exits non-zero.
    """
    logger.info("Running %s", invocation)
    try:
        result = subprocess.run(invocation.argv)
    except FileNotFoundError as e:
        raise ChildProcessFailure(
            invocation.program, 127, f"{invocation.program} command not found"
        ) from e
    except OSError as e:
        raise ChildProcessFailure(
            invocation.program, 1, f"failed to start {invocation.program}: {e}"
        ) from e

    if result.returncode != 0:
        raise ChildProcessFailure(invocation.program, result.returncode)
    return result.returncode


def copy_to_clipboard(text: str) -> None:
    """Write text to the system clipboard."""
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        raise ClipboardError(f"clipboard unavailable: {e}") from e
    logger.info("Copied to clipboard: %s", text)
