"""SSH config parser that turns the config text into a table of connections."""

import logging
from dataclasses import dataclass
from pathlib import Path

from sshcon.errors import ConfigDecodeError, IoFailure

logger = logging.getLogger(__name__)

HOST_PREFIX = "Host "
HOSTNAME_PREFIX = "HostName "
USER_PREFIX = "user "

HEADER: tuple[str, str, str, str] = ("Index", "HostName", "Host", "User")

Row = tuple[str, str, str, str]
RecordTable = list[Row]


def split_lines(text: str) -> list[str]:
    """Split text on "\\n" only, keeping each line's terminator.

    Other characters that ``str.splitlines`` treats as breaks (form feed,
    NEL, U+2028 and the like) stay inside their line.
    """
    lines = [line + "\n" for line in text.split("\n")]
    lines[-1] = lines[-1][:-1]
    if not lines[-1]:
        lines.pop()
    return lines


@dataclass
class ConnectionRecord:
    """One ``Host`` block of the SSH config."""

    index: int
    host: str
    host_name: str = ""
    user: str = ""

    def as_row(self) -> Row:
        """Return the record as a table row of strings."""
        return (str(self.index), self.host, self.host_name, self.user)


def parse_records(text: str) -> list[ConnectionRecord]:
    """Parse SSH config text into connection records, in file order.

    Only ``Host``, ``HostName`` and ``user`` directives are recognised; every
    other line is ignored, as are attribute lines seen before the first
    ``Host`` line. When a block repeats an attribute the last value wins.

    Args:
        text: Full contents of the SSH config file.

    Returns:
        List of ConnectionRecord objects, one per ``Host`` line.
    """
    records: list[ConnectionRecord] = []
    current: ConnectionRecord | None = None

    for line in split_lines(text):
        line = line.strip()

        if line.startswith(HOST_PREFIX):
            current = ConnectionRecord(
                index=len(records),
                host=line[len(HOST_PREFIX):].strip(),
            )
            records.append(current)
        elif current is None:
            continue
        elif line.startswith(HOSTNAME_PREFIX):
            current.host_name = line[len(HOSTNAME_PREFIX):].strip()
        elif line.startswith(USER_PREFIX):
            current.user = line[len(USER_PREFIX):].strip()

    logger.debug("Parsed %d connection(s)", len(records))
    return records


def parse_config(text: str) -> RecordTable:
    """Parse SSH config text into a table: the header row followed by one row per host.

    Never fails: malformed lines are skipped, and empty text yields a table
    holding only the header.
    """
    return [HEADER] + [record.as_row() for record in parse_records(text)]


def table_records(table: RecordTable) -> list[Row]:
    """Return the data rows of a table, without the header."""
    return table[1:]


def read_config_text(config_path: Path) -> str:
    """Read the whole SSH config file as UTF-8 text.

    Raises:
        IoFailure: If the file cannot be opened or read.
        ConfigDecodeError: If the file is not valid UTF-8.
    """
    try:
        with open(config_path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise ConfigDecodeError(config_path, e) from e
    except OSError as e:
        raise IoFailure(config_path, e) from e


def write_config_text(config_path: Path, text: str) -> None:
    """Truncate the SSH config file and write ``text`` in its place.

    Raises:
        IoFailure: If the file cannot be opened or written.
    """
    try:
        with open(config_path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as e:
        raise IoFailure(config_path, e) from e
