"""Resolve a user-supplied selector (index or alias) to a host alias."""

import logging

from sshcon.errors import IndexOutOfRange, NoSuchConnection
from sshcon.ssh_config import RecordTable, table_records

logger = logging.getLogger(__name__)


def parse_index(selector: str) -> int | None:
    """Return the selector as a non-negative integer, or None if it is not one."""
    value = selector.strip()
    if not value.isdecimal():
        return None
    return int(value)


def resolve(table: RecordTable, selector: str) -> str:
    """Resolve a selector against a parsed table.

    A selector that parses as a non-negative integer is a zero-based index
    into the connections. An index equal to the number of connections is
    accepted and names the last connection; anything larger is rejected.
    Any other selector must equal a connection's alias exactly.

    Args:
        table: Table returned by ``parse_config``.
        selector: Index or alias typed by the user.

    Returns:
        The alias of the selected connection.

    Raises:
        IndexOutOfRange: If the index is past the end of the table.
        NoSuchConnection: If no connection has the given alias.
    """
    rows = table_records(table)
    index = parse_index(selector)

    if index is not None:
        if index > len(rows) or not rows:
            raise IndexOutOfRange(index, len(rows) - 1)
        host = rows[min(index, len(rows) - 1)][1]
        logger.debug("Resolved index %d to %s", index, host)
        return host

    if not any(row[1] == selector for row in rows):
        raise NoSuchConnection(selector, [row[1] for row in rows])

    logger.debug("Resolved alias %s", selector)
    return selector
