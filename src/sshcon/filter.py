"""Row filtering for the ``show`` table."""

from fnmatch import fnmatchcase

from sshcon.ssh_config import RecordTable, Row

GLOB_CHARS = "*?["


def row_matches(row: Row, pattern: str) -> bool:
    """Check whether any cell of a row matches the pattern, ignoring case.

    Patterns with glob characters are matched against whole cells, anything
    else is a substring test.
    """
    needle = pattern.lower()
    cells = [cell.lower() for cell in row]
    if any(c in needle for c in GLOB_CHARS):
        return any(fnmatchcase(cell, needle) for cell in cells)
    return any(needle in cell for cell in cells)


def filter_table(table: RecordTable, pattern: str | None) -> RecordTable:
    """Keep the header and the rows matching ``pattern``."""
    if not pattern:
        return table
    header, *rows = table
    return [header] + [row for row in rows if row_matches(row, pattern)]
