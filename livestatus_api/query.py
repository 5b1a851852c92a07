"""Livestatus query text construction."""

import re
from typing import List, Sequence, Tuple

from .columns import ColumnContract
from .errors import BadKeyError

# Livestatus requests are line based; any control character could end the
# Filter line early and smuggle in further headers.
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_NUMERIC_KEY = re.compile(r"[0-9]+")


def check_filter_value(kind: str, key_name: str, value: str) -> str:
    """Validate a path key for use as a ``Filter:`` value.

    Args:
        kind: Resource kind, used in the error message
        key_name: Name of the key (``id``, ``name``, ...)
        value: Raw value taken from the request path

    Returns:
        str: The unchanged value

    Raises:
        BadKeyError: If the value is empty, has surrounding whitespace or
            contains control characters.
    """
    if not value or value != value.strip() or _CONTROL_CHARS.search(value):
        raise BadKeyError(kind, key_name, value)
    return value


def parse_numeric_key(kind: str, key_name: str, value: str) -> int:
    """Parse a numeric path key such as a comment or downtime id."""
    if not _NUMERIC_KEY.fullmatch(value):
        raise BadKeyError(kind, key_name, value)
    return int(value)


class LivestatusQuery:
    """A ``GET`` request against one Livestatus table.

    Filters are joined implicitly with AND by Livestatus. The rendered text
    stops after the ``Columns:`` line; the socket client appends the output
    format header and the terminating blank line.
    """

    def __init__(
        self,
        table: str,
        columns: Sequence[str],
        filters: Sequence[Tuple[str, str]] = (),
    ):
        if not columns:
            raise ValueError("A query needs at least one column")
        self.table = table
        self.columns: List[str] = list(columns)
        self.filters: List[Tuple[str, str]] = list(filters)

    @classmethod
    def for_contract(cls, contract: ColumnContract) -> "LivestatusQuery":
        return cls(contract.table, contract.column_names)

    def filter(self, column: str, value) -> "LivestatusQuery":
        """Return a copy of this query with an added equality filter."""
        text = str(value)
        if _CONTROL_CHARS.search(text):
            raise ValueError(f"Filter value for '{column}' contains control characters")
        return LivestatusQuery(self.table, self.columns, self.filters + [(column, text)])

    def render(self) -> str:
        lines = [f"GET {self.table}"]
        lines.extend(f"Filter: {column} = {value}" for column, value in self.filters)
        lines.append("Columns:" + " ".join(self.columns))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"LivestatusQuery({self.render()!r})"
