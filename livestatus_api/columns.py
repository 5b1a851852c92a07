"""Column contracts for the Livestatus tables served by the gateway.

A contract is one ordered tuple of :class:`Column` entries per resource
kind. The same tuple renders the ``Columns:`` header of the query and
drives the positional decoding of each reply row, so the requested
columns and the decoded fields cannot drift apart.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from .models import Comment, Contact, Downtime, Host, Record, Service, Status


class ColumnTypeError(TypeError):
    """A reply value does not have the JSON type its column expects."""

    def __init__(self, message: str, column: Optional[str] = None):
        super().__init__(message)
        self.column = column


def _is_number(value: Any) -> bool:
    # json decodes true/false to bool, which is an int subclass;
    # NaN, Infinity and overflowing literals like 1e400 decode to non-finite floats
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not isinstance(value, float) or math.isfinite(value)


def _describe(value: Any) -> str:
    return repr(value) if isinstance(value, float) else type(value).__name__


def to_int(value: Any) -> int:
    """Coerce a JSON number to int, truncating toward zero."""
    if not _is_number(value):
        raise ColumnTypeError(f"expected number, got {_describe(value)}")
    return int(value)


def to_bool(value: Any) -> bool:
    """Coerce a numeric flag to bool: zero is False, anything else True."""
    if not _is_number(value):
        raise ColumnTypeError(f"expected numeric flag, got {_describe(value)}")
    return value != 0


def to_str(value: Any) -> str:
    if not isinstance(value, str):
        raise ColumnTypeError(f"expected string, got {type(value).__name__}")
    return value


def list_of(element: Callable[[Any], Any]) -> Callable[[Any], List[Any]]:
    """Build a coercion for a JSON array whose elements use ``element``."""

    def coerce(value: Any) -> List[Any]:
        if not isinstance(value, list):
            raise ColumnTypeError(f"expected array, got {type(value).__name__}")
        return [element(item) for item in value]

    coerce.__name__ = f"list_of_{element.__name__}"
    return coerce


int_list = list_of(to_int)
str_list = list_of(to_str)


@dataclass(frozen=True)
class Column:
    """One requested column and the record field it decodes into."""

    name: str
    field: str
    coerce: Callable[[Any], Any]


def _col(name: str, coerce: Callable[[Any], Any], field: Optional[str] = None) -> Column:
    return Column(name=name, field=field or name, coerce=coerce)


@dataclass(frozen=True)
class ColumnContract:
    """Ordered pairing of Livestatus columns and record fields for one table."""

    kind: str
    table: str
    model: Type[Record]
    columns: Tuple[Column, ...]

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    @property
    def field_names(self) -> List[str]:
        return [column.field for column in self.columns]

    def decode_row(self, row: List[Any]) -> Dict[str, Any]:
        """Map one positional reply row onto record field values.

        Args:
            row: Reply row, one value per column in contract order

        Returns:
            Dict[str, Any]: Field name to coerced value

        Raises:
            ColumnTypeError: If the row length or any value type does not
                match the contract. The error message names the column.
        """
        if len(row) != len(self.columns):
            raise ColumnTypeError(
                f"expected {len(self.columns)} columns, got {len(row)}"
            )

        values = {}
        for column, value in zip(self.columns, row):
            try:
                values[column.field] = column.coerce(value)
            except ColumnTypeError as e:
                raise ColumnTypeError(
                    f"column '{column.name}': {e}", column=column.name
                ) from e
        return values


COMMENT_CONTRACT = ColumnContract(
    kind="comment",
    table="comments",
    model=Comment,
    columns=(
        _col("id", to_int),
        _col("author", to_str),
        _col("comment", to_str),
        _col("entry_time", to_int),
        _col("entry_type", to_int),
        _col("expire_time", to_int),
        _col("expires", to_bool),
        _col("type", to_int),
        _col("host_name", to_str),
        _col("service_description", to_str),
    ),
)

CONTACT_CONTRACT = ColumnContract(
    kind="contact",
    table="contacts",
    model=Contact,
    columns=(
        _col("id", to_int),
        _col("name", to_str),
        _col("alias", to_str),
        _col("email", to_str),
        _col("pager", to_str),
        _col("host_notification_period", to_str),
        _col("host_notifications_enabled", to_bool),
        _col("service_notification_period", to_str),
        _col("service_notifications_enabled", to_bool),
    ),
)

DOWNTIME_CONTRACT = ColumnContract(
    kind="downtime",
    table="downtimes",
    model=Downtime,
    columns=(
        _col("id", to_int),
        _col("author", to_str),
        _col("comment", to_str),
        _col("duration", to_int),
        _col("start_time", to_int),
        _col("end_time", to_int),
        _col("entry_time", to_int),
        _col("fixed", to_bool),
        _col("type", to_int),
        _col("host_name", to_str),
        _col("service_description", to_str),
    ),
)

HOST_CONTRACT = ColumnContract(
    kind="host",
    table="hosts",
    model=Host,
    columns=(
        _col("id", to_int),
        _col("name", to_str),
        _col("alias", to_str),
        _col("acknowledged", to_bool),
        _col("address", to_str),
        _col("check_period", to_str),
        _col("check_source", to_str),
        _col("checks_enabled", to_bool),
        _col("comments", int_list),
        _col("contacts", str_list),
        _col("downtimes", int_list),
        _col("event_handler", to_str),
        _col("event_handler_enabled", to_bool),
        _col("execution_time", to_int),
        _col("flap_detection_enabled", to_bool),
        _col("groups", str_list),
        _col("hard_state", to_int),
        _col("has_been_checked", to_bool),
        _col("in_check_period", to_bool),
        _col("in_notification_period", to_bool),
        _col("is_flapping", to_bool),
        _col("last_check", to_int),
        _col("last_notification", to_int),
        _col("last_state_change", to_int),
        _col("last_time_down", to_int),
        _col("last_time_unreachable", to_int),
        _col("last_time_up", to_int),
        _col("latency", to_int),
        _col("next_check", to_int),
        _col("next_notification", to_int),
        _col("notification_period", to_str),
        _col("notifications_enabled", to_bool),
        _col("num_services", to_int, "number_of_services"),
        _col("num_services_hard_crit", to_int, "number_of_services_hard_critical"),
        _col("num_services_hard_ok", to_int, "number_of_services_hard_ok"),
        _col("num_services_hard_unknown", to_int, "number_of_services_hard_unknown"),
        _col("num_services_hard_warn", to_int, "number_of_services_hard_warning"),
        _col("num_services_pending", to_int, "number_of_services_pending"),
        _col("state", to_int),
        _col("state_type", to_int),
        _col("services", str_list),
    ),
)

SERVICE_CONTRACT = ColumnContract(
    kind="service",
    table="services",
    model=Service,
    columns=(
        _col("id", to_int),
        _col("acknowledged", to_bool),
        _col("check_period", to_str),
        _col("check_source", to_str),
        _col("check_type", to_int),
        _col("checks_enabled", to_bool),
        _col("comments", int_list),
        _col("contacts", str_list),
        _col("description", to_str),
        _col("downtimes", int_list),
        _col("event_handler", to_str),
        _col("event_handler_enabled", to_bool),
        _col("execution_time", to_int),
        _col("flap_detection_enabled", to_bool),
        _col("groups", str_list),
        _col("has_been_checked", to_bool),
        _col("in_check_period", to_bool),
        _col("in_notification_period", to_bool),
        _col("is_flapping", to_bool),
        _col("last_check", to_int),
        _col("last_notification", to_int),
        _col("last_state_change", to_int),
        _col("last_time_critical", to_int),
        _col("last_time_ok", to_int),
        _col("last_time_unknown", to_int),
        _col("last_time_warning", to_int),
        _col("latency", to_int),
        _col("next_check", to_int),
        _col("next_notification", to_int),
        _col("notification_period", to_str),
        _col("notifications_enabled", to_bool),
        _col("state", to_int),
        _col("state_type", to_int),
        _col("host_id", to_int),
        _col("host_name", to_str),
    ),
)

STATUS_CONTRACT = ColumnContract(
    kind="status",
    table="status",
    model=Status,
    columns=(
        _col("program_version", to_str),
        _col("livestatus_version", to_str),
    ),
)

CONTRACTS: Dict[str, ColumnContract] = {
    contract.kind: contract
    for contract in (
        COMMENT_CONTRACT,
        CONTACT_CONTRACT,
        DOWNTIME_CONTRACT,
        HOST_CONTRACT,
        SERVICE_CONTRACT,
    )
}


def contract_for(kind: str) -> ColumnContract:
    """Return the column contract for a resource kind."""
    try:
        return CONTRACTS[kind]
    except KeyError:
        raise ValueError(f"Unknown resource kind: {kind}") from None


def columns_for(kind: str) -> List[str]:
    """Return the ordered column names requested for a resource kind."""
    return contract_for(kind).column_names
