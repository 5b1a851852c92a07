"""Positional decoding of Livestatus JSON replies into records."""

import json
import logging
from typing import Any, List, Union

from .columns import ColumnContract, ColumnTypeError
from .errors import DecodeError
from .models import Record

logger = logging.getLogger(__name__)


def decode(payload: Union[bytes, str], contract: ColumnContract) -> List[Record]:
    """Decode a Livestatus ``OutputFormat: json`` reply.

    The reply must be an array of rows, each row an array holding one value
    per column of ``contract`` in contract order. Decoding is all or
    nothing: one bad row fails the whole call.

    Args:
        payload: Raw reply read from the socket
        contract: Column contract the query was built from

    Returns:
        List[Record]: One record per row, in reply order. An empty reply
        array gives an empty list.

    Raises:
        DecodeError: If the reply is not valid JSON, is not an array of
            arrays, or any row does not match the contract.
    """
    try:
        rows = json.loads(payload)
    except (TypeError, ValueError) as e:
        logger.error(f"Livestatus reply for {contract.kind} is not valid JSON: {e}")
        raise DecodeError(
            f"Reply for {contract.kind} is not valid JSON: {e}", kind=contract.kind
        ) from e

    if not isinstance(rows, list):
        logger.error(
            f"Livestatus reply for {contract.kind} is a {type(rows).__name__}, expected array"
        )
        raise DecodeError(
            f"Reply for {contract.kind} is not an array", kind=contract.kind
        )

    return [_decode_row(row, index, contract) for index, row in enumerate(rows)]


def _decode_row(row: Any, index: int, contract: ColumnContract) -> Record:
    if not isinstance(row, list):
        logger.error(
            f"Column contract mismatch for {contract.kind} row {index}: "
            f"row is a {type(row).__name__}, expected array"
        )
        raise DecodeError(
            f"Row {index} of {contract.kind} reply is not an array",
            kind=contract.kind,
            row_index=index,
        )

    try:
        values = contract.decode_row(row)
    except ColumnTypeError as e:
        logger.error(
            f"Column contract mismatch for {contract.kind} row {index}: {e}"
        )
        raise DecodeError(
            f"Row {index} of {contract.kind} reply does not match its columns: {e}",
            kind=contract.kind,
            row_index=index,
            column=e.column,
        ) from e

    return contract.model(**values)

