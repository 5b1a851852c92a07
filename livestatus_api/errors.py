"""Exceptions raised while answering a resource request.

Every exception carries the HTTP status it maps to and a message that is
safe to hand to the client. Internal detail (socket errors, offending
values) stays in the exception chain and in the server-side log.
"""

from typing import Optional


class GatewayError(Exception):
    """Base class for errors surfaced by the resource gateway."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, public_message: Optional[str] = None):
        super().__init__(message or public_message or self.default_message)
        self.public_message = public_message or self.default_message


class QueryFailedError(GatewayError):
    """Connecting to, writing to or reading from the Livestatus socket failed."""

    default_message = "Livestatus query failed"


class DecodeError(GatewayError):
    """A Livestatus reply did not match the column contract of its resource kind."""

    default_message = "Livestatus reply could not be decoded"

    def __init__(
        self,
        message: str,
        kind: Optional[str] = None,
        row_index: Optional[int] = None,
        column: Optional[str] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.row_index = row_index
        self.column = column


class NotFoundError(GatewayError):
    """A single-item lookup matched no rows."""

    status_code = 404
    default_message = "Not found"

    def __init__(self, title: str):
        super().__init__(public_message=f"{title} not found")


class BadKeyError(GatewayError):
    """A path key could not be used to build a filter."""

    status_code = 400
    default_message = "Invalid key"

    def __init__(self, kind: str, key_name: str, value: str):
        super().__init__(
            message=f"Invalid {kind} {key_name}: {value!r}",
            public_message=f"Invalid {kind} {key_name}",
        )
        self.value = value
