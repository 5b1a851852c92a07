"""Request context management for tracing requests through the gateway.

Each inbound HTTP request gets a short request ID that is carried in a
context variable. Log records pick it up through
:class:`livestatus_api.logging_utils.RequestIDFormatter`, so all lines
written while serving one request (route handling, the Livestatus round
trip, decoding) can be correlated.
"""

import re
import secrets
from contextvars import ContextVar
from typing import Optional

# Global context variable for request ID - thread-safe and async-safe
REQUEST_ID_CONTEXT: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

_REQUEST_ID_PATTERN = re.compile(r"req_[0-9a-f]{6}(\.[0-9]{3})?")


def generate_request_id() -> str:
    """Generate a unique 6-digit hex request ID with req_ prefix.

    Returns:
        str: Request ID in format 'req_a1b2c3'

    Examples:
        >>> request_id = generate_request_id()
        >>> request_id.startswith('req_')
        True
        >>> len(request_id) == 10  # 'req_' + 6 hex chars
        True
    """
    return f"req_{secrets.token_hex(3)}"  # 3 bytes = 6 hex chars


def get_request_id() -> Optional[str]:
    """Get the current request ID from context, or None if unset."""
    return REQUEST_ID_CONTEXT.get()


def set_request_id(request_id: Optional[str]):
    """Set the request ID in the current context.

    Returns:
        The context token, usable with :func:`reset_request_id`.
    """
    return REQUEST_ID_CONTEXT.set(request_id)


def reset_request_id(token) -> None:
    """Restore the request ID that was current before :func:`set_request_id`."""
    REQUEST_ID_CONTEXT.reset(token)


def format_request_id(request_id: Optional[str]) -> str:
    """Format request ID for logging and display.

    Examples:
        >>> format_request_id('req_a1b2c3')
        'req_a1b2c3'
        >>> format_request_id(None)
        'req_unknown'
    """
    return request_id or "req_unknown"


def validate_request_id(request_id: str) -> bool:
    """Validate request ID format.

    Examples:
        >>> validate_request_id('req_a1b2c3')
        True
        >>> validate_request_id('req_a1b2c3.001')
        True
        >>> validate_request_id('invalid_id')
        False
    """
    if not isinstance(request_id, str):
        return False
    return bool(_REQUEST_ID_PATTERN.fullmatch(request_id))
