"""HTTP middleware for the Livestatus API gateway."""

from .request_tracking import install_request_tracking, REQUEST_ID_HEADER

__all__ = ["install_request_tracking", "REQUEST_ID_HEADER"]
