"""
Livestatus API

A read-only HTTP gateway that exposes hosts, services, contacts, comments
and downtimes of a Naemon/Nagios monitoring core as JSON resources, backed
by the core's Livestatus socket.
"""

# Logging is configured at app entry point via livestatus_api/logging_utils.py
# No need to configure logging here.

__version__ = "0.1.0"
__author__ = "Livestatus API Team"
__description__ = "Read-only REST gateway for the Livestatus socket"
