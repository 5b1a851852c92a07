"""Shared utilities for the Livestatus API gateway."""
