"""Pytest configuration and shared fixtures."""

import json
import os
import logging
from typing import Any, Dict, List, Optional

import pytest

from livestatus_api.columns import ColumnContract, int_list, str_list, to_bool, to_int, to_str
from livestatus_api.errors import QueryFailedError

# Disable logging during tests to reduce noise
logging.disable(logging.CRITICAL)


@pytest.fixture(autouse=True)
def clean_env():
    """Clean environment variables before each test."""
    env_vars_to_clean = [
        "LIVESTATUS_SOCKET_PATH",
        "LIVESTATUS_TIMEOUT",
        "LIVESTATUS_API_LISTEN_ADDRESS",
        "LOG_LEVEL",
    ]

    # Store original values
    original_values = {}
    for var in env_vars_to_clean:
        original_values[var] = os.environ.get(var)
        if var in os.environ:
            del os.environ[var]

    yield

    # Restore original values
    for var, value in original_values.items():
        if value is not None:
            os.environ[var] = value
        elif var in os.environ:
            del os.environ[var]


_DEFAULTS = {
    to_int: 0,
    to_bool: 0,
    to_str: "",
    int_list: [],
    str_list: [],
}


def build_row(contract: ColumnContract, **values: Any) -> List[Any]:
    """Build a wire row for ``contract`` with zero values, overridden by column name."""
    unknown = set(values) - set(contract.column_names)
    if unknown:
        raise KeyError(f"Unknown columns for {contract.kind}: {sorted(unknown)}")
    return [
        values.get(column.name, _DEFAULTS[column.coerce])
        for column in contract.columns
    ]


@pytest.fixture
def row_factory():
    """Factory building positional reply rows for a column contract."""
    return build_row


class FakeResponse:
    """Stand-in for LivestatusResponse holding a canned reply."""

    def __init__(self, payload: bytes):
        self.payload = payload
        self.closed = False

    def read(self) -> bytes:
        return self.payload

    def close(self) -> None:
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class FakeLivestatusClient:
    """Records rendered queries and answers them with canned replies."""

    def __init__(self, reply: Any = None, error: Optional[Exception] = None):
        self.reply = [] if reply is None else reply
        self.error = error
        self.queries: List[str] = []
        self.responses: List[FakeResponse] = []

    def _payload(self) -> bytes:
        if isinstance(self.reply, bytes):
            return self.reply
        return json.dumps(self.reply).encode("utf-8")

    def execute(self, query) -> FakeResponse:
        self.queries.append(str(query))
        if self.error is not None:
            raise self.error
        response = FakeResponse(self._payload())
        self.responses.append(response)
        return response

    def query(self, query) -> bytes:
        with self.execute(query) as response:
            return response.read()


@pytest.fixture
def fake_client():
    """Fake Livestatus client returning an empty reply by default."""
    return FakeLivestatusClient()


@pytest.fixture
def failing_client():
    """Fake Livestatus client whose queries fail at the transport level."""
    return FakeLivestatusClient(
        error=QueryFailedError("Cannot query '/var/cache/naemon/live': [Errno 111] Connection refused")
    )


@pytest.fixture
def contact_reply() -> List[List[Any]]:
    """Reply for a contacts query with a single contact."""
    return [[5, "alice", "Alice A.", "a@x.com", "555", "24x7", 1, "24x7", 0]]


@pytest.fixture
def sample_config_data() -> Dict[str, Any]:
    """Configuration file contents."""
    return {
        "livestatus": {
            "socket_path": "unix:/omd/sites/prod/tmp/run/live",
            "timeout": "10s",
        },
        "server": {"listen_address": "127.0.0.1:8080"},
        "log_level": "debug",
    }
