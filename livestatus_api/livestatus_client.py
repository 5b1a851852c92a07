"""Livestatus socket client.

One connection per query: connect, write the request, read the reply
until the core closes the connection. Both the connect and the whole
write/read exchange are bounded by the configured timeout.
"""

import logging
import socket
import time
from typing import Optional, Union

from .config import LivestatusConfig
from .errors import QueryFailedError

RECV_SIZE = 65536
REQUEST_TERMINATOR = "\nOutputFormat: json\n\n"


class LivestatusResponse:
    """Read side of a Livestatus connection.

    The response owns the socket. Use it as a context manager, or call
    :meth:`close`, so the connection is released on every path.
    """

    def __init__(self, sock: socket.socket, deadline: float, address: str):
        self._sock: Optional[socket.socket] = sock
        self._deadline = deadline
        self._address = address
        self.logger = logging.getLogger(__name__)

    def read(self) -> bytes:
        """Read the reply until the server closes the connection.

        Raises:
            QueryFailedError: If reading fails or the deadline passes first.
        """
        if self._sock is None:
            raise QueryFailedError("Response already closed")

        chunks = []
        try:
            while True:
                self._sock.settimeout(_remaining(self._deadline))
                chunk = self._sock.recv(RECV_SIZE)
                if not chunk:
                    break
                chunks.append(chunk)
        except OSError as e:
            self.logger.error(f"Reading reply from livestatus at {self._address} failed: {e}")
            raise QueryFailedError(f"Cannot read from '{self._address}': {e}") from e

        data = b"".join(chunks)
        self.logger.debug(f"Read {len(data)} bytes from livestatus at {self._address}")
        return data

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None

    @property
    def closed(self) -> bool:
        return self._sock is None

    def __enter__(self) -> "LivestatusResponse":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def _remaining(deadline: float) -> float:
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise socket.timeout("deadline exceeded")
    return remaining


class LivestatusClient:
    """Client for the Livestatus query socket."""

    def __init__(self, config: LivestatusConfig):
        self.config = config
        self.family, self.target = config.address
        self.logger = logging.getLogger(__name__)

    def execute(self, query: Union[str, object]) -> LivestatusResponse:
        """Send a query and return the still-open reply stream.

        Args:
            query: Query text without output format and terminator, or an
                object whose ``str()`` renders it

        Returns:
            LivestatusResponse: Reply stream; the caller must close it

        Raises:
            QueryFailedError: If connecting or writing fails or times out.
        """
        text = str(query)
        self.logger.debug(f"Livestatus query to {self.config.socket_path}: {text!r}")

        sock = socket.socket(self.family, socket.SOCK_STREAM)
        try:
            sock.settimeout(self.config.timeout)
            sock.connect(self.target)
            deadline = time.monotonic() + self.config.timeout

            sock.settimeout(_remaining(deadline))
            sock.sendall((text + REQUEST_TERMINATOR).encode("utf-8"))
        except OSError as e:
            sock.close()
            self.logger.error(f"Livestatus query to {self.config.socket_path} failed: {e}")
            raise QueryFailedError(f"Cannot query '{self.config.socket_path}': {e}") from e

        return LivestatusResponse(sock, deadline, self.config.socket_path)

    def query(self, query: Union[str, object]) -> bytes:
        """Execute a query and return the complete raw reply."""
        with self.execute(query) as response:
            return response.read()
