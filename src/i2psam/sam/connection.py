"""
TCP connection to a SAM bridge.

A SamConnection owns one socket. Commands are written as single lines and
replies are read line by line; bytes that arrive after a reply's newline
are kept for the next read.
"""

from __future__ import annotations

import socket
from types import TracebackType

from i2psam import output
from i2psam.sam.errors import ProtocolError, TransportError
from i2psam.sam.reply import redact

DEFAULT_ADDRESS = "127.0.0.1:7656"

# Upper bound on send() calls used to push out one command
MAX_WRITE_ATTEMPTS = 15

_RECV_CHUNK = 4096


def split_endpoint(endpoint: str) -> tuple[str, int]:
    """
    Split a bridge endpoint into host and port.

    Examples:
        localhost:7656 -> ("localhost", 7656)
        [::1]:7656 -> ("::1", 7656)

    Args:
        endpoint: Endpoint in format "host:port" or "[ipv6]:port"

    Returns:
        Tuple of (host, port)

    Raises:
        ValueError: If the host is missing or the port is not 1-65535
    """
    if endpoint.startswith("["):
        host, sep, rest = endpoint[1:].partition("]")
        if not sep:
            raise ValueError(f"Missing ']' in IPv6 endpoint: {endpoint}")
        if not rest.startswith(":"):
            raise ValueError(f"Expected ]:port after IPv6 host: {endpoint}")
        port_str = rest[1:]
    else:
        host, sep, port_str = endpoint.rpartition(":")
        if not sep:
            raise ValueError(f"Endpoint must be host:port: {endpoint}")

    if not host:
        raise ValueError(f"Endpoint has no host: {endpoint}")

    try:
        port = int(port_str)
    except ValueError as e:
        raise ValueError(f"Invalid SAM port: {port_str!r}") from e
    if not 1 <= port <= 65535:
        raise ValueError(f"SAM port out of range (1-65535): {port}")

    return host, port


class SamConnection:
    """A line-oriented connection to a SAM bridge."""

    def __init__(self, sock: socket.socket, endpoint: str) -> None:
        """
        Wrap an already connected socket.

        Args:
            sock: Connected stream socket
            endpoint: The host:port the socket is connected to
        """
        self.endpoint = endpoint
        self._sock = sock
        self._buffer = b""
        self._closed = False

    @classmethod
    def connect(cls, endpoint: str, timeout: float | None = None) -> SamConnection:
        """
        Open a TCP connection to a SAM bridge.

        Args:
            endpoint: Bridge address as host:port
            timeout: Socket timeout in seconds for connect, read and write
                (None blocks indefinitely)

        Returns:
            Connected SamConnection

        Raises:
            ValueError: If the endpoint is malformed
            TransportError: If the connection cannot be established
        """
        host, port = split_endpoint(endpoint)
        output.debug(f"Connecting to SAM bridge at {endpoint}")
        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except OSError as e:
            raise TransportError(f"Unable to connect to SAM bridge at {endpoint}: {e}") from e
        return cls(sock, endpoint)

    @property
    def closed(self) -> bool:
        """Check if the connection has been closed."""
        return self._closed

    @property
    def pending(self) -> bytes:
        """Bytes received after the last reply line and not consumed yet."""
        return self._buffer

    def send_line(self, line: str) -> None:
        """
        Send a single command line with one write.

        Args:
            line: Newline-terminated command

        Raises:
            TransportError: If the write fails
        """
        self._check_open()
        output.debug(f"-> {redact(line.rstrip())}")
        try:
            self._sock.sendall(line.encode("utf-8"))
        except OSError as e:
            raise TransportError(f"Writing to SAM bridge failed: {e}") from e

    def write_all(self, data: bytes, max_attempts: int = MAX_WRITE_ATTEMPTS) -> None:
        """
        Write data, resuming partial writes from the first unwritten byte.

        Args:
            data: Bytes to write
            max_attempts: Maximum number of send() calls

        Raises:
            TransportError: If a write fails or the attempts run out
        """
        self._check_open()
        output.debug(f"-> {redact(data.decode('utf-8', errors='replace').rstrip())}")
        written = 0
        attempts = 0
        while written < len(data):
            if attempts == max_attempts:
                raise TransportError("writing to SAM failed")
            try:
                written += self._sock.send(data[written:])
            except OSError as e:
                raise TransportError(f"Writing to SAM bridge failed: {e}") from e
            attempts += 1

    def recv_line(self, max_size: int) -> str:
        """
        Read one reply line.

        Args:
            max_size: Largest accepted line length in bytes (newline included)

        Returns:
            Decoded line including its trailing newline

        Raises:
            TransportError: If the read fails or the bridge closes the stream
            ProtocolError: If no newline arrives within max_size bytes; the
                connection is closed since the reply boundary is lost
        """
        self._check_open()
        while b"\n" not in self._buffer:
            if len(self._buffer) >= max_size:
                raise self._overflow(max_size, self._buffer)
            try:
                chunk = self._sock.recv(_RECV_CHUNK)
            except OSError as e:
                raise TransportError(f"Reading from SAM bridge failed: {e}") from e
            if not chunk:
                raise TransportError("SAM bridge closed the connection")
            self._buffer += chunk

        end = self._buffer.index(b"\n") + 1
        if end > max_size:
            raise self._overflow(max_size, self._buffer[:end])
        raw, self._buffer = self._buffer[:end], self._buffer[end:]
        line = raw.decode("utf-8", errors="replace")
        output.debug(f"<- {redact(line.rstrip())}")
        return line

    def wait_closed(self) -> None:
        """
        Block until the bridge closes the connection, then close it.

        Incoming data is discarded. Socket timeouts do not end the wait.

        Raises:
            TransportError: If reading fails
        """
        self._check_open()
        self._buffer = b""
        try:
            while True:
                try:
                    chunk = self._sock.recv(_RECV_CHUNK)
                except TimeoutError:
                    continue
                except OSError as e:
                    raise TransportError(f"Reading from SAM bridge failed: {e}") from e
                if not chunk:
                    output.verbose(f"SAM bridge at {self.endpoint} closed the connection")
                    return
                output.debug(f"<- {redact(chunk.decode('utf-8', errors='replace').rstrip())}")
        finally:
            self.close()

    def _overflow(self, max_size: int, raw: bytes) -> ProtocolError:
        self._buffer = b""
        self.close()
        return ProtocolError(
            f"Reply exceeds {max_size} bytes", raw.decode("utf-8", errors="replace")
        )

    def close(self) -> None:
        """Close the connection. Closing twice is harmless."""
        if self._closed:
            return
        self._closed = True
        try:
            self._sock.close()
        except OSError:
            pass

    def _check_open(self) -> None:
        if self._closed:
            raise TransportError("Connection is closed")

    def __enter__(self) -> SamConnection:
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit - close the connection."""
        self.close()
