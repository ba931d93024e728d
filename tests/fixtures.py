"""
Test fixtures for i2psam tests.

This module contains sample SAM replies and a fake socket that replays
scripted reads, records writes and observes close().
"""

from i2psam.crypto import i2p_b64encode
from i2psam.sam.keys import Address, Keys

# Sample destination: 387 bytes is the size of a destination with a null certificate
SAMPLE_DEST_BYTES = bytes(range(256)) + bytes(range(128)) + b"\x00\x00\x00"
SAMPLE_PUB = i2p_b64encode(SAMPLE_DEST_BYTES)
SAMPLE_PRIV = i2p_b64encode(SAMPLE_DEST_BYTES + b"\x42" * 276)
SAMPLE_KEYS = Keys(address=Address(SAMPLE_PUB), private=SAMPLE_PRIV)

HELLO_OK = b"HELLO REPLY RESULT=OK VERSION=3.0\n"
HELLO_NOVERSION = b"HELLO REPLY RESULT=NOVERSION\n"

DEST_REPLY = f"DEST REPLY PUB={SAMPLE_PUB} PRIV={SAMPLE_PRIV}\n".encode()

NAMING_OK = f"NAMING REPLY RESULT=OK NAME=example.i2p VALUE={SAMPLE_PUB}\n".encode()
NAMING_NOT_FOUND = b"NAMING REPLY RESULT=KEY_NOT_FOUND NAME=nonexistent.i2p\n"

SESSION_OK = f"SESSION STATUS RESULT=OK DESTINATION={SAMPLE_PRIV}\n".encode()
SESSION_DUPLICATED_ID = b"SESSION STATUS RESULT=DUPLICATED_ID\n"
SESSION_DUPLICATED_DEST = b"SESSION STATUS RESULT=DUPLICATED_DEST\n"
SESSION_INVALID_KEY = b"SESSION STATUS RESULT=INVALID_KEY\n"
SESSION_I2P_ERROR = b"SESSION STATUS RESULT=I2P_ERROR MESSAGE=tunnel build failed\n"


class FakeSocket:
    """
    Stand-in for a connected TCP socket.

    Args:
        reads: Chunks returned by successive recv() calls; b"" after the
            script runs out (peer closed)
        send_limit: Maximum bytes accepted per send() call (None = all)
    """

    def __init__(self, reads: list[bytes] | None = None, send_limit: int | None = None) -> None:
        self.reads = list(reads or [])
        self.send_limit = send_limit
        self.sent = bytearray()
        self.send_calls = 0
        self.closed = False

    def send(self, data: bytes) -> int:
        self.send_calls += 1
        accepted = len(data) if self.send_limit is None else min(len(data), self.send_limit)
        self.sent += data[:accepted]
        return accepted

    def sendall(self, data: bytes) -> None:
        self.send_calls += 1
        self.sent += data

    def recv(self, bufsize: int) -> bytes:
        if not self.reads:
            return b""
        chunk = self.reads.pop(0)
        if len(chunk) > bufsize:
            self.reads.insert(0, chunk[bufsize:])
            chunk = chunk[:bufsize]
        return chunk

    def close(self) -> None:
        self.closed = True

    @property
    def lines(self) -> list[str]:
        """Sent data split into lines."""
        return self.sent.decode().splitlines()
