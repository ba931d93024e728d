"""Tests for the SAMv3 version handshake."""

import pytest
from fixtures import HELLO_NOVERSION, HELLO_OK, FakeSocket

from i2psam.sam.connection import SamConnection
from i2psam.sam.errors import ProtocolError, TransportError, UnsupportedVersion
from i2psam.sam.handshake import hello


def test_sends_hello_line() -> None:
    """Test the exact version negotiation command."""
    sock = FakeSocket([HELLO_OK])
    hello(SamConnection(sock, "x:1"))
    assert bytes(sock.sent) == b"HELLO VERSION MIN=3.0 MAX=3.0\n"


def test_unsupported_version() -> None:
    """Test that NOVERSION raises UnsupportedVersion."""
    with pytest.raises(UnsupportedVersion):
        hello(SamConnection(FakeSocket([HELLO_NOVERSION]), "x:1"))


def test_unexpected_reply_carries_raw_text() -> None:
    """Test that other replies raise ProtocolError with the reply attached."""
    reply = b"HELLO REPLY RESULT=I2P_ERROR MESSAGE=shutting down\n"
    with pytest.raises(ProtocolError) as excinfo:
        hello(SamConnection(FakeSocket([reply]), "x:1"))
    assert excinfo.value.reply == reply.decode()


def test_bridge_hangs_up() -> None:
    """Test that a closed stream raises TransportError."""
    with pytest.raises(TransportError):
        hello(SamConnection(FakeSocket([]), "x:1"))
