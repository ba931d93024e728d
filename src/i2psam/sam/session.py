"""
Session creation (SESSION CREATE).

Every session gets its own connection to the bridge: the bridge ties a
session to the connection that created it, so the negotiator opens a fresh
one, handshakes on it, creates the session and hands the connection to the
caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import TracebackType

from i2psam import output
from i2psam.sam.connection import SamConnection
from i2psam.sam.errors import (
    DuplicateDestination,
    DuplicateSessionID,
    IntegrityError,
    InvalidKey,
    ParseError,
    RemoteError,
)
from i2psam.sam.handshake import hello
from i2psam.sam.keys import Keys
from i2psam.sam.reply import SESSION_REPLY_SIZE, SessionStatus, classify_session_status


class SessionStyle(str, Enum):
    """Transport style of a session."""

    STREAM = "STREAM"
    DATAGRAM = "DATAGRAM"
    RAW = "RAW"


def _check_token(kind: str, value: str) -> None:
    if not value or any(c.isspace() for c in value):
        raise ValueError(f"Invalid {kind}: {value!r}")


@dataclass(frozen=True)
class SessionRequest:
    """Everything needed to build one SESSION CREATE command."""

    style: SessionStyle
    session_id: str
    keys: Keys
    options: tuple[str, ...] = ()
    extras: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "style", SessionStyle(self.style))
        object.__setattr__(self, "options", tuple(self.options))
        object.__setattr__(self, "extras", tuple(self.extras))
        _check_token("session id", self.session_id)
        for option in self.options:
            _check_token("option", option)
        for extra in self.extras:
            _check_token("extra argument", extra)

    def command(self) -> str:
        """
        Build the SESSION CREATE line.

        Options become OPTION=<opt> tokens in order, followed by the extra
        tokens verbatim.
        """
        tokens = [
            "SESSION CREATE",
            f"STYLE={self.style.value}",
            f"ID={self.session_id}",
            f"DESTINATION={self.keys}",
        ]
        tokens.extend(f"OPTION={option}" for option in self.options)
        tokens.extend(self.extras)
        return " ".join(tokens) + "\n"


@dataclass
class Session:
    """
    An established session.

    The caller owns the connection; closing the session closes it and the
    bridge tears the session down.
    """

    session_id: str
    style: SessionStyle
    keys: Keys
    connection: SamConnection = field(repr=False)

    @property
    def is_open(self) -> bool:
        """Check if the session connection has not been closed on this side."""
        return not self.connection.closed

    def wait_closed(self) -> None:
        """Block until the bridge tears the session down, then close it."""
        self.connection.wait_closed()

    def close(self) -> None:
        """Close the session connection."""
        self.connection.close()

    def __enter__(self) -> Session:
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit - close the session."""
        self.close()


def check_session_reply(reply: str, keys: Keys) -> None:
    """
    Map a SESSION STATUS reply to success or an exception.

    Args:
        reply: Raw reply text
        keys: Keys that were requested

    Raises:
        IntegrityError: If the bridge echoed different keys
        DuplicateSessionID: If the session id is taken
        DuplicateDestination: If the destination is in use
        InvalidKey: If the bridge rejected the keys
        RemoteError: If the bridge reported an I2P error
        ParseError: If the reply is not a known SESSION STATUS
    """
    status, detail = classify_session_status(reply)
    if status == SessionStatus.OK:
        if detail != str(keys):
            raise IntegrityError("bridge created a tunnel with different keys than requested")
        return
    if status == SessionStatus.DUPLICATED_ID:
        raise DuplicateSessionID("Duplicate tunnel name")
    if status == SessionStatus.DUPLICATED_DEST:
        raise DuplicateDestination("Duplicate destination")
    if status == SessionStatus.INVALID_KEY:
        raise InvalidKey("Invalid key")
    if status == SessionStatus.I2P_ERROR:
        raise RemoteError(detail)
    raise ParseError(f"Unable to parse SAMv3 reply: {reply.rstrip()}", reply)


def negotiate(endpoint: str, request: SessionRequest, timeout: float | None = None) -> Session:
    """
    Create a session on a new connection to the bridge.

    Args:
        endpoint: Bridge address as host:port
        request: What to create
        timeout: Socket timeout in seconds (None blocks indefinitely)

    Returns:
        Established Session owning the new connection

    Raises:
        SamError: Any transport, handshake or SESSION STATUS failure; the new
            connection is closed before the error propagates
    """
    connection = SamConnection.connect(endpoint, timeout=timeout)
    try:
        hello(connection)
        output.verbose(
            f"SESSION CREATE -> STYLE={request.style.value} ID={request.session_id} "
            f"({len(request.options)} options)"
        )
        connection.write_all(request.command().encode("utf-8"))
        check_session_reply(connection.recv_line(SESSION_REPLY_SIZE), request.keys)
    except Exception:
        connection.close()
        raise

    output.verbose(f"SESSION STATUS <- {request.session_id} created")
    return Session(
        session_id=request.session_id,
        style=request.style,
        keys=request.keys,
        connection=connection,
    )
