"""
Control object for a SAM bridge.

A Sam holds the bridge endpoint and one handshaken control connection.
Keys and name lookups go over that connection; sessions are created on
connections of their own.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from types import TracebackType

from i2psam import output
from i2psam.sam.connection import DEFAULT_ADDRESS, SamConnection
from i2psam.sam.errors import SessionConsumed
from i2psam.sam.handshake import hello
from i2psam.sam.keys import Address, Keys, generate_keys
from i2psam.sam.naming import lookup
from i2psam.sam.session import Session, SessionRequest, SessionStyle, negotiate


@dataclass
class Sam:
    """A handshaken control connection to a SAM bridge."""

    address: str
    connection: SamConnection = field(repr=False)
    timeout: float | None = None
    _consumed: bool = field(default=False, repr=False)

    @classmethod
    def connect(cls, address: str = DEFAULT_ADDRESS, timeout: float | None = None) -> Sam:
        """
        Connect to a SAM bridge and negotiate SAMv3.

        Args:
            address: Bridge address as host:port
            timeout: Socket timeout in seconds (None blocks indefinitely)

        Returns:
            Ready-to-use Sam

        Raises:
            TransportError: If the bridge cannot be reached
            UnsupportedVersion: If the bridge does not speak SAMv3
            ProtocolError: If the handshake reply is not understood
        """
        output.explain(f"Connecting to the SAM bridge at {address}")
        connection = SamConnection.connect(address, timeout=timeout)
        try:
            hello(connection)
        except Exception:
            connection.close()
            raise
        return cls(address=address, connection=connection, timeout=timeout)

    @property
    def consumed(self) -> bool:
        """Check if this control object was used to create a session."""
        return self._consumed

    def new_keys(self) -> Keys:
        """
        Generate a new destination on the bridge.

        Only the holder of the private keys can receive messages sent to the
        destination.
        """
        self._check_usable()
        output.explain("Asking the bridge to generate a new destination")
        return generate_keys(self.connection)

    def lookup(self, name: str) -> Address:
        """
        Resolve a name to a destination.

        The router tries its address book, its cache and then the network.
        """
        self._check_usable()
        output.explain(f"Asking the bridge to resolve {name}")
        return lookup(self.connection, name)

    def new_session(
        self,
        style: SessionStyle | str,
        session_id: str,
        keys: Keys,
        options: Sequence[str] = (),
        extras: Sequence[str] = (),
    ) -> Session:
        """
        Create a session on a new connection to the same bridge.

        After a session has been created this Sam is consumed and refuses
        further use. A failed attempt leaves it usable.

        Args:
            style: STREAM, DATAGRAM or RAW
            session_id: Name of the session, unique per bridge
            keys: Destination keys for the session
            options: I2CP and streaming options as KEY=VALUE strings
            extras: Further tokens appended to the command verbatim

        Returns:
            Established Session; the caller owns its connection

        Raises:
            ValueError: If the request is malformed
            SessionConsumed: If this Sam already created a session
            SamError: If the negotiation fails
        """
        self._check_usable()
        request = SessionRequest(
            style=SessionStyle(style),
            session_id=session_id,
            keys=keys,
            options=tuple(options),
            extras=tuple(extras),
        )
        output.explain(f"Creating {request.style.value} session {session_id}")
        session = negotiate(self.address, request, timeout=self.timeout)
        self._consumed = True
        return session

    def close(self) -> None:
        """Close the control connection. Sessions created from it stay open."""
        self.connection.close()

    def _check_usable(self) -> None:
        if self._consumed:
            raise SessionConsumed("This SAM control object was already used to create a session")

    def __enter__(self) -> Sam:
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit - close the control connection."""
        self.close()
