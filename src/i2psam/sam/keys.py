"""
Destinations and their keys.

A destination is the public identity of an I2P endpoint. The bridge hands
out its keys as two I2P base64 strings: PUB (the destination) and PRIV (the
destination followed by its private and signing private keys).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from i2psam import output
from i2psam.crypto import base32_address
from i2psam.sam.connection import SamConnection
from i2psam.sam.errors import ParseError
from i2psam.sam.reply import DEST_GENERATE_COMMAND, DEST_REPLY_SIZE, tokenize


@dataclass(frozen=True)
class Address:
    """A public I2P destination (I2P base64)."""

    destination: str

    @property
    def base32(self) -> str:
        """Get the .b32.i2p form of this destination."""
        return base32_address(self.destination)

    def __str__(self) -> str:
        return self.destination


@dataclass(frozen=True)
class Keys:
    """
    A destination together with its private keys.

    The private blob already embeds the public destination, so it is the
    complete serialization of the pair. It is what SESSION CREATE expects
    as its DESTINATION argument.
    """

    address: Address
    private: str = field(repr=False)

    def __str__(self) -> str:
        return self.private

    def to_dict(self) -> dict[str, str]:
        """Convert to a JSON-serializable dict."""
        return {"public": self.address.destination, "private": self.private}

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> Keys:
        """
        Build keys from a dict produced by to_dict().

        Raises:
            ValueError: If a field is missing or empty
        """
        public = data.get("public")
        private = data.get("private")
        if not public or not private:
            raise ValueError("Keys need both 'public' and 'private' fields")
        return cls(address=Address(public), private=private)


def parse_dest_reply(reply: str) -> Keys:
    """
    Parse a DEST REPLY line.

    Args:
        reply: Raw reply, e.g. "DEST REPLY PUB=... PRIV=...\\n"

    Returns:
        Parsed Keys

    Raises:
        ParseError: On an unknown token or if PUB or PRIV is missing
    """
    public: str | None = None
    private: str | None = None

    for token in tokenize(reply):
        if token in ("DEST", "REPLY"):
            continue
        if token.startswith("PUB="):
            public = token[len("PUB=") :]
        elif token.startswith("PRIV="):
            private = token[len("PRIV=") :]
        else:
            raise ParseError("Failed to parse keys.", reply)

    if not public or not private:
        raise ParseError("Failed to parse keys: reply lacks PUB or PRIV.", reply)

    return Keys(address=Address(public), private=private)


def generate_keys(connection: SamConnection) -> Keys:
    """
    Ask the bridge for a new destination.

    Args:
        connection: Handshaken control connection

    Returns:
        Newly generated Keys

    Raises:
        ParseError: If the reply cannot be parsed
        TransportError: If the connection fails
    """
    output.verbose("DEST GENERATE ->")
    connection.send_line(DEST_GENERATE_COMMAND)
    keys = parse_dest_reply(connection.recv_line(DEST_REPLY_SIZE))
    output.verbose(f"DEST REPLY <- {keys.address.destination[:16]}...")
    return keys
