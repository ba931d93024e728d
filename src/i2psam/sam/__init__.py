"""
SAMv3 protocol engine.

This module implements the SAMv3 control protocol for talking to the
SAM bridge of an I2P router.
"""

from i2psam.sam.connection import DEFAULT_ADDRESS, MAX_WRITE_ATTEMPTS, SamConnection
from i2psam.sam.control import Sam
from i2psam.sam.errors import (
    DuplicateDestination,
    DuplicateSessionID,
    IntegrityError,
    InvalidKey,
    ParseError,
    ProtocolError,
    RemoteError,
    ResolutionError,
    SamError,
    SessionConsumed,
    TransportError,
    UnsupportedVersion,
)
from i2psam.sam.handshake import hello
from i2psam.sam.keys import Address, Keys, generate_keys, parse_dest_reply
from i2psam.sam.naming import lookup, parse_naming_reply
from i2psam.sam.session import Session, SessionRequest, SessionStyle, negotiate

__all__ = [
    # Control
    "Sam",
    "SamConnection",
    "DEFAULT_ADDRESS",
    "MAX_WRITE_ATTEMPTS",
    # Operations
    "hello",
    "generate_keys",
    "parse_dest_reply",
    "lookup",
    "parse_naming_reply",
    "negotiate",
    # Types
    "Address",
    "Keys",
    "Session",
    "SessionRequest",
    "SessionStyle",
    # Errors
    "SamError",
    "TransportError",
    "UnsupportedVersion",
    "ProtocolError",
    "ParseError",
    "DuplicateSessionID",
    "DuplicateDestination",
    "InvalidKey",
    "RemoteError",
    "ResolutionError",
    "IntegrityError",
    "SessionConsumed",
]
