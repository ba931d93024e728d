"""
Exceptions raised by the SAM protocol engine.

Every failure is reported to the caller immediately; nothing is retried.
"""


class SamError(Exception):
    """Base error for SAM bridge communication."""


class TransportError(SamError):
    """Connecting to, reading from or writing to the bridge failed."""


class UnsupportedVersion(SamError):
    """The bridge does not speak SAMv3."""


class ProtocolError(SamError):
    """
    The bridge sent a reply that matches no known reply shape.

    Attributes:
        reply: The raw reply text (may be empty)
    """

    def __init__(self, message: str, reply: str = "") -> None:
        super().__init__(message)
        self.reply = reply


class ParseError(ProtocolError):
    """A reply could not be parsed into its fields."""


class DuplicateSessionID(SamError):
    """A session with the requested id already exists on the bridge."""


class DuplicateDestination(SamError):
    """The requested destination is already in use by another session."""


class InvalidKey(SamError):
    """The bridge rejected the destination keys."""


class RemoteError(SamError):
    """
    The bridge reported a failure.

    Attributes:
        message: Message text sent by the bridge (may be empty)
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ResolutionError(RemoteError):
    """A name lookup did not produce an address."""


class IntegrityError(SamError):
    """The bridge created a session with keys other than the requested ones."""


class SessionConsumed(SamError):
    """The control object was already used to create a session."""
