"""
Name resolution (NAMING LOOKUP).

A NAMING REPLY carries an unordered bag of tokens. Each token is matched
against a fixed table and either skipped, appended to the error message,
returned as the result, or rejected.
"""

from enum import Enum, auto

from i2psam import output
from i2psam.sam.connection import SamConnection
from i2psam.sam.errors import ParseError, ResolutionError
from i2psam.sam.keys import Address
from i2psam.sam.reply import NAMING_REPLY_HEADER, NAMING_REPLY_SIZE, tokenize


class LookupAction(Enum):
    """What to do with a token of a NAMING REPLY."""

    SKIP = auto()  # Match and continue
    ACCUMULATE = auto()  # Append text to the error message and continue
    RESOLVE = auto()  # Match and return the address
    REJECT = auto()  # Unknown token


def _exact_tokens(name: str) -> dict[str, tuple[LookupAction, str]]:
    return {
        "RESULT=OK": (LookupAction.SKIP, ""),
        "RESULT=INVALID_KEY": (LookupAction.ACCUMULATE, "Invalid key."),
        "RESULT=KEY_NOT_FOUND": (LookupAction.ACCUMULATE, f"Unable to resolve {name}"),
        f"NAME={name}": (LookupAction.SKIP, ""),
    }


_PREFIX_TOKENS = (
    ("VALUE=", LookupAction.RESOLVE, ""),
    ("MESSAGE=", LookupAction.ACCUMULATE, " "),
)


def classify_token(token: str, name: str) -> tuple[LookupAction, str]:
    """
    Classify one token of a NAMING REPLY.

    Args:
        token: Reply token
        name: The name that was looked up

    Returns:
        Tuple of (action, text) where text is the address for RESOLVE and
        the message fragment for ACCUMULATE
    """
    exact = _exact_tokens(name).get(token)
    if exact is not None:
        return exact
    for prefix, action, lead in _PREFIX_TOKENS:
        if token.startswith(prefix):
            return action, lead + token[len(prefix) :]
    return LookupAction.REJECT, ""


def parse_naming_reply(reply: str, name: str) -> Address:
    """
    Parse a NAMING REPLY line.

    The first VALUE= token wins, whatever error text came before it.

    Args:
        reply: Raw reply text
        name: The name that was looked up

    Returns:
        Resolved Address

    Raises:
        ParseError: If the header is missing or a token is unknown
        ResolutionError: If the reply carries no VALUE= token
    """
    try:
        tokens = tokenize(reply, header=NAMING_REPLY_HEADER)
    except ValueError as e:
        raise ParseError("Failed to parse.", reply) from e

    message = ""
    for token in tokens:
        action, text = classify_token(token, name)
        if action == LookupAction.SKIP:
            continue
        if action == LookupAction.ACCUMULATE:
            message += text
        elif action == LookupAction.RESOLVE:
            return Address(text)
        else:
            raise ParseError("failed to parse lookup reply", reply)

    raise ResolutionError(message)


def lookup(connection: SamConnection, name: str) -> Address:
    """
    Resolve a name (e.g. "example.i2p" or a .b32.i2p address).

    Args:
        connection: Handshaken control connection
        name: Name to resolve

    Returns:
        Resolved Address

    Raises:
        ValueError: If the name is empty or contains whitespace
        ParseError: If the reply cannot be parsed
        ResolutionError: If the bridge could not resolve the name
        TransportError: If the connection fails
    """
    if not name or any(c.isspace() for c in name):
        raise ValueError(f"Invalid name: {name!r}")

    output.verbose(f"NAMING LOOKUP -> {name}")
    connection.send_line(f"NAMING LOOKUP NAME={name}\n")
    address = parse_naming_reply(connection.recv_line(NAMING_REPLY_SIZE), name)
    output.verbose(f"NAMING REPLY <- {name} resolved")
    return address
