"""
SAMv3 reply grammar.

Replies are single newline-terminated lines made of whitespace-separated
tokens. Some commands are answered with fixed literal lines, others with a
header followed by an unordered bag of KEY=VALUE tokens.

See: https://geti2p.net/en/docs/api/samv3
"""

import re
from enum import Enum, auto

# HELLO
HELLO_COMMAND = "HELLO VERSION MIN=3.0 MAX=3.0\n"
HELLO_OK = "HELLO REPLY RESULT=OK VERSION=3.0\n"
HELLO_NOVERSION = "HELLO REPLY RESULT=NOVERSION\n"

# DEST GENERATE
DEST_GENERATE_COMMAND = "DEST GENERATE\n"

# NAMING LOOKUP
NAMING_REPLY_HEADER = "NAMING REPLY "

# SESSION CREATE
SESSION_OK = "SESSION STATUS RESULT=OK DESTINATION="
SESSION_DUPLICATED_ID = "SESSION STATUS RESULT=DUPLICATED_ID\n"
SESSION_DUPLICATED_DEST = "SESSION STATUS RESULT=DUPLICATED_DEST\n"
SESSION_INVALID_KEY = "SESSION STATUS RESULT=INVALID_KEY\n"
SESSION_I2P_ERROR = "SESSION STATUS RESULT=I2P_ERROR MESSAGE="

# Largest reply line accepted for each command
HELLO_REPLY_SIZE = 256
DEST_REPLY_SIZE = 8192
NAMING_REPLY_SIZE = 4096
SESSION_REPLY_SIZE = 4096

# Tokens whose values are (or embed) private key material
_SECRET_TOKEN = re.compile(r"\b(PRIV|DESTINATION)=\S+")


class HelloResult(Enum):
    """Outcome of the version handshake."""

    OK = auto()
    NOVERSION = auto()
    UNKNOWN = auto()


class SessionStatus(Enum):
    """Outcome of SESSION CREATE."""

    OK = auto()
    DUPLICATED_ID = auto()
    DUPLICATED_DEST = auto()
    INVALID_KEY = auto()
    I2P_ERROR = auto()
    UNKNOWN = auto()


def tokenize(reply: str, header: str = "") -> list[str]:
    """
    Split a reply into whitespace-delimited tokens.

    Args:
        reply: Raw reply text
        header: Fixed prefix to strip before splitting; the reply must
            start with it and carry something after it

    Returns:
        List of tokens (without the header)

    Raises:
        ValueError: If the reply does not carry the header
    """
    if header:
        if len(reply) <= len(header) or not reply.startswith(header):
            raise ValueError(f"Reply does not start with {header!r}")
        reply = reply[len(header) :]
    return reply.split()


def classify_hello(reply: str) -> HelloResult:
    """Classify a HELLO reply. Every input maps to exactly one result."""
    if reply == HELLO_OK:
        return HelloResult.OK
    if reply == HELLO_NOVERSION:
        return HelloResult.NOVERSION
    return HelloResult.UNKNOWN


def classify_session_status(reply: str) -> tuple[SessionStatus, str]:
    """
    Classify a SESSION STATUS reply.

    Args:
        reply: Raw reply text

    Returns:
        Tuple of (status, detail) where detail is the echoed destination for
        OK (trailing newline removed), the bridge message for I2P_ERROR, the
        raw reply for UNKNOWN and an empty string otherwise
    """
    if reply.startswith(SESSION_OK):
        return SessionStatus.OK, reply[len(SESSION_OK) :].rstrip("\n")
    if reply == SESSION_DUPLICATED_ID:
        return SessionStatus.DUPLICATED_ID, ""
    if reply == SESSION_DUPLICATED_DEST:
        return SessionStatus.DUPLICATED_DEST, ""
    if reply == SESSION_INVALID_KEY:
        return SessionStatus.INVALID_KEY, ""
    if reply.startswith(SESSION_I2P_ERROR):
        return SessionStatus.I2P_ERROR, reply[len(SESSION_I2P_ERROR) :].rstrip("\n")
    return SessionStatus.UNKNOWN, reply


def redact(line: str) -> str:
    """Hide private key material in a protocol line before it is printed."""
    return _SECRET_TOKEN.sub(r"\1=<redacted>", line)
