"""SAMv3 version handshake."""

from i2psam import output
from i2psam.sam.connection import SamConnection
from i2psam.sam.errors import ProtocolError, UnsupportedVersion
from i2psam.sam.reply import HELLO_COMMAND, HELLO_REPLY_SIZE, HelloResult, classify_hello


def hello(connection: SamConnection) -> None:
    """
    Negotiate SAM version 3.0 on a fresh connection.

    Args:
        connection: Newly opened connection

    Raises:
        UnsupportedVersion: If the bridge does not speak SAMv3
        ProtocolError: If the reply is anything else
        TransportError: If the connection fails
    """
    output.verbose(f"HELLO VERSION -> {connection.endpoint}")
    connection.send_line(HELLO_COMMAND)
    reply = connection.recv_line(HELLO_REPLY_SIZE)

    result = classify_hello(reply)
    if result == HelloResult.OK:
        output.verbose(f"HELLO REPLY <- {connection.endpoint} (SAMv3)")
        return
    if result == HelloResult.NOVERSION:
        raise UnsupportedVersion("That SAM bridge does not support SAMv3.")
    raise ProtocolError(f"Unexpected HELLO reply: {reply.rstrip()}", reply)
