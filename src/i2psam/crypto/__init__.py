"""Encoding and hashing helpers for I2P destinations.

This module provides:
- I2P's base64 variant ("-" and "~" replace "+" and "/")
- Destination hashes (SHA-256 of the binary destination)
- Base32 (.b32.i2p) addresses
"""

import base64
import binascii

from cryptography.hazmat.primitives import hashes

_STANDARD_TO_I2P = str.maketrans("+/", "-~")
_I2P_TO_STANDARD = str.maketrans("-~", "+/")

B32_SUFFIX = ".b32.i2p"


def i2p_b64encode(data: bytes) -> str:
    """
    Encode bytes with the I2P base64 alphabet.

    Args:
        data: Raw bytes

    Returns:
        I2P base64 string (padded)
    """
    return base64.b64encode(data).decode("ascii").translate(_STANDARD_TO_I2P)


def i2p_b64decode(text: str) -> bytes:
    """
    Decode an I2P base64 string.

    Missing padding is tolerated.

    Args:
        text: I2P base64 string

    Returns:
        Decoded bytes

    Raises:
        ValueError: If the text is not valid I2P base64
    """
    text = text.strip()
    if "+" in text or "/" in text:
        raise ValueError("Invalid I2P base64: standard alphabet characters '+' or '/'")

    data = text.translate(_I2P_TO_STANDARD)
    padding = (4 - len(data) % 4) % 4
    if padding:
        data += "=" * padding

    try:
        return base64.b64decode(data, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid I2P base64: {e}") from e


def destination_hash(destination: str) -> bytes:
    """
    Compute the SHA-256 hash of a destination.

    Args:
        destination: I2P base64 encoded destination

    Returns:
        32-byte hash
    """
    digest = hashes.Hash(hashes.SHA256())
    digest.update(i2p_b64decode(destination))
    return digest.finalize()


def base32_address(destination: str) -> str:
    """
    Compute the .b32.i2p address of a destination.

    The address is the lowercase, unpadded base32 encoding of the
    destination hash.

    Args:
        destination: I2P base64 encoded destination

    Returns:
        Address like "<52 chars>.b32.i2p"
    """
    encoded = base64.b32encode(destination_hash(destination)).decode("ascii")
    return encoded.rstrip("=").lower() + B32_SUFFIX
