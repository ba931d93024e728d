"""
i2psam - A client for the SAMv3 bridge of an I2P router.

i2psam talks the SAMv3 text control protocol: it negotiates the protocol
version, generates destinations, resolves names and creates sessions.
"""

__version__ = "0.1.0"
