"""
NIP-19 npub encoding of actor public keys.
"""
import re

from bech32 import bech32_encode, convertbits

from dm_archive.core.errors import EncodingError

NPUB_PREFIX = "npub"
PUBKEY_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")


def encode_npub(pubkey_hex: str) -> str:
    """
    Encode a hex public key as an npub.
    
    Every valid input yields a 63 character string, so no npub is a
    prefix of another.
    
    Raises:
        EncodingError: if the input is not 32 bytes of hex
    """
    if not isinstance(pubkey_hex, str) or not PUBKEY_PATTERN.match(pubkey_hex):
        raise EncodingError()
    
    data = convertbits(bytes.fromhex(pubkey_hex), 8, 5)
    encoded = bech32_encode(NPUB_PREFIX, data) if data is not None else None
    if not encoded:
        raise EncodingError()
    return encoded
