"""
core/encoding.py
----------------
Hex encoding, secure random material, and timing-safe comparison.
"""

import secrets
import string
from core.errors import EncodingError
from core.constants import (
    SALT_LEN,
    FORM_TOKEN_LEN
)

_HEX_DIGITS = frozenset(string.hexdigits)


def bytes_to_hex(data: bytes) -> str:
    """Lowercase hex, two digits per byte, no separators."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise EncodingError(f"Cannot hex encode {type(data).__name__}, expected bytes")

    return data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Decode a hex string.

    Args:
        hex_str: Even-length string of hex digits (either case).

    Returns:
        Decoded bytes.

    Raises:
        EncodingError: If the input is not a string, has odd length, or contains non-hex characters.
    """
    if not isinstance(hex_str, str):
        raise EncodingError(f"Invalid hex string: expected str, got {type(hex_str).__name__}")

    if len(hex_str) % 2 != 0:
        raise EncodingError("Invalid hex string: odd length")

    # bytes.fromhex() would silently skip whitespace
    if not _HEX_DIGITS.issuperset(hex_str):
        raise EncodingError("Invalid hex string: non-hex character")

    return bytes.fromhex(hex_str)


def generate_salt() -> str:
    """32 random bytes from the OS CSPRNG, hex encoded (64 characters)."""
    return bytes_to_hex(secrets.token_bytes(SALT_LEN))


def generate_form_token() -> str:
    """16 random bytes from the OS CSPRNG, hex encoded (32 characters)."""
    return bytes_to_hex(secrets.token_bytes(FORM_TOKEN_LEN))


def timing_safe_equal(a: str, b: str) -> bool:
    """
    Compare two secrets without leaking where they first differ.

    Length differences return False immediately; only the content is protected.

    Args:
        a: First string.
        b: Second string.

    Returns:
        True if both strings are identical.
    """
    if len(a) != len(b):
        return False

    result = 0
    for x, y in zip(a, b):
        result |= ord(x) ^ ord(y)

    return result == 0
