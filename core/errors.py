"""
core/errors.py
--------------
Exception types raised by the hashing stack.

Messages carry enough detail to fix a call site, but never any password,
client hash or derived key material.
"""


class ValidationError(ValueError):
    """
    A scrypt parameter (or security level) is outside its allowed range.

    Attributes:
        field: Name of the offending field ("N", "r", "p", "dkLen", "memory", "level", ...).
        reason: Human readable explanation of the violated bound.
    """
    def __init__(self, field: str, reason: str):
        self.field  = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


class EncodingError(ValueError):
    """Malformed hex input (odd length, non-hex characters, wrong type)."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class DerivationFailure(RuntimeError):
    """The underlying scrypt primitive failed. The original error is chained as __cause__."""
