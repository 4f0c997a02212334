"""
core/params.py
--------------
Scrypt cost parameters, their validation rules, and the security level presets.

Implements:
- ScryptParams with wire (de)serialization
- Parameter validation (range bounds and memory ceiling)
- SecurityLevel enumeration and copy-returning preset accessors
"""

from dataclasses import dataclass
from enum import Enum
from core.errors import ValidationError
from core.constants import (
    SCRYPT_MIN_N,
    SCRYPT_MAX_N,
    SCRYPT_MIN_R,
    SCRYPT_MAX_R,
    SCRYPT_MIN_P,
    SCRYPT_MAX_P,
    SCRYPT_MIN_DKLEN,
    SCRYPT_MAX_DKLEN,
    SCRYPT_BLOCK_UNIT,
    SCRYPT_MAX_MEMORY_BYTES,
    SCRYPT_PRESETS,
    SECURITY_LEVEL_DEVELOPMENT,
    SECURITY_LEVEL_STANDARD,
    SECURITY_LEVEL_HIGH,
    SECURITY_LEVEL_PARANOID,
    DEFAULT_SECURITY_LEVEL
)


class SecurityLevel(str, Enum):
    DEVELOPMENT = SECURITY_LEVEL_DEVELOPMENT
    STANDARD    = SECURITY_LEVEL_STANDARD
    HIGH        = SECURITY_LEVEL_HIGH
    PARANOID    = SECURITY_LEVEL_PARANOID


@dataclass
class ScryptParams:
    n: int
    r: int
    p: int
    dk_len: int

    def memory_bytes(self) -> int:
        """Approximate scrypt working set in bytes (128 * N * r)."""
        return SCRYPT_BLOCK_UNIT * self.n * self.r

    def validate(self) -> None:
        validate_params(self)

    def to_dict(self) -> dict:
        return {"N": self.n, "r": self.r, "p": self.p, "dkLen": self.dk_len}

    @classmethod
    def from_dict(cls, data: dict) -> "ScryptParams":
        """
        Build and validate parameters received over the wire.

        Args:
            data: Mapping with the keys "N", "r", "p" and "dkLen".

        Returns:
            A validated ScryptParams.

        Raises:
            ValidationError: If a key is missing, a value is not an integer, or a bound is violated.
        """
        if not isinstance(data, dict):
            raise ValidationError("params", "expected an object with N, r, p and dkLen")

        values = {}
        for key in ("N", "r", "p", "dkLen"):
            if key not in data:
                raise ValidationError(key, "missing")

            value = data[key]
            # bool is an int subclass, but True is never a sensible cost.
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValidationError(key, f"must be an integer, got {type(value).__name__}")

            values[key] = value

        params = cls(n=values["N"], r=values["r"], p=values["p"], dk_len=values["dkLen"])
        validate_params(params)
        return params


def _check_range(field: str, value: int, low: int, high: int) -> None:
    if value < low or value > high:
        raise ValidationError(field, f"must be between {low} and {high}, got {value}")


def validate_params(params: ScryptParams) -> None:
    """
    Check scrypt parameters against the allowed bounds.

    Checks run in a fixed order and the first failure is raised:
    N power of two, N range, r range, p range, dkLen range, memory ceiling.

    Args:
        params: Parameters to check.

    Raises:
        ValidationError: Naming the violated field.
    """
    n = params.n
    if n <= 0 or (n & (n - 1)) != 0:
        raise ValidationError("N", f"must be a power of 2, got {n}")

    _check_range("N", n, SCRYPT_MIN_N, SCRYPT_MAX_N)
    _check_range("r", params.r, SCRYPT_MIN_R, SCRYPT_MAX_R)
    _check_range("p", params.p, SCRYPT_MIN_P, SCRYPT_MAX_P)
    _check_range("dkLen", params.dk_len, SCRYPT_MIN_DKLEN, SCRYPT_MAX_DKLEN)

    memory_required = params.memory_bytes()
    if memory_required > SCRYPT_MAX_MEMORY_BYTES:
        raise ValidationError(
            "memory",
            f"requirement ({round(memory_required / 1024 / 1024)}MB) exceeds limit ({SCRYPT_MAX_MEMORY_BYTES // 1024 // 1024}MB)"
        )


def resolve_level(level=None) -> SecurityLevel:
    """Turn a level name (or None for the default) into a SecurityLevel."""
    if level is None:
        level = DEFAULT_SECURITY_LEVEL

    try:
        return SecurityLevel(level)
    except ValueError:
        allowed = ", ".join(member.value for member in SecurityLevel)
        raise ValidationError("level", f"unknown security level {level!r}, expected one of: {allowed}") from None


def get_preset(level=None) -> ScryptParams:
    """
    Get scrypt parameters for a security level.

    Every call returns a new object, so callers may modify the result freely.

    Args:
        level: SecurityLevel or its string value. Defaults to "standard".

    Returns:
        A fresh ScryptParams.
    """
    n, r, p, dk_len = SCRYPT_PRESETS[resolve_level(level).value]
    return ScryptParams(n=n, r=r, p=p, dk_len=dk_len)


def list_presets() -> dict:
    return {level: get_preset(level) for level in SecurityLevel}
