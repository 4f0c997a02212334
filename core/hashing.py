"""
core/hashing.py
---------------
Scrypt password hashing engine.

Wraps libsodium's scrypt (through PyNaCl bindings) with:
- Parameter validation before any derivation work
- Salt generation / decoding
- Blocking and asyncio entry points sharing one core routine
- Best-effort clearing of password material

Clearing is a defense-in-depth measure only: CPython cannot wipe immutable
str or bytes objects, and the binding needs an immutable copy of the password.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Iterator, Union
from nacl import bindings
from nacl.exceptions import CryptoError
from core.errors import EncodingError, DerivationFailure
from core.params import ScryptParams, validate_params, get_preset
from core.encoding import (
    bytes_to_hex,
    hex_to_bytes,
    generate_salt,
    timing_safe_equal
)
from core.constants import SCRYPT_BLOCK_UNIT
import asyncio
import logging
import time

logger = logging.getLogger(__name__)

Password = Union[str, bytes, bytearray]


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class HashResult:
    hash: str
    salt: str
    params: ScryptParams
    timestamp: int = field(default_factory=_now_ms)

    def to_dict(self) -> dict:
        return {
            "hash": self.hash,
            "salt": self.salt,
            "params": self.params.to_dict(),
            "timestamp": self.timestamp
        }


def wipe(buffer: bytearray) -> None:
    for i in range(len(buffer)):
        buffer[i] = 0


@contextmanager
def sensitive_buffer(password: Password) -> Iterator[bytearray]:
    """
    Hold password material in a mutable buffer that is zeroed on exit.

    A caller-supplied bytearray is used (and zeroed) in place.

    Args:
        password: str (encoded as UTF-8), bytes or bytearray.

    Yields:
        The bytearray holding the password.
    """
    if isinstance(password, bytearray):
        buffer = password
    elif isinstance(password, bytes):
        buffer = bytearray(password)
    elif isinstance(password, str):
        buffer = bytearray(password, "utf-8")
    else:
        raise TypeError(f"Password must be str, bytes or bytearray, not {type(password).__name__}")

    try:
        yield buffer
    finally:
        wipe(buffer)


def derive_scrypt(password: bytearray, salt: bytes, params: ScryptParams) -> bytes:
    """
    Run the raw scrypt primitive. Parameters must already be validated.

    Args:
        password: Password bytes.
        salt: Salt bytes.
        params: Validated scrypt parameters.

    Returns:
        Derived key of params.dk_len bytes.

    Raises:
        DerivationFailure: If libsodium rejects the parameters or runs out of resources.
    """
    # exact working set (B + V) so PyNaCl's own guard never undercuts validate_params()
    maxmem = SCRYPT_BLOCK_UNIT * params.r * (params.n + 2) + SCRYPT_BLOCK_UNIT * params.r * params.p

    try:
        return bindings.crypto_pwhash_scryptsalsa208sha256_ll(
            bytes(password),
            salt,
            params.n,
            params.r,
            params.p,
            dklen  = params.dk_len,
            maxmem = maxmem
        )
    except (CryptoError, TypeError, MemoryError) as e:
        raise DerivationFailure(f"scrypt derivation failed: {e}") from e


def _resolve_params(params) -> ScryptParams:
    if params is None:
        return get_preset()

    if isinstance(params, dict):
        return ScryptParams.from_dict(params)

    if not isinstance(params, ScryptParams):
        raise TypeError(f"params must be ScryptParams or dict, not {type(params).__name__}")

    validate_params(params)
    return replace(params)


def _hash(password: Password, salt: str = None, params: ScryptParams = None) -> HashResult:
    with sensitive_buffer(password) as buffer:
        params = _resolve_params(params)

        # an absent or empty salt means "generate one"
        generated = not salt
        if generated:
            salt = generate_salt()

        salt_bytes = hex_to_bytes(salt)

        start = time.perf_counter()
        key = derive_scrypt(buffer, salt_bytes, params)
        logger.debug(
            "scrypt derivation finished (N=%d, r=%d, p=%d, dkLen=%d, generated_salt=%s) in %.1fms",
            params.n, params.r, params.p, params.dk_len, generated, (time.perf_counter() - start) * 1000
        )

        return HashResult(hash=bytes_to_hex(key), salt=salt, params=params)


def hash_password(password: Password, salt: str = None, params: ScryptParams = None) -> HashResult:
    """
    Hash a password with scrypt, blocking the calling thread.

    Args:
        password: Password to hash.
        salt: Hex salt to reuse, or None / "" to generate a fresh 32-byte salt.
        params: Scrypt parameters (ScryptParams or wire dict). Defaults to the "standard" preset.

    Returns:
        HashResult with the hex hash, the hex salt, the parameters and a millisecond timestamp.

    Raises:
        ValidationError: If the parameters are out of bounds.
        EncodingError: If the salt is not valid hex.
        DerivationFailure: If the scrypt primitive fails.
    """
    return _hash(password, salt, params)


async def hash_password_async(password: Password, salt: str = None, params: ScryptParams = None) -> HashResult:
    """
    Same as hash_password(), but runs the derivation in a worker thread.

    Cancelling the awaiting task does not stop a derivation that already started.
    """
    return await asyncio.to_thread(_hash, password, salt, params)


def _check_verify_inputs(expected_hash: str, salt: str) -> None:
    if not isinstance(expected_hash, str):
        raise EncodingError(f"Expected hash must be a hex string, got {type(expected_hash).__name__}")

    if not salt:
        raise EncodingError("Salt is required for verification")


def verify_password(password: Password, expected_hash: str, salt: str, params: ScryptParams) -> bool:
    """
    Check a password against a stored hash.

    Args:
        password: Candidate password.
        expected_hash: Stored hex hash.
        salt: Hex salt the stored hash was made with.
        params: Parameters the stored hash was made with.

    Returns:
        True on an exact match, False otherwise.

    Raises:
        ValidationError, EncodingError, DerivationFailure: If the stored record itself is unusable.
            These are never reported as a mismatch.
    """
    with sensitive_buffer(password) as buffer:
        _check_verify_inputs(expected_hash, salt)
        result = _hash(buffer, salt, params)

    return timing_safe_equal(result.hash, expected_hash)


async def verify_password_async(password: Password, expected_hash: str, salt: str, params: ScryptParams) -> bool:
    with sensitive_buffer(password) as buffer:
        _check_verify_inputs(expected_hash, salt)
        result = await hash_password_async(buffer, salt, params)

    return timing_safe_equal(result.hash, expected_hash)
