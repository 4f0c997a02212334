"""
core/capabilities.py
--------------------
Environment capability probing and hashing time estimation.

Both are advisory: results feed warnings and parameter guidance, never
the correctness of hashing itself.
"""

from typing import NamedTuple
from nacl.pwhash import scrypt as nacl_scrypt
from core.params import ScryptParams, get_preset, resolve_level
from core.constants import (
    ESTIMATE_BASE_TIME_MS,
    ESTIMATE_BASE_N,
    ESTIMATE_BASE_R
)
import os
import sys
import logging

logger = logging.getLogger(__name__)

# interpreters hosted inside a browser / sandboxed runtime
CLIENT_PLATFORMS = ("emscripten", "wasi")


class Capabilities(NamedTuple):
    secure_hash_api_available: bool
    running_in_secure_context: bool
    server_environment: bool
    client_environment: bool


def _has_secure_random() -> bool:
    try:
        os.urandom(1)
    except NotImplementedError:
        return False
    return True


def detect_capabilities() -> Capabilities:
    client = sys.platform in CLIENT_PLATFORMS
    return Capabilities(
        secure_hash_api_available = bool(nacl_scrypt.AVAILABLE),
        running_in_secure_context = _has_secure_random(),
        server_environment        = not client,
        client_environment        = client
    )


def environment_status(capabilities: Capabilities = None) -> dict:
    """
    Summarize capabilities with recommendations for anything missing.

    Args:
        capabilities: Pre-computed capabilities; probed when omitted.

    Returns:
        dict with every capability flag, plus:
            - "is_secure" (bool): scrypt and a secure random source are both present.
            - "recommendations" (list[str]): one entry per missing capability.
    """
    if capabilities is None:
        capabilities = detect_capabilities()

    recommendations = []
    if not capabilities.secure_hash_api_available:
        recommendations.append("scrypt is not available in this libsodium build, install the full PyNaCl wheel")

    if not capabilities.running_in_secure_context:
        recommendations.append("No OS random source available, salts and form tokens cannot be generated safely")

    status = capabilities._asdict()
    status["is_secure"] = capabilities.secure_hash_api_available and capabilities.running_in_secure_context
    status["recommendations"] = recommendations
    return status


def warn_if_insecure(capabilities: Capabilities = None) -> bool:
    status = environment_status(capabilities)
    for recommendation in status["recommendations"]:
        logger.warning("Insecure hashing environment: %s", recommendation)

    return status["is_secure"]


def estimate_time_ms(params: ScryptParams) -> int:
    """
    Rough wall-clock estimate for one derivation.

    Linear in N, r and p relative to N=2^16, r=8, p=1 taking ~200ms.
    Real timings depend on hardware.

    Args:
        params: Scrypt parameters.

    Returns:
        Estimated milliseconds, rounded to the nearest integer.
    """
    time_ms = ESTIMATE_BASE_TIME_MS * (params.n / ESTIMATE_BASE_N) * (params.r / ESTIMATE_BASE_R) * params.p
    # round half up, not Python's banker's rounding
    return int(time_ms + 0.5)


def describe_preset(level=None) -> dict:
    params = get_preset(level)
    return {"level": resolve_level(level).value, "params": params.to_dict(), "estimated_ms": estimate_time_ms(params), "memory_bytes": params.memory_bytes()}
