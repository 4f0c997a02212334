"""
    logic/authentication.py
    ----------
    Implements the double hashing login / registration protocol.

    1. Server issues LoginParams (preset, fresh salt, fresh form token).
    2. Client hashes the password with those params and sends only the client hash.
    3. Server re-hashes the client hash with its own salt and params, and stores that.

    A leaked client hash cannot be replayed against the stored hash without
    repeating the server-side derivation with the server salt.
"""
from dataclasses import dataclass
from core.hashing import (
    Password,
    hash_password,
    hash_password_async,
    verify_password
)
from core.params import ScryptParams, get_preset, resolve_level
from core.encoding import (
    generate_salt,
    generate_form_token,
    hex_to_bytes,
    timing_safe_equal
)
from core.errors import ValidationError
from core.constants import (
    SCRYPT_ALGORITHM,
    SUPPORTED_ALGORITHMS,
    SALT_LEN,
    FORM_TOKEN_LEN
)
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginParams:
    algorithm: str
    params: ScryptParams
    salt: str
    form_token: str

    def to_dict(self) -> dict:
        return {
            "algorithm": self.algorithm,
            "params": self.params.to_dict(),
            "salt": self.salt,
            "formToken": self.form_token
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LoginParams":
        """
        Parse login parameters received from a server.

        Args:
            data (dict): Decoded JSON with "algorithm", "params", "salt" and "formToken".

        Returns:
            LoginParams with validated scrypt parameters.

        Raises:
            ValidationError: If the algorithm is unsupported or the params are out of bounds.
            EncodingError: If the salt or form token is missing or not hex.
        """
        if not isinstance(data, dict):
            raise ValidationError("login_params", "expected an object")

        required_keys = ["algorithm", "params", "salt", "formToken"]
        missing = [k for k in required_keys if k not in data]
        if missing:
            raise ValidationError("login_params", f"missing keys: {', '.join(missing)}")

        if data["algorithm"] not in SUPPORTED_ALGORITHMS:
            raise ValidationError("algorithm", f"unsupported algorithm {data['algorithm']!r}")

        params = ScryptParams.from_dict(data["params"])

        hex_to_bytes(data["salt"])

        hex_to_bytes(data["formToken"])

        return cls(
            algorithm  = data["algorithm"],
            params     = params,
            salt       = data["salt"],
            form_token = data["formToken"]
        )


def create_login_params(level=None) -> LoginParams:
    """
    Issue parameters for one login or registration attempt.

    Args:
        level: SecurityLevel or its name. Defaults to "standard".

    Returns:
        LoginParams with a fresh 32-byte salt and a fresh 16-byte form token.
    """
    level = resolve_level(level)
    login_params = LoginParams(
        algorithm  = SCRYPT_ALGORITHM,
        params     = get_preset(level),
        salt       = generate_salt(),
        form_token = generate_form_token()
    )

    logger.debug("Issued login params (level=%s, salt_len=%d, token_len=%d)", level.value, SALT_LEN, FORM_TOKEN_LEN)
    return login_params


def client_hash_password(password: Password, salt: str, params: ScryptParams) -> str:
    """
    Client side: derive the value sent to the server instead of the password.

    Args:
        password: User's password.
        salt: Hex salt from the server's LoginParams.
        params: Scrypt parameters from the server's LoginParams.

    Returns:
        Hex encoded client hash.
    """
    return hash_password(password, salt, params).hash


async def client_hash_password_async(password: Password, salt: str, params: ScryptParams) -> str:
    result = await hash_password_async(password, salt, params)
    return result.hash


def server_hash_password(client_hash: str, server_salt: str, params: ScryptParams = None) -> str:
    """
    Server side: derive the storage hash from a client hash.

    The client hash is the "password" of a second, independent scrypt pass.

    Args:
        client_hash: Hex client hash received from the client.
        server_salt: Server-controlled hex salt (not the client-phase salt).
        params: Server-controlled parameters. Defaults to the "standard" preset.

    Returns:
        Hex encoded hash for storage.
    """
    return hash_password(client_hash, server_salt, params).hash


async def server_hash_password_async(client_hash: str, server_salt: str, params: ScryptParams = None) -> str:
    result = await hash_password_async(client_hash, server_salt, params)
    return result.hash


def verify_server_hash(client_hash: str, stored_hash: str, server_salt: str, params: ScryptParams = None) -> bool:
    """
    Server side: check a login attempt's client hash against the stored hash.

    Args:
        client_hash: Hex client hash from the login attempt.
        stored_hash: Hex hash stored at registration.
        server_salt: Server salt stored at registration.
        params: Server params stored at registration. Defaults to the "standard" preset.

    Returns:
        True if the client hash reproduces the stored hash.

    Raises:
        ValidationError, EncodingError, DerivationFailure: If the stored record is malformed.
    """
    if params is None:
        params = get_preset()

    matched = verify_password(client_hash, stored_hash, server_salt, params)
    if not matched:
        logger.info("Login attempt rejected: client hash does not match stored hash")

    return matched


def verify_form_token(issued: str, received: str) -> bool:
    if not issued or not isinstance(received, str):
        return False

    return timing_safe_equal(issued, received)
