"""
Password hashing and verification.

Credentials are stored as ``base64(salt) + "." + base64(key)`` where the key
is derived with PBKDF2-HMAC-SHA256 (16-byte random salt, 32-byte key,
100 000 iterations).
"""

from __future__ import annotations

import base64
import binascii
import os
from functools import lru_cache

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.constant_time import bytes_eq
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

SALT_SIZE = 16
KEY_SIZE = 32
ITERATIONS = 100_000


def _derive(secret: bytes, salt: bytes) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=salt,
        iterations=ITERATIONS,
    )
    return kdf.derive(secret)


def hash_password(password: str) -> str:
    """Hash a password with a fresh random salt."""
    if not password:
        raise ValueError("password must not be empty")

    salt = os.urandom(SALT_SIZE)
    key = _derive(password.encode("utf-8"), salt)
    return base64.b64encode(salt).decode("ascii") + "." + base64.b64encode(key).decode("ascii")


def verify_password(stored: str, candidate: str) -> bool:
    """
    Check ``candidate`` against a stored credential.

    Never raises: malformed credentials and empty candidates are ``False``.
    The final comparison is fixed-time.
    """
    if not stored or not stored.strip() or not candidate:
        return False

    parts = stored.split(".")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return False

    try:
        salt = base64.b64decode(parts[0], validate=True)
        expected = base64.b64decode(parts[1], validate=True)
        secret = candidate.encode("utf-8")
    except (binascii.Error, ValueError):
        # UnicodeEncodeError (lone surrogates) is a ValueError
        return False

    return bytes_eq(_derive(secret, salt), expected)


@lru_cache(maxsize=1)
def _decoy_credential() -> str:
    return hash_password(base64.b64encode(os.urandom(24)).decode("ascii"))


def verify_dummy(candidate: str) -> bool:
    """Spend one derivation on a decoy credential; always ``False``."""
    verify_password(_decoy_credential(), candidate or "-")
    return False
