"""
Password Hasher

Salted scrypt hashing with constant-time verification.
Stored form is "<hex derived key>.<hex salt>".
"""

import hashlib
import hmac
import logging
import secrets

logger = logging.getLogger(__name__)

SEPARATOR = "."


class HashingError(Exception):
    """Raised when a hash cannot be derived; aborts the surrounding operation"""


class PasswordHasher:
    """
    Memory-hard password hashing.

    Business Rules:
    - Fresh random salt for every hash() call
    - Stored form contains exactly one separator between hash and salt
    - verify() compares in constant time and fails closed on malformed input
    """

    def __init__(
        self,
        n: int = 2**14,
        r: int = 8,
        p: int = 1,
        dklen: int = 64,
        salt_bytes: int = 16,
    ):
        self.n = n
        self.r = r
        self.p = p
        self.dklen = dklen
        self.salt_bytes = salt_bytes

    def _derive(self, plaintext: str, salt: str) -> bytes:
        # maxmem must cover 128 * r * (n + p + 2) bytes or OpenSSL refuses
        maxmem = 128 * self.r * (self.n + self.p + 2) + 1024 * 1024
        return hashlib.scrypt(
            plaintext.encode("utf-8"),
            salt=salt.encode("utf-8"),
            n=self.n,
            r=self.r,
            p=self.p,
            dklen=self.dklen,
            maxmem=maxmem,
        )

    def hash(self, plaintext: str) -> str:
        """
        Hash a plaintext password.

        Args:
            plaintext: Password to hash

        Returns:
            "hash.salt" string, both parts hex encoded

        Raises:
            HashingError: if the key derivation fails
        """
        salt = secrets.token_hex(self.salt_bytes)
        try:
            derived = self._derive(plaintext, salt)
        except (ValueError, MemoryError, UnicodeEncodeError) as exc:
            logger.error(f"Password hashing failed: {type(exc).__name__}")
            raise HashingError("Unable to hash password") from exc
        return f"{derived.hex()}{SEPARATOR}{salt}"

    def verify(self, plaintext: str, stored: str) -> bool:
        """
        Check a plaintext password against a stored "hash.salt" form.

        Returns False for any malformed stored value instead of raising.
        """
        if not isinstance(stored, str) or stored.count(SEPARATOR) != 1:
            return False

        hashed, salt = stored.split(SEPARATOR)
        if not hashed or not salt:
            return False

        try:
            expected = bytes.fromhex(hashed)
            supplied = self._derive(plaintext, salt)
        except (ValueError, MemoryError, UnicodeEncodeError):
            return False

        # compare_digest does not short-circuit on the first differing byte
        return hmac.compare_digest(supplied, expected)
