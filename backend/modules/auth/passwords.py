"""
Password hashing using bcrypt with a server-side pepper.

The salt is random per hash and embedded in the bcrypt output. The pepper
is a process-wide secret; it is never stored with the user record.

bcrypt only reads the first 72 bytes of its input, so the password is
first reduced to an HMAC-SHA256 digest keyed with the pepper. Every byte of
the password and the pepper reaches bcrypt, whatever the password's length
or encoding.
"""

import base64
import hashlib
import hmac

import bcrypt


class PasswordHasher:
    """
    Service for secure password hashing and verification.

    Example:
        hasher = PasswordHasher(pepper="server-secret", rounds=12)
        stored = hasher.hash("Customer@123")
        hasher.verify("Customer@123", stored)  # True
    """

    DEFAULT_ROUNDS = 12

    def __init__(self, pepper: str = "", rounds: int = DEFAULT_ROUNDS):
        """
        Initialize the hasher.

        Args:
            pepper: Server-held secret used as the HMAC key for every password
            rounds: bcrypt work factor (log2 of iterations)
        """
        self._pepper = pepper.encode("utf-8")
        self._rounds = rounds

    def _peppered(self, password: str) -> bytes:
        # 44 base64 bytes, no NULs, well under bcrypt's 72-byte limit
        digest = hmac.new(self._pepper, password.encode("utf-8"), hashlib.sha256).digest()
        return base64.b64encode(digest)

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password.

        Two hashes of the same password differ because of the random salt.

        Args:
            password: The plaintext password

        Returns:
            The bcrypt hash as a string

        Raises:
            ValueError: If the password is empty
        """
        if not password:
            raise ValueError("Password cannot be empty")

        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(self._peppered(password), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Verify a password against a stored hash.

        A mismatch or a malformed hash is reported as False, never raised.
        """
        if not password or not password_hash:
            return False
        try:
            return bcrypt.checkpw(self._peppered(password), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            # Invalid hash format
            return False
