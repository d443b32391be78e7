"""
Credential Hasher

One-way password hashing with bcrypt.
"""

import bcrypt

# bcrypt input limit; longer input would be silently cut or rejected
BCRYPT_MAX_BYTES = 72


class CredentialHasher:
    """
    Salted, adaptive password hashing.

    Business Rules:
    - bcrypt with a fixed cost factor (10 unless configured otherwise)
    - Fresh salt per hash call, so equal passwords give different digests
    - Passwords over 72 UTF-8 bytes are never hashed; forms reject them first
    - verify() never raises; a malformed digest simply does not match
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        encoded = plaintext.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Password exceeds {BCRYPT_MAX_BYTES} bytes")
        digest = bcrypt.hashpw(encoded, bcrypt.gensalt(self.rounds))
        return digest.decode("utf-8")

    def verify(self, plaintext: str, digest: str) -> bool:
        encoded = plaintext.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, digest.encode("utf-8"))
        except ValueError:
            return False
