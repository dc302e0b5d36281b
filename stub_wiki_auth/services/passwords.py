"""
Default password hasher.
"""

import bcrypt

# bcrypt ignores everything past the first 72 bytes of the password
_BCRYPT_MAX_BYTES = 72


class BcryptPasswordHasher:
    """
    bcrypt password hasher.

    Hashes use the standard modular crypt form (``$2b$<rounds>$<salt+hash>``).
    """

    def __init__(self, *, rounds: int = 12) -> None:
        if not 4 <= rounds <= 31:
            msg = "rounds must be between 4 and 31"
            raise ValueError(msg)
        self._rounds = rounds

    def hash(self, password: str) -> str:
        hashed = bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self._rounds))
        return hashed.decode("ascii")

    def verify(self, password: str, encoded: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(password), encoded.encode("ascii"))
        except ValueError:
            return False


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
