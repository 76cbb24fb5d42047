"""Password hashing backed by pwdlib."""

from pwdlib import PasswordHash
from pwdlib.exceptions import UnknownHashError

from ....core.exceptions import BadRequestError


class PwdlibPasswordHasher:
    """``PasswordHasher`` implementation using pwdlib's recommended argon2 setup."""

    def __init__(self, password_hash: PasswordHash = None):
        self._password_hash = password_hash or PasswordHash.recommended()

    def hash(self, password: str) -> str:
        candidate = (password or "").strip()
        if not candidate:
            raise BadRequestError("Password must not be empty")
        return self._password_hash.hash(candidate)

    def verify(self, password: str, hashed: str) -> bool:
        if not password or not hashed:
            return False
        try:
            return self._password_hash.verify(password, hashed)
        except UnknownHashError:
            return False
