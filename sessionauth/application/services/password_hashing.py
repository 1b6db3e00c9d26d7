"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from sessionauth.domain.users.exceptions import HashingError
from sessionauth.domain.users.repositories import PasswordHasher

_KNOWN_METHODS = ("scrypt", "pbkdf2")


class WerkzeugPasswordHasher(PasswordHasher):
    """Salted scrypt/pbkdf2 hashes in werkzeug's ``method$salt$digest`` form."""

    def __init__(self, method: str = "scrypt", *, max_password_bytes: int = 1024) -> None:
        self._method = method
        self._max_password_bytes = max_password_bytes

    def hash(self, password: str) -> str:
        if not password:
            raise HashingError("empty_password")
        if len(password.encode("utf-8")) > self._max_password_bytes:
            raise HashingError("password_too_long")
        try:
            return str(generate_password_hash(password, method=self._method))
        except ValueError as exc:
            raise HashingError("unsupported_method") from exc

    def verify(self, password: str, hashed: str) -> bool:
        if not _looks_like_hash(hashed):
            raise HashingError("malformed_hash")
        if not password or len(password.encode("utf-8")) > self._max_password_bytes:
            return False
        try:
            return bool(check_password_hash(hashed, password))
        except ValueError as exc:
            raise HashingError("malformed_hash") from exc


def _looks_like_hash(hashed: str) -> bool:
    if not hashed or hashed.count("$") < 2:
        return False
    method, salt, digest = hashed.split("$", 2)
    return method.split(":", 1)[0] in _KNOWN_METHODS and bool(salt) and bool(digest)
