"""Password hashing helpers."""

from __future__ import annotations

from passlib.context import CryptContext


class PasswordHasher:
    """Salted bcrypt hashing backed by a passlib ``CryptContext``."""

    def __init__(self, rounds: int = 12) -> None:
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        return self._context.verify(password, hashed)

    def dummy_verify(self) -> None:
        """Spend the same time as a real verification for unknown accounts."""
        self._context.dummy_verify()
