"""Session token issuing and request-time session validation.

Each account has at most one active token. Issuing a token stores it on the
account record, which silently retires whatever token an earlier login
produced; there is no logout or revocation list. Validation therefore needs
both the signature/expiry check and a lookup of the live account state.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt

from app.db.models import Account
from app.services.credential_store import CredentialStore
from app.utils.errors import AuthenticationError, AuthFailure, ConflictError
from app.utils.time import expires_at, now_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """Identity resolved from a validated session token."""

    account_id: uuid.UUID
    email: str


class SessionTokenIssuer:
    """Sign time-bounded tokens and make each one the account's only session."""

    def __init__(
        self,
        credentials: CredentialStore,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=24),
    ) -> None:
        self.credentials = credentials
        self.secret = secret
        self.algorithm = algorithm
        self.lifetime = lifetime

    def encode(self, email: str) -> str:
        issued_at = now_utc()
        claims: dict[str, Any] = {
            "email": email,
            "iat": issued_at,
            "exp": expires_at(self.lifetime, issued_at),
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def issue(self, account: Account) -> str:
        """Return a new token for ``account`` and store it as the active one.

        Raises:
            ConflictError: when a concurrent login replaced the token between
                reading the account and writing the new token.
        """
        token = self.encode(account.email)
        if not self.credentials.set_active_token(account.id, token, expected=account.active_token):
            logger.warning("Concurrent login for account %s; token not stored", account.id)
            raise ConflictError("Session changed by a concurrent login, please retry")
        if account.active_token is not None:
            logger.info("Previous session superseded for account %s", account.id)
        account.active_token = token
        return token


class SessionValidator:
    """Resolve the principal behind a presented session token."""

    def __init__(self, credentials: CredentialStore, secret: str, algorithm: str = "HS256") -> None:
        self.credentials = credentials
        self.secret = secret
        self.algorithm = algorithm

    def decode(self, raw_token: str) -> dict[str, Any]:
        """Verify signature and expiry and return the claims."""
        try:
            claims = jwt.decode(
                raw_token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require_exp": True},
            )
        except ExpiredSignatureError as exc:
            raise AuthenticationError(AuthFailure.TOKEN_EXPIRED) from exc
        except JWTError as exc:
            raise AuthenticationError(AuthFailure.MALFORMED_TOKEN) from exc

        if not isinstance(claims.get("email"), str) or not claims["email"]:
            raise AuthenticationError(AuthFailure.MALFORMED_TOKEN)
        return claims

    def validate(self, raw_token: str | None) -> Principal:
        """Return the principal for ``raw_token``.

        Raises:
            AuthenticationError: with reason ``MISSING_TOKEN``,
                ``MALFORMED_TOKEN``, ``TOKEN_EXPIRED`` or ``STALE_TOKEN``. A
                stale token verified fine but is not the account's active
                token (never issued to a live account, or superseded by a
                later login).
        """
        if not raw_token:
            raise AuthenticationError(AuthFailure.MISSING_TOKEN)

        claims = self.decode(raw_token)
        account = self.credentials.find_by_email_and_token(claims["email"], raw_token)
        if account is None:
            raise AuthenticationError(AuthFailure.STALE_TOKEN)
        return Principal(account_id=account.id, email=account.email)
