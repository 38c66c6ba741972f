"""Account registration and login."""

from __future__ import annotations

import logging

from app.db.models import Account
from app.services.credential_store import CredentialStore
from app.services.session_service import SessionTokenIssuer
from app.utils.errors import AuthenticationError, AuthFailure
from app.utils.passwords import PasswordHasher

logger = logging.getLogger(__name__)


class AuthService:
    """Create accounts and open their (single) session."""

    def __init__(
        self,
        credentials: CredentialStore,
        issuer: SessionTokenIssuer,
        hasher: PasswordHasher,
    ) -> None:
        self.credentials = credentials
        self.issuer = issuer
        self.hasher = hasher

    def register(self, email: str, password: str) -> tuple[Account, str]:
        """Create an account and return it with its first session token.

        The token is written by the same INSERT that creates the account, so
        an account never exists without its session.
        """
        token = self.issuer.encode(email)
        account = self.credentials.create(email, self.hasher.hash(password), active_token=token)
        logger.info("Registered account %s", account.id)
        return account, token

    def login(self, email: str, password: str) -> tuple[Account, str]:
        """Check credentials and issue a token replacing any earlier session.

        Raises:
            AuthenticationError: ``INVALID_CREDENTIALS`` for an unknown email
                or a wrong password alike.
        """
        account = self.credentials.find_by_email(email)
        if account is None:
            self.hasher.dummy_verify()
            raise AuthenticationError(AuthFailure.INVALID_CREDENTIALS)
        if not self.hasher.verify(password, account.password_hash):
            raise AuthenticationError(AuthFailure.INVALID_CREDENTIALS)

        token = self.issuer.issue(account)
        logger.info("Login for account %s", account.id)
        return account, token
