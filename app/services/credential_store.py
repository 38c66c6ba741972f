"""Account credential persistence."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from app.db.database import Database
from app.db.models import Account
from app.utils.errors import EmailTakenError
from app.utils.time import now_utc

logger = logging.getLogger(__name__)


class CredentialStore:
    """Accounts, their password hashes and their single active session token."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def find_by_email(self, email: str) -> Account | None:
        """Return the account registered under ``email``, if any."""
        with self.db.session() as session:
            return session.scalars(select(Account).where(Account.email == email)).first()

    def create(self, email: str, password_hash: str, active_token: str | None = None) -> Account:
        """Insert a new account, optionally with its first session token.

        The lookup gives a friendly early error; the unique constraint on
        ``accounts.email`` is what actually rejects concurrent duplicates.

        Raises:
            EmailTakenError: when the email already belongs to an account.
        """
        if self.find_by_email(email) is not None:
            raise EmailTakenError()

        with self.db.session() as session:
            account = Account(email=email, password_hash=password_hash, active_token=active_token)
            session.add(account)
            try:
                session.flush()
            except IntegrityError as exc:
                logger.info("Duplicate registration rejected by unique constraint")
                raise EmailTakenError() from exc
            return account

    def set_active_token(
        self,
        account_id: UUID,
        token: str,
        expected: str | None = None,
    ) -> bool:
        """Replace the account's active token in a single UPDATE.

        The write is a compare-and-set: it only applies while the stored
        token still equals ``expected`` (``None`` meaning no token yet).
        Returns False when another login replaced the token first.
        """
        condition = (
            Account.active_token.is_(None)
            if expected is None
            else Account.active_token == expected
        )
        with self.db.session() as session:
            result = session.execute(
                update(Account)
                .where(Account.id == account_id, condition)
                .values(active_token=token, updated_at=now_utc())
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1

    def find_by_email_and_token(self, email: str, token: str) -> Account | None:
        """Return the account only while ``token`` is exactly its active token."""
        with self.db.session() as session:
            return session.scalars(
                select(Account).where(Account.email == email, Account.active_token == token)
            ).first()
