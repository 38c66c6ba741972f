"""FastAPI dependency injection helpers."""

from __future__ import annotations

from datetime import timedelta

from fastapi import Depends, Request

from app.config import settings
from app.db.database import Database
from app.pipeline import RequestContext, authenticate
from app.services.auth_service import AuthService
from app.services.balance_service import BalanceAggregator
from app.services.credential_store import CredentialStore
from app.services.ledger_query import LedgerQueryEngine
from app.services.ledger_store import LedgerStore
from app.services.session_service import Principal, SessionTokenIssuer, SessionValidator
from app.utils.errors import StoreUnavailableError
from app.utils.passwords import PasswordHasher

_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)


def get_db(request: Request) -> Database:
    """Return the store handle opened by the application lifespan."""
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise StoreUnavailableError("Database is not open")
    return db


def get_credential_store(db: Database = Depends(get_db)) -> CredentialStore:
    return CredentialStore(db)


def get_session_validator(
    credentials: CredentialStore = Depends(get_credential_store),
) -> SessionValidator:
    return SessionValidator(credentials, settings.jwt_secret, settings.jwt_algorithm)


def get_auth_service(
    credentials: CredentialStore = Depends(get_credential_store),
) -> AuthService:
    issuer = SessionTokenIssuer(
        credentials,
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        lifetime=timedelta(minutes=settings.jwt_expires_minutes),
    )
    return AuthService(credentials, issuer, _hasher)


def get_current_principal(
    request: Request,
    validator: SessionValidator = Depends(get_session_validator),
) -> Principal:
    """Run the authentication stages for a protected route.

    Raises:
        AuthenticationError: 401 if the token is missing, malformed,
            expired or no longer the account's active session.
    """
    ctx = authenticate.run(RequestContext(headers=request.headers, validator=validator))
    return ctx.principal


def get_ledger_store(db: Database = Depends(get_db)) -> LedgerStore:
    return LedgerStore(db)


def get_query_engine(db: Database = Depends(get_db)) -> LedgerQueryEngine:
    return LedgerQueryEngine(db)


def get_balance_aggregator(db: Database = Depends(get_db)) -> BalanceAggregator:
    return BalanceAggregator(db)
