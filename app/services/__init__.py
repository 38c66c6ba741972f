"""Service package exports with lazy loading."""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS = {
    "AuthService": "app.services.auth_service",
    "BalanceAggregator": "app.services.balance_service",
    "CredentialStore": "app.services.credential_store",
    "LedgerQueryEngine": "app.services.ledger_query",
    "LedgerStore": "app.services.ledger_store",
    "Principal": "app.services.session_service",
    "SessionTokenIssuer": "app.services.session_service",
    "SessionValidator": "app.services.session_service",
}

__all__ = sorted(_EXPORTS.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = import_module(_EXPORTS[name])
    return getattr(module, name)
