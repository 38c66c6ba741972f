"""API router package."""

from app.routers import auth, transactions

__all__ = [
    "auth",
    "transactions",
]
