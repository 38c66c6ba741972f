"""Request pipeline stage tests."""

from __future__ import annotations

import pytest

from app.pipeline import (
    Pipeline,
    RequestContext,
    extract_bearer_token,
    resolve_principal,
)
from app.services.credential_store import CredentialStore
from app.services.session_service import SessionTokenIssuer, SessionValidator
from app.utils.errors import AuthenticationError, AuthFailure

SECRET = "pipeline-secret"


@pytest.fixture()
def validator(credentials: CredentialStore) -> SessionValidator:
    return SessionValidator(credentials, SECRET)


@pytest.mark.parametrize(
    ("headers", "reason"),
    [
        ({}, AuthFailure.MISSING_TOKEN),
        ({"authorization": ""}, AuthFailure.MISSING_TOKEN),
        ({"authorization": "Bearer"}, AuthFailure.MISSING_TOKEN),
        ({"authorization": "Bearer   "}, AuthFailure.MISSING_TOKEN),
        ({"authorization": "Basic dXNlcjpwYXNz"}, AuthFailure.MALFORMED_TOKEN),
    ],
)
def test_extract_bearer_token_failures(
    validator: SessionValidator,
    headers: dict[str, str],
    reason: AuthFailure,
) -> None:
    """Missing or non-bearer credentials end the request."""
    with pytest.raises(AuthenticationError) as exc_info:
        extract_bearer_token(RequestContext(headers=headers, validator=validator))
    assert exc_info.value.reason is reason


def test_extract_bearer_token_reads_token(validator: SessionValidator) -> None:
    """The scheme is case-insensitive and the token is stored on the context."""
    ctx = extract_bearer_token(
        RequestContext(headers={"authorization": "bearer abc.def"}, validator=validator)
    )
    assert ctx.token == "abc.def"


def test_pipeline_runs_stages_in_order_and_short_circuits(validator: SessionValidator) -> None:
    """Later stages never run once a stage raises."""
    calls: list[str] = []

    def first(ctx: RequestContext) -> RequestContext:
        calls.append("first")
        return ctx

    def failing(ctx: RequestContext) -> RequestContext:
        calls.append("failing")
        raise AuthenticationError(AuthFailure.MISSING_TOKEN)

    def never(ctx: RequestContext) -> RequestContext:
        calls.append("never")
        return ctx

    with pytest.raises(AuthenticationError):
        Pipeline(first, failing, never).run(RequestContext(headers={}, validator=validator))
    assert calls == ["first", "failing"]


def test_full_pipeline_resolves_principal(
    credentials: CredentialStore,
    validator: SessionValidator,
) -> None:
    """Bearer extraction followed by validation yields the account principal."""
    account = credentials.create("alice@example.com", "hash")
    token = SessionTokenIssuer(credentials, SECRET).issue(account)

    ctx = Pipeline(extract_bearer_token, resolve_principal).run(
        RequestContext(headers={"authorization": f"Bearer {token}"}, validator=validator)
    )
    assert ctx.principal is not None
    assert ctx.principal.account_id == account.id
