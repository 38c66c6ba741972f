"""Explicit request stages run before protected handlers.

A stage receives the :class:`RequestContext` and returns it (possibly
enriched) to continue, or raises an :class:`~app.utils.errors.AppError` to
end the request. Stages run strictly in the order given to :class:`Pipeline`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace

from app.services.session_service import Principal, SessionValidator
from app.utils.errors import AuthenticationError, AuthFailure


@dataclass(frozen=True)
class RequestContext:
    headers: Mapping[str, str]
    validator: SessionValidator
    token: str | None = None
    principal: Principal | None = None


Stage = Callable[[RequestContext], RequestContext]


def extract_bearer_token(ctx: RequestContext) -> RequestContext:
    """Read ``Authorization: Bearer <token>`` into the context."""
    header = ctx.headers.get("authorization")
    if not header or not header.strip():
        raise AuthenticationError(AuthFailure.MISSING_TOKEN)

    scheme, _, token = header.strip().partition(" ")
    if scheme.lower() != "bearer":
        raise AuthenticationError(AuthFailure.MALFORMED_TOKEN)
    token = token.strip()
    if not token:
        raise AuthenticationError(AuthFailure.MISSING_TOKEN)
    return replace(ctx, token=token)


def resolve_principal(ctx: RequestContext) -> RequestContext:
    """Validate the session token against the live account state."""
    principal = ctx.validator.validate(ctx.token)
    return replace(ctx, principal=principal)


class Pipeline:
    """Ordered, short-circuiting sequence of request stages."""

    def __init__(self, *stages: Stage) -> None:
        self.stages = stages

    def run(self, ctx: RequestContext) -> RequestContext:
        for stage in self.stages:
            ctx = stage(ctx)
        return ctx


authenticate = Pipeline(extract_bearer_token, resolve_principal)
