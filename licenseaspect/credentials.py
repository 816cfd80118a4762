"""Credentials and the Authorization header derived from them."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TokenCredentials:
    """Bearer-token credentials."""

    token: str = field(repr=False)


def is_token_credentials(credentials: object) -> bool:
    """Check whether *credentials* carry a usable bearer token.

    Any object with a non-empty string ``token`` attribute qualifies, so
    credentials supplied by a host do not need to subclass anything here.
    """
    token = getattr(credentials, "token", None)
    return isinstance(token, str) and bool(token)


def headers(ctx: object) -> dict[str, str] | None:
    """Authorization header for the credentials on *ctx*, or None.

    *ctx* is anything exposing a ``credentials`` attribute (an invocation
    context, typically). No token means no header.
    """
    credentials = getattr(ctx, "credentials", None)
    if credentials is not None and is_token_credentials(credentials):
        return {"Authorization": f"Bearer {credentials.token}"}
    return None
