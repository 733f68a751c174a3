"""FastAPI dependency for per-request authorization from ``X-Player-Grant`` headers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from handcricket.auth.tokens import load_grants
from handcricket.config import Settings
from handcricket.core.auth import GrantAuthorizer

GRANT_HEADER = "x-player-grant"


def _grant_tokens(request: Request) -> list[str]:
    """All grant tokens on the request; repeated headers and comma lists both work."""
    tokens: list[str] = []
    for value in request.headers.getlist(GRANT_HEADER):
        tokens.extend(part.strip() for part in value.split(",") if part.strip())
    return tokens


async def get_authorizer(request: Request) -> GrantAuthorizer:
    settings: Settings = request.app.state.settings
    grants = load_grants(
        settings.grant_secret_key,
        _grant_tokens(request),
        max_age=settings.grant_max_age_seconds,
    )
    return GrantAuthorizer(grants)


AuthorizerDep = Annotated[GrantAuthorizer, Depends(get_authorizer)]
