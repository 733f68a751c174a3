"""Signed authorization grants.

A grant is an itsdangerous token carrying ``{"identity": ..., "args": ...}``.
Players present grants with each request; the API turns the valid ones into
a ``GrantAuthorizer`` for that call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from itsdangerous import BadSignature, URLSafeTimedSerializer

from handcricket.core.auth import Grant

logger = logging.getLogger(__name__)

GRANT_SALT = "handcricket-grant"


def _serializer(secret_key: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret_key, salt=GRANT_SALT)


def issue_grant(secret_key: str, identity: str, args: Sequence[Any] | None = None) -> str:
    """Sign a grant for *identity*, optionally restricted to exact call *args*."""
    payload = {"identity": identity, "args": list(args) if args is not None else None}
    return _serializer(secret_key).dumps(payload)


def load_grant(secret_key: str, token: str, max_age: int) -> Grant | None:
    """Decode one grant. Returns None if the token is invalid or expired."""
    try:
        data = _serializer(secret_key).loads(token, max_age=max_age)
    except BadSignature:
        logger.debug("Invalid or expired grant, ignoring")
        return None
    identity = data.get("identity") if isinstance(data, dict) else None
    if not isinstance(identity, str):
        logger.debug("Malformed grant payload, ignoring")
        return None
    args = data.get("args")
    return Grant(identity=identity, args=tuple(args) if args is not None else None)


def load_grants(secret_key: str, tokens: Iterable[str], max_age: int) -> list[Grant]:
    grants = []
    for token in tokens:
        grant = load_grant(secret_key, token, max_age)
        if grant is not None:
            grants.append(grant)
    return grants
