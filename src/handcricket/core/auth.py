"""Per-call caller authorization.

An ``Authorizer`` answers one question for the engine: did the caller of
this operation prove they act for *identity* (optionally, for these exact
arguments)? It raises ``NotAuthorizedError`` otherwise.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from handcricket.models.errors import NotAuthorizedError


class Authorizer(Protocol):
    def require_auth(self, identity: str) -> None: ...

    def require_auth_for_args(self, identity: str, args: Sequence[Any]) -> None: ...


@dataclass(frozen=True)
class Grant:
    """Proof that the caller acts for ``identity``.

    ``args=None`` authorizes any call; otherwise only calls made with exactly
    these arguments.
    """

    identity: str
    args: tuple[Any, ...] | None = None


class GrantAuthorizer:
    """Authorizer backed by the grants presented with the current call."""

    def __init__(self, grants: Iterable[Grant] = ()) -> None:
        self._grants: list[Grant] = list(grants)

    def allow(self, *identities: str) -> GrantAuthorizer:
        """Add unrestricted grants for *identities*. Returns self for chaining."""
        for identity in identities:
            self._grants.append(Grant(identity))
        return self

    def require_auth(self, identity: str) -> None:
        if not any(g.identity == identity and g.args is None for g in self._grants):
            raise NotAuthorizedError(identity)

    def require_auth_for_args(self, identity: str, args: Sequence[Any]) -> None:
        wanted = tuple(args)
        for grant in self._grants:
            if grant.identity == identity and (grant.args is None or grant.args == wanted):
                return
        raise NotAuthorizedError(identity)
