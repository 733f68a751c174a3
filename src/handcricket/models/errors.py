"""Typed engine failures with stable numeric codes."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Numeric error codes. Values are part of the public surface; never renumber."""

    GAME_NOT_FOUND = 1
    NOT_PLAYER = 2
    WRONG_PHASE = 3
    ALREADY_COMMITTED = 4
    ALREADY_REVEALED = 5
    COMMIT_MISSING = 6
    PROOF_INVALID = 7
    GAME_ALREADY_ENDED = 8
    SELF_PLAY = 9
    NOT_TOSS_WINNER = 10

    @property
    def label(self) -> str:
        """CamelCase name used in API responses, e.g. ``GameNotFound``."""
        return "".join(part.capitalize() for part in self.name.split("_"))


class GameError(Exception):
    """A precondition or verification failure. Raised before any state is persisted."""

    def __init__(self, code: ErrorCode, detail: str = "") -> None:
        self.code = code
        self.detail = detail
        super().__init__(f"{code.label} ({int(code)}){': ' + detail if detail else ''}")


class NotAuthorizedError(Exception):
    """The caller did not present authorization for the identity it acts as."""

    def __init__(self, identity: str) -> None:
        self.identity = identity
        super().__init__(f"missing authorization for {identity!r}")
