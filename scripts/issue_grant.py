"""Mint a signed player grant for the X-Player-Grant header.

Usage:
    # Unrestricted grant for commit / reveal / role / admin calls:
    python scripts/issue_grant.py alice

    # Grant bound to a start call (session id, own stake):
    python scripts/issue_grant.py alice 7 100

Reads GRANT_SECRET_KEY from the environment; it must match the server's.
"""

from __future__ import annotations

import os
import sys

from handcricket.auth.tokens import issue_grant
from handcricket.config import Settings


def main() -> None:
    if len(sys.argv) not in (2, 4):
        print(__doc__)
        sys.exit(1)

    if not os.environ.get("GRANT_SECRET_KEY"):
        print("ERROR: GRANT_SECRET_KEY not set.")
        sys.exit(1)

    settings = Settings()
    identity = sys.argv[1]
    args = [int(a) for a in sys.argv[2:]] or None
    print(issue_grant(settings.grant_secret_key, identity, args))


if __name__ == "__main__":
    main()
