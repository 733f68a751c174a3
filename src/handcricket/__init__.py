"""Hand cricket: two-player commit-reveal game engine and API."""
