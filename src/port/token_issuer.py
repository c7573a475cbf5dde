"""Port definition for TokenIssuer."""

from typing import Protocol


class TokenIssuer(Protocol):
    def issue(self, user_id: str) -> str:
        """Mint a signed bearer token for ``user_id``."""
        ...

    def verify(self, token: str) -> str | None:
        """Return the subject user id, or None for any invalid token."""
        ...
