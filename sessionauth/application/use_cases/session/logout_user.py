"""Use-case for ending a session."""

from __future__ import annotations

from sessionauth.domain.users.exceptions import AuthenticationFailure
from sessionauth.domain.users.repositories import TokenService


class LogoutUserUseCase:
    """Tokens are stateless, so logging out only tells the caller to drop
    its copy. A replayed copy stays valid until it expires.

    Returns the subject of the presented token when it still validates,
    for audit purposes. Logout never fails.
    """

    def __init__(self, *, tokens: TokenService) -> None:
        self._tokens = tokens

    def execute(self, token: str | None) -> str | None:
        if not token:
            return None
        try:
            return self._tokens.validate(token).subject
        except AuthenticationFailure:
            return None
