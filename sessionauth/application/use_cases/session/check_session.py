"""Use-case for resolving the caller's session from a presented token."""

from __future__ import annotations

from sessionauth.domain.users.entities import SessionClaims
from sessionauth.domain.users.exceptions import MissingTokenError
from sessionauth.domain.users.repositories import TokenService


class CheckSessionUseCase:
    def __init__(self, *, tokens: TokenService) -> None:
        self._tokens = tokens

    def execute(self, token: str | None) -> SessionClaims:
        if not token:
            raise MissingTokenError()
        return self._tokens.validate(token)
