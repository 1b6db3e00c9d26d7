# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sessionauth.domain.users.entities import IssuedToken, User
from sessionauth.domain.users.repositories import PasswordHasher, TokenService, UserRepository


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher

    def execute(self, username: str, password: str) -> tuple[User, IssuedToken]:
        hashed = self._password_hasher.hash(password)
        # Uniqueness is left to the store's constraint; no lookup first.
        persisted = self._users.create(username, hashed)
        token = self._tokens.issue(persisted.username)
        return persisted, token
