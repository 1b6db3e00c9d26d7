# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sessionauth.domain.users.entities import IssuedToken
from sessionauth.domain.users.exceptions import (
    HashingError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from sessionauth.domain.users.repositories import PasswordHasher, TokenService, UserRepository
from sessionauth.shared.errors.base import StorageError
from sessionauth.shared.logging import logger


class LoginUserUseCase:
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

    def execute(self, username: str, password: str) -> IssuedToken:
        try:
            user = self._users.find_by_username(username)
        except UserNotFoundError:
            logger.debug(f"auth.login: unknown username={username!r}")
            raise InvalidCredentialsError() from None

        try:
            matches = self._password_hasher.verify(password, user.password_hash)
        except HashingError as exc:
            logger.error(f"auth.login: stored hash unreadable user_id={user.id}")
            raise StorageError("read_password_hash") from exc

        if not matches:
            logger.debug(f"auth.login: password mismatch user_id={user.id}")
            raise InvalidCredentialsError()

        return self._tokens.issue(user.username)
