# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Protocol

from .entities import IssuedToken, SessionClaims, User


class UserRepository(Protocol):
    def create(self, username: str, password_hash: str) -> User: ...
    def find_by_username(self, username: str) -> User: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenService(Protocol):
    def issue(self, subject: str) -> IssuedToken: ...
    def validate(self, token: str) -> SessionClaims: ...
