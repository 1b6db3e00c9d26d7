# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .users.entities import IssuedToken, SessionClaims, TokenRejection, User
from .users.exceptions import (
    AuthenticationFailure,
    HashingError,
    InvalidCredentialsError,
    MissingTokenError,
    TokenValidationError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from .users.repositories import PasswordHasher, TokenService, UserRepository

__all__ = [
    "IssuedToken",
    "SessionClaims",
    "TokenRejection",
    "User",
    "AuthenticationFailure",
    "HashingError",
    "InvalidCredentialsError",
    "MissingTokenError",
    "TokenValidationError",
    "UserAlreadyExistsError",
    "UserNotFoundError",
    "PasswordHasher",
    "TokenService",
    "UserRepository",
]
