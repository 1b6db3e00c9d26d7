# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from sessionauth.shared.errors.base import DomainError

from .entities import TokenRejection

INVALID_CREDENTIALS_MESSAGE = "Incorrect username or password"
UNAUTHORIZED_MESSAGE = "Unauthorized"


class UserAlreadyExistsError(DomainError):
    default_code = "user_already_exists"
    default_status = HTTPStatus.CONFLICT
    default_message = "Username already taken"


class UserNotFoundError(DomainError):
    default_code = "user_not_found"
    default_status = HTTPStatus.NOT_FOUND


class HashingError(DomainError):
    default_code = "password_unprocessable"
    default_status = HTTPStatus.UNPROCESSABLE_ENTITY

    def __init__(self, reason: str) -> None:
        super().__init__(context={"reason": reason})
        self.reason = reason


class AuthenticationFailure(DomainError):
    """Caller could not be authenticated.

    Subclasses keep the internal cause apart for logging; all of them
    render the same payload for a given operation.
    """

    default_code = "unauthenticated"
    default_status = HTTPStatus.UNAUTHORIZED
    default_message = UNAUTHORIZED_MESSAGE


class InvalidCredentialsError(AuthenticationFailure):
    default_code = "invalid_credentials"
    default_message = INVALID_CREDENTIALS_MESSAGE


class MissingTokenError(AuthenticationFailure):
    default_code = "missing_token"


class TokenValidationError(AuthenticationFailure):
    default_code = "invalid_token"

    def __init__(self, reason: TokenRejection) -> None:
        super().__init__()
        self.reason = reason
