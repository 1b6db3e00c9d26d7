# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed, time-bounded session tokens (HMAC JWT)."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from sessionauth.domain.users.entities import IssuedToken, SessionClaims, TokenRejection
from sessionauth.domain.users.exceptions import TokenValidationError
from sessionauth.domain.users.repositories import TokenService

Clock = Callable[[], datetime]

DEFAULT_TTL = timedelta(hours=24)


def utc_now() -> datetime:
    return datetime.now(UTC)


class TokenPayload(BaseModel):
    """Wire form of the claims; every field is required."""

    sub: str = Field(min_length=1)
    iat: int
    exp: int

    model_config = ConfigDict(extra="ignore", strict=True)

    def to_claims(self) -> SessionClaims:
        return SessionClaims(
            subject=self.sub,
            issued_at=datetime.fromtimestamp(self.iat, tz=UTC),
            expires_at=datetime.fromtimestamp(self.exp, tz=UTC),
        )


class JwtTokenService(TokenService):
    """Issues and validates HMAC-signed JWTs.

    Expiry is checked against the injected clock rather than by PyJWT so
    that validation follows ``now <= expires_at`` exactly and tests can
    move time around. There is no revocation list: any token with a good
    signature that has not expired is accepted.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        ttl: timedelta = DEFAULT_TTL,
        algorithm: str = "HS256",
        clock: Clock = utc_now,
    ) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self._ttl = ttl
        self._algorithm = algorithm
        self._clock = clock

    def issue(self, subject: str) -> IssuedToken:
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self._ttl
        payload = {
            "sub": subject,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        return IssuedToken(
            token=token,
            claims=SessionClaims(subject=subject, issued_at=issued_at, expires_at=expires_at),
        )

    def validate(self, token: str) -> SessionClaims:
        if not token:
            raise TokenValidationError(TokenRejection.MALFORMED)
        try:
            decoded = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "require": ["sub", "iat", "exp"],
                },
            )
        except jwt.InvalidSignatureError as exc:
            raise TokenValidationError(TokenRejection.BAD_SIGNATURE) from exc
        except jwt.InvalidTokenError as exc:
            raise TokenValidationError(TokenRejection.MALFORMED) from exc

        try:
            claims = TokenPayload.model_validate(decoded).to_claims()
        except PydanticValidationError as exc:
            raise TokenValidationError(TokenRejection.MALFORMED) from exc

        if claims.is_expired(self._clock()):
            raise TokenValidationError(TokenRejection.EXPIRED)
        return claims
