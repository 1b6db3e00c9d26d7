# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


@dataclass(slots=True, frozen=True)
class User:

    id: int
    username: str
    password_hash: str = field(repr=False)
    created_at: datetime


@dataclass(slots=True, frozen=True)
class SessionClaims:
    """Assertions carried by a session token."""

    subject: str
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


@dataclass(slots=True, frozen=True)
class IssuedToken:

    token: str = field(repr=False)
    claims: SessionClaims


class TokenRejection(str, Enum):
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"
    MALFORMED = "malformed"
