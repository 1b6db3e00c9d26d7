from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic_core import PydanticCustomError

from sessionauth.domain.users.entities import SessionClaims


class CredentialsRequestDTO(BaseModel):
    username: StrictStr = Field(min_length=1, max_length=64)
    password: StrictStr = Field(min_length=1)

    model_config = ConfigDict(extra="ignore")

    @field_validator("username")
    @classmethod
    def validate_username(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("missing", "Username cannot be blank", {})
        if value != value.strip():
            raise PydanticCustomError(
                "username_whitespace",
                "Username cannot start or end with whitespace",
                {},
            )
        return value


class RegisterRequestDTO(CredentialsRequestDTO):
    pass


class LoginRequestDTO(CredentialsRequestDTO):
    pass


class AuthSuccessDTO(BaseModel):
    result: Literal["success"] = "success"


class SessionClaimsDTO(BaseModel):
    subject: str
    issued_at: int
    expires_at: int

    @classmethod
    def from_claims(cls, claims: SessionClaims) -> "SessionClaimsDTO":
        return cls(
            subject=claims.subject,
            issued_at=int(claims.issued_at.timestamp()),
            expires_at=int(claims.expires_at.timestamp()),
        )
