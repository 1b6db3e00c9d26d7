# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from typing import Annotated, Any

from pydantic import Field, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

_INSECURE_SECRETS = ("dev", "development", "test", "")

_MIN_SCRYPT_N = 2**14
_MIN_PBKDF2_ITERATIONS = 100_000

_SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    validate_by_name=True,
    extra="ignore",
)


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    host: str = Field("localhost", alias="DB_HOST")
    port: int = Field(5432, ge=1, le=65535, alias="DB_PORT")
    user: str = Field("postgres", alias="DB_USER")
    name: str = Field("sessionauth", alias="DB_NAME")
    password: str = Field("", alias="DB_PASSWORD")
    driver: str = Field("postgresql+psycopg2", alias="DB_DRIVER")
    url_override: str | None = Field(None, alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _SECTION_CONFIG

    def url(self) -> URL:
        if self.url_override:
            return make_url(self.url_override)
        return URL.create(
            self.driver,
            username=self.user,
            password=self.password or None,
            host=self.host,
            port=self.port,
            database=self.name,
        )

    def is_sqlite(self) -> bool:
        return self.url().get_backend_name() == "sqlite"


class TokenConfig(BaseSettings):
    ttl_seconds: int = Field(24 * 60 * 60, ge=1, alias="TOKEN_TTL_SECONDS")
    algorithm: str = Field("HS256", alias="TOKEN_ALGORITHM")

    model_config = _SECTION_CONFIG

    @field_validator("algorithm")
    @classmethod
    def _only_hmac(cls, value: str) -> str:
        if value not in ("HS256", "HS384", "HS512"):
            raise ValueError("only HMAC signing algorithms are supported")
        return value


class HashingConfig(BaseSettings):
    method: str = Field("scrypt", alias="PASSWORD_HASH_METHOD")
    max_password_bytes: int = Field(1024, ge=1, alias="PASSWORD_MAX_BYTES")

    model_config = _SECTION_CONFIG

    @field_validator("method")
    @classmethod
    def _interactive_cost(cls, value: str) -> str:
        # werkzeug forms: scrypt[:n:r:p], pbkdf2[:hash[:iterations]]
        name, *params = value.split(":")
        if name == "scrypt":
            if params and int(params[0]) < _MIN_SCRYPT_N:
                raise ValueError(f"scrypt cost n must be at least {_MIN_SCRYPT_N}")
        elif name == "pbkdf2":
            if len(params) > 1 and int(params[1]) < _MIN_PBKDF2_ITERATIONS:
                raise ValueError(f"pbkdf2 needs at least {_MIN_PBKDF2_ITERATIONS} iterations")
        else:
            raise ValueError("PASSWORD_HASH_METHOD must be scrypt or pbkdf2")
        return value


class SecurityConfig(BaseSettings):
    # Session cookie
    cookie_name: str = Field("token", alias="COOKIE_NAME")
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Lax", alias="COOKIE_SAMESITE")

    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _SECTION_CONFIG

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("cookie_secure", "enable_hsts", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _token_config_factory() -> TokenConfig:
    return TokenConfig()  # type: ignore[call-arg]


def _hashing_config_factory() -> HashingConfig:
    return HashingConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


_SECTION_FACTORIES = {
    "database": _database_config_factory,
    "token": _token_config_factory,
    "hashing": _hashing_config_factory,
    "security": _security_config_factory,
}


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(8080, ge=1, le=65535, alias="PORT")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: str | None = Field(None, alias="LOG_FILE")

    # Sections read their own prefixed variables. NoDecode keeps a bare
    # DATABASE/TOKEN/HASHING/SECURITY variable from being parsed as JSON.
    database: Annotated[DatabaseConfig, NoDecode] = Field(default_factory=_database_config_factory)
    token: Annotated[TokenConfig, NoDecode] = Field(default_factory=_token_config_factory)
    hashing: Annotated[HashingConfig, NoDecode] = Field(default_factory=_hashing_config_factory)
    security: Annotated[SecurityConfig, NoDecode] = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_by_name=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @field_validator("database", "token", "hashing", "security", mode="before")
    @classmethod
    def _ignore_flat_section_value(cls, value: Any, info: ValidationInfo) -> Any:
        if isinstance(value, str):
            return _SECTION_FACTORIES[info.field_name]()
        return value

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.secret_key in _INSECURE_SECRETS:
            raise ValueError(
                "Insecure SECRET_KEY in production; generate one with "
                "python -c \"import secrets; print(secrets.token_urlsafe(32))\""
            )

        warnings = []
        if not self.security.cookie_secure:
            warnings.append("⚠️  Cookie Secure flag is DISABLED (use HTTPS!)")
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "HashingConfig",
    "SecurityConfig",
    "TokenConfig",
    "load_config",
]
