"""Application dependency container."""

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from sessionauth.application.services.password_hashing import WerkzeugPasswordHasher
from sessionauth.application.services.tokens import JwtTokenService
from sessionauth.application.use_cases.session.check_session import CheckSessionUseCase
from sessionauth.application.use_cases.session.login_user import LoginUserUseCase
from sessionauth.application.use_cases.session.logout_user import LogoutUserUseCase
from sessionauth.application.use_cases.session.register_user import RegisterUserUseCase
from sessionauth.domain.users.repositories import PasswordHasher, TokenService, UserRepository
from sessionauth.infrastructure.db import Database
from sessionauth.infrastructure.repositories.users.sqlalchemy_user_repository import (
    SqlAlchemyUserRepository,
)
from sessionauth.interfaces.http.controllers.session_controller import SessionController
from sessionauth.shared.config import AppConfig


class Container:
    """Wires collaborators from one explicit ``AppConfig``.

    Any provider may be replaced before first use by assigning to the
    attribute, which is how tests swap in stubs.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    @cached_property
    def database(self) -> Database:
        return Database(self.config.database)

    @cached_property
    def password_hasher(self) -> PasswordHasher:
        return WerkzeugPasswordHasher(
            self.config.hashing.method,
            max_password_bytes=self.config.hashing.max_password_bytes,
        )

    @cached_property
    def token_service(self) -> TokenService:
        return JwtTokenService(
            self.config.secret_key,
            ttl=timedelta(seconds=self.config.token.ttl_seconds),
            algorithm=self.config.token.algorithm,
        )

    @cached_property
    def user_repository(self) -> UserRepository:
        return SqlAlchemyUserRepository(self.database)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def check_session_use_case(self) -> CheckSessionUseCase:
        return CheckSessionUseCase(tokens=self.token_service)

    @cached_property
    def logout_user_use_case(self) -> LogoutUserUseCase:
        return LogoutUserUseCase(tokens=self.token_service)

    @cached_property
    def session_controller(self) -> SessionController:
        return SessionController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            check_session_use_case=self.check_session_use_case,
            logout_use_case=self.logout_user_use_case,
            security=self.config.security,
        )
