# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any

from flask import Blueprint, Response, jsonify, request
from pydantic import BaseModel, ValidationError

from sessionauth.application.use_cases.session.check_session import CheckSessionUseCase
from sessionauth.application.use_cases.session.login_user import LoginUserUseCase
from sessionauth.application.use_cases.session.logout_user import LogoutUserUseCase
from sessionauth.application.use_cases.session.register_user import RegisterUserUseCase
from sessionauth.domain.users.entities import IssuedToken
from sessionauth.domain.users.exceptions import (
    AuthenticationFailure,
    InvalidCredentialsError,
    TokenValidationError,
)
from sessionauth.infrastructure.audit import AuditAction, audit_log
from sessionauth.interfaces.http.dto.auth import (
    AuthSuccessDTO,
    LoginRequestDTO,
    RegisterRequestDTO,
    SessionClaimsDTO,
)
from sessionauth.shared.config import SecurityConfig
from sessionauth.shared.errors.base import AppError, MalformedBodyError
from sessionauth.shared.errors.validation import raise_validation_error
from sessionauth.shared.logging import logger


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def _parse_body(dto_type: type[BaseModel]) -> Any:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise MalformedBodyError()
    try:
        return dto_type.model_validate(body)
    except ValidationError as exc:
        raise_validation_error(exc)


class SessionController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        check_session_use_case: CheckSessionUseCase,
        logout_use_case: LogoutUserUseCase,
        security: SecurityConfig,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._check_session_use_case = check_session_use_case
        self._logout_use_case = logout_use_case
        self._security = security

    def _presented_token(self) -> str:
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            return auth_header[7:]
        return request.cookies.get(self._security.cookie_name, "")

    def _success_with_token(self, issued: IssuedToken) -> Response:
        response = jsonify(AuthSuccessDTO().model_dump())
        max_age = int((issued.claims.expires_at - issued.claims.issued_at).total_seconds())
        response.set_cookie(
            self._security.cookie_name,
            issued.token,
            httponly=True,
            samesite=self._security.cookie_samesite,
            secure=self._security.cookie_secure,
            max_age=max_age,
        )
        return response

    def register(self) -> tuple[Response, int]:
        dto: RegisterRequestDTO = _parse_body(RegisterRequestDTO)

        try:
            user, issued = self._register_use_case.execute(dto.username, dto.password)
        except AppError as exc:
            audit_log(
                AuditAction.REGISTER_FAILED,
                username=dto.username,
                ip_address=_get_client_ip(),
                details={"error": exc.code},
                success=False,
            )
            raise

        audit_log(
            AuditAction.REGISTER,
            username=user.username,
            ip_address=_get_client_ip(),
            details={"user_id": user.id},
        )
        logger.info(f"auth.register: ok user_id={user.id}")
        return self._success_with_token(issued), 200

    def check_session(self) -> tuple[Response, int]:
        try:
            claims = self._check_session_use_case.execute(self._presented_token())
        except AuthenticationFailure as exc:
            reason = exc.reason.value if isinstance(exc, TokenValidationError) else exc.code
            audit_log(
                AuditAction.SESSION_REJECTED,
                ip_address=_get_client_ip(),
                details={"reason": reason},
                success=False,
            )
            raise AuthenticationFailure() from exc

        return jsonify(SessionClaimsDTO.from_claims(claims).model_dump()), 200

    def login(self) -> tuple[Response, int]:
        dto: LoginRequestDTO = _parse_body(LoginRequestDTO)
        ip_address = _get_client_ip()

        try:
            issued = self._login_use_case.execute(dto.username, dto.password)
        except InvalidCredentialsError:
            audit_log(
                AuditAction.LOGIN_FAILED,
                username=dto.username,
                ip_address=ip_address,
                success=False,
            )
            raise

        audit_log(AuditAction.LOGIN_SUCCESS, username=dto.username, ip_address=ip_address)
        logger.info(f"auth.login: ok username={dto.username}")
        return self._success_with_token(issued), 200

    def logout(self) -> tuple[Response, int]:
        subject = self._logout_use_case.execute(self._presented_token())

        audit_log(AuditAction.LOGOUT, username=subject, ip_address=_get_client_ip())

        response = jsonify(AuthSuccessDTO().model_dump())
        response.delete_cookie(
            self._security.cookie_name,
            httponly=True,
            samesite=self._security.cookie_samesite,
            secure=self._security.cookie_secure,
        )
        logger.info("auth.logout: ok")
        return response, 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("session", __name__)
        bp.add_url_rule("/users", endpoint="register", view_func=self.register, methods=["POST"])
        bp.add_url_rule(
            "/session", endpoint="check_session", view_func=self.check_session, methods=["GET"]
        )
        bp.add_url_rule("/session", endpoint="login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/session", endpoint="logout", view_func=self.logout, methods=["DELETE"])
        return bp
