# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services.password_hashing import WerkzeugPasswordHasher
from .services.tokens import JwtTokenService, TokenPayload, utc_now
from .use_cases.session.check_session import CheckSessionUseCase
from .use_cases.session.login_user import LoginUserUseCase
from .use_cases.session.logout_user import LogoutUserUseCase
from .use_cases.session.register_user import RegisterUserUseCase

__all__ = [
    "WerkzeugPasswordHasher",
    "JwtTokenService",
    "TokenPayload",
    "utc_now",
    "CheckSessionUseCase",
    "LoginUserUseCase",
    "LogoutUserUseCase",
    "RegisterUserUseCase",
]
