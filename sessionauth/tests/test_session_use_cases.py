from __future__ import annotations

from datetime import UTC, datetime, timedelta
from threading import Lock

import pytest

from sessionauth.application.services.tokens import JwtTokenService
from sessionauth.application.use_cases.session.check_session import CheckSessionUseCase
from sessionauth.application.use_cases.session.login_user import LoginUserUseCase
from sessionauth.application.use_cases.session.logout_user import LogoutUserUseCase
from sessionauth.application.use_cases.session.register_user import RegisterUserUseCase
from sessionauth.domain.users.entities import TokenRejection, User
from sessionauth.domain.users.exceptions import (
    HashingError,
    InvalidCredentialsError,
    MissingTokenError,
    TokenValidationError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from sessionauth.domain.users.repositories import PasswordHasher, UserRepository
from sessionauth.shared.errors.base import StorageError

SECRET = "use-case-secret-0123456789-abcdefghijklmnopqr"


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._seq = 1
        self._lock = Lock()

    def create(self, username: str, password_hash: str) -> User:
        with self._lock:
            if username in self._users:
                raise UserAlreadyExistsError()
            user = User(
                id=self._seq,
                username=username,
                password_hash=password_hash,
                created_at=datetime.now(UTC),
            )
            self._seq += 1
            self._users[username] = user
            return user

    def find_by_username(self, username: str) -> User:
        try:
            return self._users[username]
        except KeyError:
            raise UserNotFoundError() from None


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed.startswith("hashed:"):
            raise HashingError("malformed_hash")
        return hashed == f"hashed:{password}"


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def tokens(clock) -> JwtTokenService:
    return JwtTokenService(SECRET, clock=clock)


@pytest.fixture()
def register(users: InMemoryUserRepository, tokens: JwtTokenService) -> RegisterUserUseCase:
    return RegisterUserUseCase(users=users, tokens=tokens, password_hasher=DeterministicHasher())


@pytest.fixture()
def login(users: InMemoryUserRepository, tokens: JwtTokenService) -> LoginUserUseCase:
    return LoginUserUseCase(users=users, tokens=tokens, password_hasher=DeterministicHasher())


@pytest.fixture()
def check_session(tokens: JwtTokenService) -> CheckSessionUseCase:
    return CheckSessionUseCase(tokens=tokens)


def test_register_user_success(register: RegisterUserUseCase, users: InMemoryUserRepository) -> None:
    user, issued = register.execute("alice", "s3cret")

    assert user.username == "alice"
    assert user.password_hash == "hashed:s3cret"
    assert issued.claims.subject == "alice"
    assert users.find_by_username("alice") == user


def test_register_user_duplicate_raises(register: RegisterUserUseCase) -> None:
    register.execute("alice", "s3cret")

    with pytest.raises(UserAlreadyExistsError):
        register.execute("alice", "other")


def test_register_does_not_issue_token_when_store_fails(tokens: JwtTokenService) -> None:
    class FailingRepository(InMemoryUserRepository):
        def create(self, username: str, password_hash: str) -> User:
            raise StorageError("create_user")

    issued: list[str] = []

    class RecordingTokens:
        def issue(self, subject: str):
            issued.append(subject)
            return tokens.issue(subject)

        def validate(self, token: str):
            return tokens.validate(token)

    use_case = RegisterUserUseCase(
        users=FailingRepository(), tokens=RecordingTokens(), password_hasher=DeterministicHasher()
    )

    with pytest.raises(StorageError):
        use_case.execute("alice", "s3cret")
    assert issued == []


def test_register_then_login_then_check_session(
    register: RegisterUserUseCase,
    login: LoginUserUseCase,
    check_session: CheckSessionUseCase,
) -> None:
    register.execute("alice", "s3cret")

    issued = login.execute("alice", "s3cret")

    assert check_session.execute(issued.token).subject == "alice"


def test_login_unknown_user_and_wrong_password_fail_identically(
    register: RegisterUserUseCase, login: LoginUserUseCase
) -> None:
    register.execute("alice", "s3cret")

    with pytest.raises(InvalidCredentialsError) as unknown:
        login.execute("bob", "s3cret")
    with pytest.raises(InvalidCredentialsError) as wrong:
        login.execute("alice", "wrong")

    assert unknown.value.to_dict() == wrong.value.to_dict()
    assert unknown.value.to_dict() == {"error": "Incorrect username or password"}


def test_login_with_corrupt_stored_hash_is_storage_error(
    users: InMemoryUserRepository, login: LoginUserUseCase
) -> None:
    users.create("alice", "garbage")

    with pytest.raises(StorageError):
        login.execute("alice", "s3cret")


def test_check_session_without_token_raises(check_session: CheckSessionUseCase) -> None:
    with pytest.raises(MissingTokenError):
        check_session.execute(None)
    with pytest.raises(MissingTokenError):
        check_session.execute("")


def test_check_session_rejects_expired_token(
    register: RegisterUserUseCase, check_session: CheckSessionUseCase, clock
) -> None:
    _, issued = register.execute("alice", "s3cret")
    clock.advance(timedelta(hours=24, seconds=1))

    with pytest.raises(TokenValidationError) as excinfo:
        check_session.execute(issued.token)

    assert excinfo.value.reason is TokenRejection.EXPIRED


def test_logout_reports_subject_and_leaves_token_valid(
    register: RegisterUserUseCase, tokens: JwtTokenService, check_session: CheckSessionUseCase
) -> None:
    _, issued = register.execute("alice", "s3cret")
    logout = LogoutUserUseCase(tokens=tokens)

    assert logout.execute(issued.token) == "alice"
    # No revocation list: a replayed copy still validates after logout.
    assert check_session.execute(issued.token).subject == "alice"


def test_logout_always_succeeds(tokens: JwtTokenService) -> None:
    logout = LogoutUserUseCase(tokens=tokens)

    assert logout.execute(None) is None
    assert logout.execute("not-a-token") is None
