# tests/unit/services/test_auth_service.py
from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import pytest

from marketplace.infra.security.password_hasher import WerkzeugPasswordHasher
from marketplace.services._shared.errors import (
    InvalidCredentialsError,
    InvalidInputError,
    UserExistsError,
    UserNotFoundError,
)
from marketplace.services._shared.ports import InMemoryUserDirectory, StubTokenManager
from marketplace.services.auth.dto import (
    AuthTokenConfig,
    RefreshIn,
    SignInIn,
    SignUpIn,
    TokenPairOut,
    UserPublicOut,
)
from marketplace.services.auth.service import AuthService
from marketplace.uow import InMemoryUnitOfWork

T0 = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


class SpyHasher(WerkzeugPasswordHasher):
    """Werkzeug hasher that counts calls."""

    def __init__(self) -> None:
        super().__init__(method="pbkdf2:sha256:1000")
        object.__setattr__(self, "calls", {"hash": 0, "check": 0})

    def hash(self, plain: str) -> str:
        self.calls["hash"] += 1
        return super().hash(plain)

    def check(self, plain: str, digest: str) -> bool:
        self.calls["check"] += 1
        return super().check(plain, digest)


class Clock:
    """Mutable clock injected into the service."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class BrokenSessionDirectory(InMemoryUserDirectory):
    def set_session(self, user_id, session):
        raise RuntimeError("storage unavailable")


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def uow() -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork()


@pytest.fixture()
def hasher() -> SpyHasher:
    return SpyHasher()


@pytest.fixture()
def clock() -> Clock:
    return Clock(T0)


@pytest.fixture()
def tokens() -> StubTokenManager:
    return StubTokenManager(now=T0)


@pytest.fixture()
def service(uow, hasher, tokens, clock) -> AuthService:
    """AuthService wired to in-memory doubles."""
    return AuthService(
        hasher=hasher,
        token_manager=tokens,
        uow_factory=lambda: uow,
        clock=clock,
    )


@pytest.fixture()
def alice(service) -> UserPublicOut:
    return service.sign_up(SignUpIn(login="alice", password="secret123"))


# -------------------------------- Sign-up --------------------------------- #
class TestSignUp:
    def test_returns_user_without_password_hash(self, service):
        out = service.sign_up(SignUpIn(login="alice", password="secret123"))

        assert isinstance(out, UserPublicOut)
        assert out.login == "alice"
        assert out.id > 0
        assert out.created_at is not None
        assert not hasattr(out, "password_hash")

    def test_stores_a_hash_not_the_password(self, service, uow, hasher):
        out = service.sign_up(SignUpIn(login="alice", password="secret123"))

        stored = uow.users.get_by_id(out.id)
        assert stored.password_hash != "secret123"
        assert hasher.check("secret123", stored.password_hash)

    @pytest.mark.parametrize("password", ["secret123", "totally-different"])
    def test_duplicate_login_fails_regardless_of_password(self, service, alice, password):
        with pytest.raises(UserExistsError):
            service.sign_up(SignUpIn(login="alice", password=password))

    @pytest.mark.parametrize("login", ["abc", "a" * 30])
    def test_login_length_bounds_accepted(self, service, login):
        assert service.sign_up(SignUpIn(login=login, password="secret123")).login == login

    @pytest.mark.parametrize(
        ("login", "password", "field"),
        [
            ("ab", "secret123", "login"),
            ("a" * 31, "secret123", "login"),
            ("", "secret123", "login"),
            ("alice", "12345", "password"),
            ("alice", "", "password"),
        ],
    )
    def test_invalid_input_rejected_before_storage(self, service, uow, hasher, login, password, field):
        with pytest.raises(InvalidInputError) as exc:
            service.sign_up(SignUpIn(login=login, password=password))

        assert exc.value.field == field
        assert hasher.calls["hash"] == 0
        assert uow.commits == 0

    def test_password_of_exactly_six_chars_is_accepted(self, service):
        assert service.sign_up(SignUpIn(login="alice", password="123456")).login == "alice"


# -------------------------------- Sign-in --------------------------------- #
class TestSignIn:
    def test_issues_pair_and_stores_session(self, service, uow, tokens, alice):
        pair = service.sign_in(SignInIn(login="alice", password="secret123"))

        assert isinstance(pair, TokenPairOut)
        assert tokens.parse_access_token(pair.access_token) == alice.id
        session = uow.users.session_of(alice.id)
        assert session.refresh_token == pair.refresh_token
        assert session.expires_at == T0 + timedelta(days=30)
        assert uow.users.get_by_id(alice.id).last_visit_at is not None

    def test_wrong_password_and_unknown_login_fail_identically(self, service, alice):
        with pytest.raises(InvalidCredentialsError) as wrong_password:
            service.sign_in(SignInIn(login="alice", password="nope-nope"))
        with pytest.raises(InvalidCredentialsError) as unknown_login:
            service.sign_in(SignInIn(login="mallory", password="secret123"))

        assert type(wrong_password.value) is type(unknown_login.value)
        assert str(wrong_password.value) == str(unknown_login.value)

    def test_unknown_login_still_runs_a_hash_check(self, service, hasher):
        with pytest.raises(InvalidCredentialsError):
            service.sign_in(SignInIn(login="mallory", password="secret123"))
        assert hasher.calls["check"] == 1

    def test_injected_timing_digest_avoids_hashing(self, uow, hasher, tokens, clock):
        digest = WerkzeugPasswordHasher(method="pbkdf2:sha256:1000").hash("placeholder")
        service = AuthService(
            hasher=hasher,
            token_manager=tokens,
            uow_factory=lambda: uow,
            clock=clock,
            timing_digest=digest,
        )

        for _ in range(2):
            with pytest.raises(InvalidCredentialsError):
                service.sign_in(SignInIn(login="mallory", password="secret123"))

        assert hasher.calls == {"hash": 0, "check": 2}

    def test_failed_sign_in_leaves_session_untouched(self, service, uow, alice):
        first = service.sign_in(SignInIn(login="alice", password="secret123"))
        with pytest.raises(InvalidCredentialsError):
            service.sign_in(SignInIn(login="alice", password="wrong-pass"))

        assert uow.users.session_of(alice.id).refresh_token == first.refresh_token

    def test_new_sign_in_supersedes_previous_session(self, service, alice):
        first = service.sign_in(SignInIn(login="alice", password="secret123"))
        service.sign_in(SignInIn(login="alice", password="secret123"))

        with pytest.raises(UserNotFoundError):
            service.refresh_tokens(RefreshIn(refresh_token=first.refresh_token))

    def test_custom_ttls_are_applied(self, uow, hasher, tokens, clock):
        svc = AuthService(
            hasher=hasher,
            token_manager=tokens,
            token_cfg=AuthTokenConfig(
                access_expires=timedelta(seconds=0), refresh_expires=timedelta(hours=2)
            ),
            uow_factory=lambda: uow,
            clock=clock,
        )
        user = svc.sign_up(SignUpIn(login="alice", password="secret123"))
        svc.sign_in(SignInIn(login="alice", password="secret123"))

        assert uow.users.session_of(user.id).expires_at == T0 + timedelta(hours=2)

    def test_storage_failure_returns_no_tokens_and_is_logged(self, hasher, tokens, clock, caplog):
        uow = InMemoryUnitOfWork(users=BrokenSessionDirectory())
        svc = AuthService(hasher=hasher, token_manager=tokens, uow_factory=lambda: uow, clock=clock)
        user = svc.sign_up(SignUpIn(login="alice", password="secret123"))

        with caplog.at_level(logging.ERROR), pytest.raises(RuntimeError, match="storage"):
            svc.sign_in(SignInIn(login="alice", password="secret123"))

        assert uow.users.session_of(user.id) is None
        failed = [r for r in caplog.records if r.getMessage() == "operation failed"]
        assert failed and failed[0].op == "auth.sign_in"


# -------------------------------- Refresh --------------------------------- #
class TestRefresh:
    def test_rotates_exactly_once(self, service, alice):
        pair1 = service.sign_in(SignInIn(login="alice", password="secret123"))

        pair2 = service.refresh_tokens(RefreshIn(refresh_token=pair1.refresh_token))
        assert pair2.refresh_token != pair1.refresh_token
        assert pair2.access_token != pair1.access_token

        with pytest.raises(UserNotFoundError):
            service.refresh_tokens(RefreshIn(refresh_token=pair1.refresh_token))

        pair3 = service.refresh_tokens(RefreshIn(refresh_token=pair2.refresh_token))
        assert pair3.refresh_token not in {pair1.refresh_token, pair2.refresh_token}

    def test_empty_token_is_invalid_input(self, service):
        with pytest.raises(InvalidInputError) as exc:
            service.refresh_tokens(RefreshIn(refresh_token=""))
        assert exc.value.field == "refresh_token"

    def test_unknown_token_is_not_found(self, service, alice):
        with pytest.raises(UserNotFoundError):
            service.refresh_tokens(RefreshIn(refresh_token="refresh.never-issued"))

    def test_expired_session_is_not_found(self, service, clock, alice):
        pair = service.sign_in(SignInIn(login="alice", password="secret123"))

        clock.now = T0 + timedelta(days=30)
        with pytest.raises(UserNotFoundError):
            service.refresh_tokens(RefreshIn(refresh_token=pair.refresh_token))

    def test_session_valid_just_before_expiry(self, service, clock, alice):
        pair = service.sign_in(SignInIn(login="alice", password="secret123"))

        clock.now = T0 + timedelta(days=30) - timedelta(seconds=1)
        assert service.refresh_tokens(RefreshIn(refresh_token=pair.refresh_token))


# -------------------------------- Queries --------------------------------- #
class TestGetUser:
    def test_returns_public_user(self, service, alice):
        assert service.get_user(alice.id) == alice

    def test_unknown_user_raises(self, service):
        with pytest.raises(UserNotFoundError):
            service.get_user(404)
