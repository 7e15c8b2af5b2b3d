"""Tests for the authentication service."""

import logging

import pytest
from sqlalchemy.orm import Session

from app.errors import (
    AccountDisabledError,
    EmailTakenError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    UnauthenticatedError,
    WeakPasswordError,
)
from app.models.session import AuthSession
from app.services.auth import AuthService
from app.services.patch import SetTo
from app.services.users import UserPatch

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS


def _register_alice(auth_service: AuthService, db: Session):
    return auth_service.register(db, "Alice", "alice@x.com", "Secret123!")


class TestRegister:
    """Tests for registration."""

    def test_register_then_login(self, auth_service: AuthService, db_session: Session):
        registered = _register_alice(auth_service, db_session)
        assert registered.user.email == "alice@x.com"
        assert registered.user.name == "Alice"
        assert registered.user.role == "user"
        assert registered.user_id == registered.user.id

        logged_in = auth_service.login(db_session, "alice@x.com", "Secret123!")
        assert logged_in.session_token != registered.session_token
        assert logged_in.user.id == registered.user_id

    def test_public_view_hides_hash(self, auth_service: AuthService, db_session: Session):
        registered = _register_alice(auth_service, db_session)
        assert not hasattr(registered.user, "password_hash")

    def test_register_session_lasts_thirty_days(self, auth_service: AuthService, db_session: Session, clock):
        registered = _register_alice(auth_service, db_session)
        session = auth_service.sessions.find_by_token(db_session, registered.session_token)
        assert session.expires_at == clock.now + 30 * DAY_MS

    def test_register_duplicate_email(self, auth_service: AuthService, db_session: Session):
        _register_alice(auth_service, db_session)
        with pytest.raises(EmailTakenError):
            auth_service.register(db_session, "Alice 2", "alice@x.com", "Other123!")

    def test_register_race_is_caught_by_store(self, auth_service: AuthService, db_session: Session, monkeypatch):
        """A registration that slips past the pre-check still fails with EmailTaken."""
        _register_alice(auth_service, db_session)
        monkeypatch.setattr(auth_service.users, "find_by_email", lambda db, email: None)
        with pytest.raises(EmailTakenError):
            auth_service.register(db_session, "Alice 2", "alice@x.com", "Other123!")


class TestLogin:
    """Tests for login."""

    def test_wrong_password_and_unknown_email_look_the_same(self, auth_service: AuthService, db_session: Session):
        _register_alice(auth_service, db_session)
        with pytest.raises(InvalidCredentialsError) as wrong_password:
            auth_service.login(db_session, "alice@x.com", "nope")
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            auth_service.login(db_session, "nobody@x.com", "Secret123!")
        assert wrong_password.value.kind == unknown_email.value.kind
        assert wrong_password.value.message == unknown_email.value.message

    def test_disabled_account(self, auth_service: AuthService, db_session: Session):
        registered = _register_alice(auth_service, db_session)
        auth_service.users.patch(db_session, registered.user_id, UserPatch(is_active=SetTo(False)))
        with pytest.raises(AccountDisabledError):
            auth_service.login(db_session, "alice@x.com", "Secret123!")

    @pytest.mark.parametrize(("remember_me", "ttl_ms"), [(False, DAY_MS), (True, 30 * DAY_MS)])
    def test_session_ttl(self, auth_service: AuthService, db_session: Session, clock, remember_me: bool, ttl_ms: int):
        _register_alice(auth_service, db_session)
        result = auth_service.login(db_session, "alice@x.com", "Secret123!", remember_me=remember_me)
        session = auth_service.sessions.find_by_token(db_session, result.session_token)
        assert session.expires_at - clock.now == ttl_ms

    def test_login_records_last_login(self, auth_service: AuthService, db_session: Session, clock):
        registered = _register_alice(auth_service, db_session)
        clock.advance(minutes=10)
        auth_service.login(db_session, "alice@x.com", "Secret123!")
        user = auth_service.users.find_by_id(db_session, registered.user_id)
        assert user.last_login_at == clock.now
        assert user.updated_at == clock.now

    def test_login_prunes_expired_sessions(self, auth_service: AuthService, db_session: Session, clock):
        registered = _register_alice(auth_service, db_session)
        short = auth_service.login(db_session, "alice@x.com", "Secret123!").session_token
        clock.advance(days=2)

        auth_service.login(db_session, "alice@x.com", "Secret123!")

        assert auth_service.sessions.find_by_token(db_session, short) is None
        assert auth_service.sessions.find_by_token(db_session, registered.session_token) is not None

    def test_prune_failure_does_not_fail_login(
        self, auth_service: AuthService, db_session: Session, monkeypatch, caplog
    ):
        _register_alice(auth_service, db_session)

        def broken_prune(db, user_id):
            raise RuntimeError("store unavailable")

        monkeypatch.setattr(auth_service.sessions, "prune_expired_for_user", broken_prune)
        with caplog.at_level(logging.WARNING, logger="taskboard"):
            result = auth_service.login(db_session, "alice@x.com", "Secret123!")

        assert auth_service.get_current_user(db_session, result.session_token) is not None
        assert any("Pruning expired sessions failed" in r.message for r in caplog.records)


class TestLogoutAndCurrentUser:
    """Tests for logout and session resolution."""

    def test_logout_is_idempotent(self, auth_service: AuthService, db_session: Session):
        registered = _register_alice(auth_service, db_session)
        assert auth_service.logout(db_session, registered.session_token) == {"success": True}
        assert auth_service.logout(db_session, registered.session_token) == {"success": True}
        assert auth_service.logout(db_session, "never-issued") == {"success": True}
        assert auth_service.get_current_user(db_session, registered.session_token) is None

    def test_current_user_view(self, auth_service: AuthService, db_session: Session, clock):
        registered = _register_alice(auth_service, db_session)
        user = auth_service.get_current_user(db_session, registered.session_token)
        assert user.id == registered.user_id
        assert user.email == "alice@x.com"
        assert user.created_at == clock.now

    @pytest.mark.parametrize("token", [None, "", "unknown-token"])
    def test_current_user_missing_or_unknown_token(self, auth_service: AuthService, db_session: Session, token):
        assert auth_service.get_current_user(db_session, token) is None

    def test_current_user_expired_session(self, auth_service: AuthService, db_session: Session, clock):
        _register_alice(auth_service, db_session)
        token = auth_service.login(db_session, "alice@x.com", "Secret123!").session_token
        clock.advance(ms=DAY_MS - 1)
        assert auth_service.get_current_user(db_session, token) is not None
        clock.advance(ms=1)
        assert auth_service.get_current_user(db_session, token) is None
        # Still stored until pruned
        assert db_session.query(AuthSession).filter(AuthSession.token == token).count() == 1

    def test_current_user_inactive(self, auth_service: AuthService, db_session: Session):
        registered = _register_alice(auth_service, db_session)
        auth_service.users.patch(db_session, registered.user_id, UserPatch(is_active=SetTo(False)))
        assert auth_service.get_current_user(db_session, registered.session_token) is None


class TestUpdateProfile:
    """Tests for profile updates."""

    def test_update_name_and_email(self, auth_service: AuthService, db_session: Session):
        registered = _register_alice(auth_service, db_session)
        user = auth_service.update_profile(db_session, registered.session_token, "Alicia", "alicia@x.com")
        assert user.name == "Alicia"
        assert user.email == "alicia@x.com"
        assert auth_service.login(db_session, "alicia@x.com", "Secret123!").user.id == registered.user_id

    def test_unknown_session(self, auth_service: AuthService, db_session: Session):
        with pytest.raises(UnauthenticatedError):
            auth_service.update_profile(db_session, "bogus", "Alice", "alice@x.com")

    def test_expired_session(self, auth_service: AuthService, db_session: Session, clock):
        registered = _register_alice(auth_service, db_session)
        clock.advance(days=31)
        with pytest.raises(UnauthenticatedError):
            auth_service.update_profile(db_session, registered.session_token, "Alice", "alice@x.com")

    def test_email_taken(self, auth_service: AuthService, db_session: Session):
        _register_alice(auth_service, db_session)
        bob = auth_service.register(db_session, "Bob", "bob@x.com", "Bob12345!")
        with pytest.raises(EmailTakenError):
            auth_service.update_profile(db_session, bob.session_token, "Bob", "alice@x.com")

    def test_keeping_own_email_is_not_a_conflict(self, auth_service: AuthService, db_session: Session):
        registered = _register_alice(auth_service, db_session)
        user = auth_service.update_profile(db_session, registered.session_token, "Alice B.", "alice@x.com")
        assert user.name == "Alice B."

    def test_password_change(self, auth_service: AuthService, db_session: Session):
        registered = _register_alice(auth_service, db_session)
        other = auth_service.login(db_session, "alice@x.com", "Secret123!").session_token

        auth_service.update_profile(
            db_session,
            registered.session_token,
            "Alice",
            "alice@x.com",
            current_password="Secret123!",
            new_password="Changed456!",
        )

        with pytest.raises(InvalidCredentialsError):
            auth_service.login(db_session, "alice@x.com", "Secret123!")
        auth_service.login(db_session, "alice@x.com", "Changed456!")
        # Unlike a reset, changing the password here keeps other sessions
        assert auth_service.get_current_user(db_session, other) is not None

    def test_wrong_current_password(self, auth_service: AuthService, db_session: Session):
        registered = _register_alice(auth_service, db_session)
        with pytest.raises(InvalidCredentialsError):
            auth_service.update_profile(
                db_session,
                registered.session_token,
                "Renamed",
                "alice@x.com",
                current_password="wrong",
                new_password="Changed456!",
            )
        assert auth_service.get_current_user(db_session, registered.session_token).name == "Alice"

    def test_new_password_without_current_is_ignored(self, auth_service: AuthService, db_session: Session):
        registered = _register_alice(auth_service, db_session)
        auth_service.update_profile(
            db_session, registered.session_token, "Alice", "alice@x.com", new_password="Changed456!"
        )
        auth_service.login(db_session, "alice@x.com", "Secret123!")


class TestPasswordReset:
    """Tests for forgot/reset password."""

    def test_forgot_password_responses_are_identical(
        self, auth_service: AuthService, db_session: Session, delivery
    ):
        _register_alice(auth_service, db_session)
        known = auth_service.forgot_password(db_session, "alice@x.com")
        unknown = auth_service.forgot_password(db_session, "unknown@x.com")
        assert known == unknown == {"success": True}
        assert len(delivery.delivered) == 1

    def test_delivery_failure_is_hidden(self, auth_service: AuthService, db_session: Session, monkeypatch):
        _register_alice(auth_service, db_session)

        def broken_deliver(user, token):
            raise ConnectionError("smtp down")

        monkeypatch.setattr(auth_service.delivery, "deliver", broken_deliver)
        assert auth_service.forgot_password(db_session, "alice@x.com") == {"success": True}

    def test_validate_reset_token(self, auth_service: AuthService, db_session: Session, delivery):
        _register_alice(auth_service, db_session)
        auth_service.forgot_password(db_session, "alice@x.com")
        _, token = delivery.delivered[0]
        assert auth_service.validate_reset_token(db_session, token) == {"valid": True}
        assert auth_service.validate_reset_token(db_session, "bogus") == {"valid": False}

    def test_expired_reset_token(self, auth_service: AuthService, db_session: Session, delivery, clock):
        _register_alice(auth_service, db_session)
        auth_service.forgot_password(db_session, "alice@x.com")
        _, token = delivery.delivered[0]

        clock.advance(hours=1, seconds=1)

        with pytest.raises(InvalidOrExpiredTokenError):
            auth_service.reset_password(db_session, token, "NewPass1!")

    def test_reset_replaces_password(self, auth_service: AuthService, db_session: Session, delivery):
        _register_alice(auth_service, db_session)
        auth_service.forgot_password(db_session, "alice@x.com")
        _, token = delivery.delivered[0]

        assert auth_service.reset_password(db_session, token, "NewPass1!") == {"success": True}

        with pytest.raises(InvalidCredentialsError):
            auth_service.login(db_session, "alice@x.com", "Secret123!")
        assert auth_service.login(db_session, "alice@x.com", "NewPass1!").user.email == "alice@x.com"

    def test_reset_token_is_single_use(self, auth_service: AuthService, db_session: Session, delivery):
        _register_alice(auth_service, db_session)
        auth_service.forgot_password(db_session, "alice@x.com")
        _, token = delivery.delivered[0]

        auth_service.reset_password(db_session, token, "NewPass1!")
        with pytest.raises(InvalidOrExpiredTokenError):
            auth_service.reset_password(db_session, token, "Another1!")
        assert auth_service.validate_reset_token(db_session, token) == {"valid": False}

    def test_reset_revokes_every_session(self, auth_service: AuthService, db_session: Session, delivery):
        registered = _register_alice(auth_service, db_session)
        first = auth_service.login(db_session, "alice@x.com", "Secret123!").session_token
        second = auth_service.login(db_session, "alice@x.com", "Secret123!", remember_me=True).session_token

        auth_service.forgot_password(db_session, "alice@x.com")
        _, token = delivery.delivered[0]
        auth_service.reset_password(db_session, token, "NewPass1!")

        for session_token in (registered.session_token, first, second):
            assert auth_service.get_current_user(db_session, session_token) is None

    def test_reset_leaves_other_users_signed_in(self, auth_service: AuthService, db_session: Session, delivery):
        _register_alice(auth_service, db_session)
        bob = auth_service.register(db_session, "Bob", "bob@x.com", "Bob12345!")

        auth_service.forgot_password(db_session, "alice@x.com")
        _, token = delivery.delivered[0]
        auth_service.reset_password(db_session, token, "NewPass1!")

        assert auth_service.get_current_user(db_session, bob.session_token) is not None


class TestPasswordLimits:
    """Passwords bcrypt cannot hash are refused before anything is written."""

    TOO_LONG = "p" * 73

    def test_register(self, auth_service: AuthService, db_session: Session):
        with pytest.raises(WeakPasswordError):
            auth_service.register(db_session, "Alice", "alice@x.com", self.TOO_LONG)
        assert auth_service.users.find_by_email(db_session, "alice@x.com") is None

    def test_update_profile(self, auth_service: AuthService, db_session: Session):
        registered = _register_alice(auth_service, db_session)
        with pytest.raises(WeakPasswordError):
            auth_service.update_profile(
                db_session,
                registered.session_token,
                "Renamed",
                "alice@x.com",
                current_password="Secret123!",
                new_password=self.TOO_LONG,
            )
        assert auth_service.get_current_user(db_session, registered.session_token).name == "Alice"
        auth_service.login(db_session, "alice@x.com", "Secret123!")

    def test_reset_password(self, auth_service: AuthService, db_session: Session, delivery):
        registered = _register_alice(auth_service, db_session)
        auth_service.forgot_password(db_session, "alice@x.com")
        _, token = delivery.delivered[0]

        with pytest.raises(WeakPasswordError):
            auth_service.reset_password(db_session, token, self.TOO_LONG)

        assert auth_service.validate_reset_token(db_session, token) == {"valid": True}
        assert auth_service.get_current_user(db_session, registered.session_token) is not None
        auth_service.login(db_session, "alice@x.com", "Secret123!")


class TestListSessions:
    """Tests for listing a user's signed-in devices."""

    def test_lists_active_sessions_newest_first(self, auth_service: AuthService, db_session: Session, clock):
        registered = _register_alice(auth_service, db_session)
        clock.advance(minutes=1)
        phone = auth_service.login(db_session, "alice@x.com", "Secret123!", user_agent="phone").session_token

        sessions = auth_service.list_sessions(db_session, phone)
        assert [s.user_agent for s in sessions] == ["phone", None]
        assert [s.current for s in sessions] == [True, False]
        assert auth_service.list_sessions(db_session, registered.session_token)[1].current is True

    def test_expired_sessions_are_left_out(self, auth_service: AuthService, db_session: Session, clock):
        registered = _register_alice(auth_service, db_session)
        auth_service.login(db_session, "alice@x.com", "Secret123!")
        clock.advance(hours=25)

        sessions = auth_service.list_sessions(db_session, registered.session_token)
        assert len(sessions) == 1
        assert sessions[0].current is True

    def test_requires_a_valid_session(self, auth_service: AuthService, db_session: Session):
        with pytest.raises(UnauthenticatedError):
            auth_service.list_sessions(db_session, "bogus")
        with pytest.raises(UnauthenticatedError):
            auth_service.list_sessions(db_session, None)
