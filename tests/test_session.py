"""Tests for guest and user sessions."""

import pytest

from grocery_saver.models import SessionMode
from grocery_saver.session import InvalidLoginError, NotSignedInError, SessionManager


class TestSessionManager:
    """Tests for SessionManager."""

    def test_no_session_by_default(self, session_manager):
        """A fresh data directory has no active session."""
        session = session_manager.current()
        assert session.mode == SessionMode.NONE
        assert not session.is_active

    def test_continue_as_guest(self, session_manager):
        """Guest mode persists across managers."""
        session_manager.continue_as_guest()

        session = SessionManager(data_dir=session_manager.data_dir).current()
        assert session.mode == SessionMode.GUEST
        assert session.is_active
        assert session.started_at is not None

    def test_login(self, session_manager):
        """Login stores the trimmed email."""
        session_manager.login("  ana@example.com ")

        session = session_manager.current()
        assert session.mode == SessionMode.USER
        assert session.user == "ana@example.com"

    @pytest.mark.parametrize("email", ["", "   ", "not-an-email"])
    def test_login_rejects_bad_email(self, session_manager, email):
        """Malformed emails are rejected."""
        with pytest.raises(InvalidLoginError):
            session_manager.login(email)
        assert not session_manager.current().is_active

    def test_sign_out(self, session_manager):
        """Sign out clears any session."""
        session_manager.login("ana@example.com")
        session = session_manager.sign_out()

        assert not session.is_active
        assert not session_manager.current().is_active

    def test_sign_out_without_session(self, session_manager):
        """Signing out twice is harmless."""
        session_manager.sign_out()
        assert session_manager.sign_out().mode == SessionMode.NONE


class TestRequireOwner:
    """Tests for resolving whose list to use."""

    def test_guest_owner_is_none(self, session_manager):
        """Guests use the shared guest list."""
        session_manager.continue_as_guest()
        assert session_manager.require_owner() is None

    def test_user_owner_is_email(self, session_manager):
        """Users use their own list."""
        session_manager.login("ana@example.com")
        assert session_manager.require_owner() == "ana@example.com"

    def test_no_session_raises(self, session_manager):
        """Without a session there is no list to use."""
        with pytest.raises(NotSignedInError, match="Please log in to view groceries."):
            session_manager.require_owner()
