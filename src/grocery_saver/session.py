"""Guest and signed-in session handling.

The session decides whose grocery list the app works on: the guest list kept
on this device, or the signed-in user's list. Verifying credentials is left to
whatever identity provider sits in front of the app; signing in here only
selects the user's list.
"""

import json
import logging
from datetime import datetime
from pathlib import Path

from .data_store import JSONEncoder, json_decoder
from .models import Session, SessionMode

logger = logging.getLogger(__name__)


class NotSignedInError(Exception):
    """Raised when an operation needs a session and there is none."""

    def __init__(self, message: str = "Please log in to view groceries."):
        super().__init__(message)


class InvalidLoginError(Exception):
    """Raised when a sign-in request is malformed."""


class SessionManager:
    """Stores the active session next to the app's data."""

    def __init__(self, data_dir: Path | None = None):
        """Initialize session manager.

        Args:
            data_dir: Directory holding the session file. Defaults to ./data
        """
        self.data_dir = data_dir or Path.cwd() / "data"
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _session_path(self) -> Path:
        return self.data_dir / "current_session.json"

    def current(self) -> Session:
        """Return the active session, or an inactive one."""
        path = self._session_path()
        if not path.exists():
            return Session()

        with open(path) as f:
            data = json.load(f, object_hook=json_decoder)
        return Session(**data)

    def _save(self, session: Session) -> Session:
        with open(self._session_path(), "w") as f:
            json.dump(session.model_dump(), f, cls=JSONEncoder, indent=2)
        return session

    def continue_as_guest(self) -> Session:
        """Start a guest session backed by the local guest list."""
        logger.info("Starting guest session")
        return self._save(Session(mode=SessionMode.GUEST, started_at=datetime.now()))

    def login(self, email: str) -> Session:
        """Sign in as a user.

        Args:
            email: The user's email address

        Raises:
            InvalidLoginError: If the email is empty or malformed
        """
        email = email.strip()
        if not email or "@" not in email:
            raise InvalidLoginError(f"'{email}' is not a valid email address")

        logger.info("Signing in %s", email)
        return self._save(Session(mode=SessionMode.USER, user=email, started_at=datetime.now()))

    def sign_out(self) -> Session:
        """End the current session, guest or user."""
        path = self._session_path()
        if path.exists():
            path.unlink()
        logger.info("Signed out")
        return Session()

    def require_owner(self) -> str | None:
        """Owner key for the active session's grocery list.

        Returns:
            The user's email, or None for the guest list

        Raises:
            NotSignedInError: If nobody is signed in
        """
        session = self.current()
        if session.mode == SessionMode.GUEST:
            return None
        if session.mode == SessionMode.USER and session.user:
            return session.user
        raise NotSignedInError()
