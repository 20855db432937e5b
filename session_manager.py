"""
Session Manager for Game Rental System
Holds the authenticated identity and its resolved role for one login
"""
from datetime import datetime
from audit import log_event
from config import AUDIT_EVENTS
from role_manager import RoleManager


class Session:
    """Identity and role of the user currently logged in"""

    def __init__(self, login, role):
        self.login = login
        self.role = role
        self.login_time = datetime.now()

    def __repr__(self):
        return f"Session(login={self.login!r}, role={self.role!r})"


class SessionManager:
    """
    Manages the session lifecycle and keeps its role current
    """

    def __init__(self, db):
        self.db = db
        self.role_manager = RoleManager(db)

    def start_session(self, login):
        """Create a session for an authenticated login"""
        role = self.role_manager.resolve_role(login)
        log_event(self.db, login, AUDIT_EVENTS["SESSION_START"], details=f"Session started as {role}")
        return Session(login, role)

    def refresh_session(self, session):
        """
        Re-resolve the role of the session's login
        Returns True if it changed, so the menu can be redrawn
        """
        role = self.role_manager.resolve_role(session.login)
        if role == session.role:
            return False
        session.role = role
        return True

    def end_session(self, session):
        duration = datetime.now() - session.login_time
        log_event(self.db, session.login, AUDIT_EVENTS["USER_LOGOUT"],
                  details=f"Session ended after {int(duration.total_seconds())}s")
