"""
Permission Checker for Game Rental System
Handles role gating of menu actions and administrative operations
"""
from audit import log_event
from config import AUDIT_EVENTS, ROLE_PERMISSIONS
from errors import PermissionDenied


class PermissionChecker:
    """
    Verifies that a session's role grants a permission
    """

    def __init__(self, db):
        self.db = db

    def has_permission(self, role, permission):
        """Check if role grants permission; unknown roles grant nothing"""
        return permission in ROLE_PERMISSIONS.get(role, [])

    def require(self, session, permission):
        """
        Raise PermissionDenied unless the session's role grants permission
        Called before any statement of a gated operation runs
        """
        if self.has_permission(session.role, permission):
            return

        log_event(self.db, session.login, AUDIT_EVENTS["PERMISSION_CHECK"],
                  details=f"Permission denied: {permission}. Role: {session.role}", success=False)
        raise PermissionDenied(session.role, permission)
