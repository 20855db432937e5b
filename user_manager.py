"""
User Manager for Game Rental System
Handles profile self-service and administrative edits of user records
"""
from audit import log_event
from auth import hash_password, validate_password, validate_phone
from config import AUDIT_EVENTS, MAX_INTEGER
from errors import NotFound, ValidationError
from permission_checker import PermissionChecker

PROFILE_COLUMNS = ['login', 'role', 'phoneNum', 'favGames', 'numOverDueGames']


class UserManager:
    """
    User record operations
    Self-service methods act on the session's own login; admin methods
    require the update_user permission and take a target login
    """

    def __init__(self, db):
        self.db = db
        self.permission_checker = PermissionChecker(db)

    def get_profile(self, login):
        """Return the profile of a user without the password hash"""
        users = self.db.execute_query_rows(
            f"SELECT {', '.join(PROFILE_COLUMNS)} FROM Users WHERE login = ?", (login,))
        if not users:
            raise NotFound(f"No such user '{login}'")
        return users[0]

    def list_users(self, session):
        self.permission_checker.require(session, 'update_user')
        return self.db.execute_query_rows(
            f"SELECT {', '.join(PROFILE_COLUMNS)} FROM Users ORDER BY login")

    def _update_column(self, login, column, value):
        updated = self.db.execute_update(
            f"UPDATE Users SET {column} = ? WHERE login = ?", (value, login))
        if not updated:
            raise NotFound(f"No such user '{login}'")

    def _set_password(self, login, new_password, confirmation):
        if new_password != confirmation:
            raise ValidationError("Passwords do not match")
        validate_password(new_password)
        self._update_column(login, 'password', hash_password(new_password))

    # Profile self-service

    def change_password(self, session, new_password, confirmation):
        self._set_password(session.login, new_password, confirmation)
        log_event(self.db, session.login, AUDIT_EVENTS["PROFILE_UPDATE"], details="Changed password")

    def change_phone(self, session, phone):
        validate_phone(phone)
        self._update_column(session.login, 'phoneNum', phone)
        log_event(self.db, session.login, AUDIT_EVENTS["PROFILE_UPDATE"], details="Changed phone number")

    def change_favorite_games(self, session, favorite_games):
        self._update_column(session.login, 'favGames', favorite_games)
        log_event(self.db, session.login, AUDIT_EVENTS["PROFILE_UPDATE"], details="Changed favorite games")

    # Administration

    def set_overdue_count(self, session, target_login, count):
        """Set the number of overdue games of any user"""
        self.permission_checker.require(session, 'update_user')
        try:
            count = int(count)
        except (TypeError, ValueError):
            raise ValidationError("Number of overdue games must be an integer")
        if count < 0:
            raise ValidationError("Number of overdue games must not be negative")
        if count > MAX_INTEGER:
            raise ValidationError("Number of overdue games is out of range")

        self._update_column(target_login, 'numOverDueGames', count)
        log_event(self.db, session.login, AUDIT_EVENTS["USER_UPDATE"],
                  details=f"Set overdue games of '{target_login}' to {count}")

    def admin_change_password(self, session, target_login, new_password, confirmation):
        self.permission_checker.require(session, 'update_user')
        self._set_password(target_login, new_password, confirmation)
        log_event(self.db, session.login, AUDIT_EVENTS["USER_UPDATE"],
                  details=f"Changed password of '{target_login}'")

    def admin_change_favorite_games(self, session, target_login, favorite_games):
        self.permission_checker.require(session, 'update_user')
        self._update_column(target_login, 'favGames', favorite_games)
        log_event(self.db, session.login, AUDIT_EVENTS["USER_UPDATE"],
                  details=f"Changed favorite games of '{target_login}'")

    def admin_change_phone(self, session, target_login, phone):
        self.permission_checker.require(session, 'update_user')
        validate_phone(phone)
        self._update_column(target_login, 'phoneNum', phone)
        log_event(self.db, session.login, AUDIT_EVENTS["USER_UPDATE"],
                  details=f"Changed phone number of '{target_login}'")
