"""
Role Manager for Game Rental System
Resolves a user's role and keeps the role column and membership tables in step
"""
from audit import log_event
from auth import validate_login
from config import AUDIT_EVENTS, ROLE_ALIASES, ROLES
from errors import ConstraintViolation, DataCorruption, LoginTaken, NotFound, ValidationError
from permission_checker import PermissionChecker

MEMBERSHIP_TABLES = {
    'customer': 'Customer',
    'employee': 'Worker',
    'manager': 'Worker'
}


class RoleManager:
    """
    Manages role resolution, role changes and login renames
    """

    def __init__(self, db):
        self.db = db
        self.permission_checker = PermissionChecker(db)

    def resolve_role(self, login):
        """
        Determine the role of a user from membership tables and role column
        Raises DataCorruption if the two representations disagree
        """
        users = self.db.execute_query_rows("SELECT role FROM Users WHERE login = ?", (login,))
        if not users:
            raise NotFound(f"No such user '{login}'")
        role_column = users[0]['role']

        is_customer = self.db.execute_query("SELECT 1 FROM Customer WHERE login = ?", (login,)) == 1
        is_worker = self.db.execute_query("SELECT 1 FROM Worker WHERE login = ?", (login,)) == 1

        if is_customer == is_worker:
            state = "both Customer and Worker" if is_customer else "neither Customer nor Worker"
            raise DataCorruption(f"User '{login}' is listed in {state}")

        if is_customer:
            if role_column != 'customer':
                raise DataCorruption(f"User '{login}' is a Customer but has role '{role_column}'")
            return 'customer'

        if MEMBERSHIP_TABLES.get(role_column) != 'Worker':
            raise DataCorruption(f"User '{login}' is a Worker but has role '{role_column}'")
        return role_column

    def normalize_role(self, role_name):
        role_name = role_name.strip().lower()
        role_name = ROLE_ALIASES.get(role_name, role_name)
        if role_name not in ROLES:
            raise ValidationError(f"Unknown role '{role_name}'. Choose one of: {', '.join(ROLES)}")
        return role_name

    def change_role(self, session, target_login, new_role):
        """
        Move a user to another role (requires update_user permission)
        Role column and membership row change in one transaction
        """
        self.permission_checker.require(session, 'update_user')
        new_role = self.normalize_role(new_role)

        with self.db.transaction():
            updated = self.db.execute_update(
                "UPDATE Users SET role = ? WHERE login = ?", (new_role, target_login))
            if not updated:
                raise NotFound(f"No such user '{target_login}'")

            self.db.execute_update("DELETE FROM Customer WHERE login = ?", (target_login,))
            self.db.execute_update("DELETE FROM Worker WHERE login = ?", (target_login,))
            self.db.execute_update(
                f"INSERT INTO {MEMBERSHIP_TABLES[new_role]} (login) VALUES (?)", (target_login,))

        log_event(self.db, session.login, AUDIT_EVENTS["ROLE_CHANGE"],
                  details=f"Changed role of '{target_login}' to '{new_role}'")
        return new_role

    def rename_login(self, session, target_login, new_login):
        """
        Change the login of a user (requires update_user permission)
        Membership row, user row and the session identity move together
        """
        self.permission_checker.require(session, 'update_user')
        validate_login(new_login)

        table = MEMBERSHIP_TABLES[self.resolve_role(target_login)]

        try:
            with self.db.transaction():
                self.db.execute_update(f"DELETE FROM {table} WHERE login = ?", (target_login,))
                self.db.execute_update(
                    "UPDATE Users SET login = ? WHERE login = ?", (new_login, target_login))
                self.db.execute_update(f"INSERT INTO {table} (login) VALUES (?)", (new_login,))
        except ConstraintViolation as e:
            raise LoginTaken(new_login) from e

        log_event(self.db, session.login, AUDIT_EVENTS["LOGIN_CHANGE"],
                  details=f"Renamed '{target_login}' to '{new_login}'")

        if session.login == target_login:
            session.login = new_login
        return new_login
