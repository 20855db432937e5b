"""
Error types for Game Rental System
Every failure an action can report to the console is one of these
"""


class GameRentalError(Exception):
    """Base class for errors reported to the user"""


class DatabaseConnectionError(GameRentalError):
    """The database could not be opened; the program cannot continue"""


class DataAccessError(GameRentalError):
    """Driver level failure while running a statement"""


class ConstraintViolation(DataAccessError):
    """A uniqueness, foreign key or check constraint rejected the statement"""


class LoginTaken(ConstraintViolation):
    def __init__(self, login):
        super().__init__(f"Login '{login}' is already taken")
        self.login = login


class ValidationError(GameRentalError):
    """User input was rejected before reaching the database"""


class NotFound(GameRentalError):
    """A lookup matched no row"""


class PermissionDenied(GameRentalError):
    def __init__(self, role, permission):
        super().__init__(f"Role '{role}' is not allowed to {permission.replace('_', ' ')}")
        self.role = role
        self.permission = permission


class DataCorruption(GameRentalError):
    """Stored rows break an invariant the program relies on"""


class InputClosed(EOFError):
    """Standard input reached end of file"""
