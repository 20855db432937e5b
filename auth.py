"""
Authentication module for Game Rental System
Handles user registration, login and password hashing
"""
import hashlib
import hmac
import secrets
from audit import log_event
from config import (AUDIT_EVENTS, BLANK_FAVORITE_GAMES, DEFAULT_ROLE, MAX_LOGIN_LENGTH,
                    MAX_PASSWORD_LENGTH, MAX_PHONE_LENGTH, PASSWORD_HASH_ITERATIONS)
from errors import ConstraintViolation, LoginTaken, ValidationError

HASH_ALGORITHM = "pbkdf2_sha256"


def hash_password(password, salt=None, iterations=PASSWORD_HASH_ITERATIONS):
    """Return a salted PBKDF2 hash in the form algorithm$iterations$salt$digest"""
    if salt is None:
        salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), iterations)
    return f"{HASH_ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_password(password, stored_hash):
    try:
        algorithm, iterations, salt, _ = stored_hash.split("$")
        iterations = int(iterations)
    except (AttributeError, ValueError):
        return False
    if algorithm != HASH_ALGORITHM:
        return False
    return hmac.compare_digest(hash_password(password, salt, iterations), stored_hash)


def validate_login(login):
    if not login:
        raise ValidationError("Login must not be empty")
    if len(login) > MAX_LOGIN_LENGTH:
        raise ValidationError(f"Login must be at most {MAX_LOGIN_LENGTH} characters")


def validate_password(password):
    if not password:
        raise ValidationError("Password must not be empty")
    if len(password) > MAX_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_LENGTH} characters")


def validate_phone(phone):
    if len(phone) > MAX_PHONE_LENGTH:
        raise ValidationError(f"Phone number must be at most {MAX_PHONE_LENGTH} characters")


def register_user(db, login, password, phone, favorite_games):
    """
    Register a new customer account
    Returns the login on success, raises LoginTaken if it already exists
    """
    validate_login(login)
    validate_password(password)
    validate_phone(phone)
    if favorite_games == BLANK_FAVORITE_GAMES:
        favorite_games = ""

    if db.execute_query("SELECT 1 FROM Users WHERE login = ?", (login,)):
        log_event(db, None, AUDIT_EVENTS["USER_REGISTER"],
                  details=f"Login {login} already taken", success=False)
        raise LoginTaken(login)

    try:
        with db.transaction():
            db.execute_update("""
                INSERT INTO Users (login, password, role, favGames, phoneNum, numOverDueGames)
                VALUES (?, ?, ?, ?, ?, 0)
            """, (login, hash_password(password), DEFAULT_ROLE, favorite_games, phone))
            db.execute_update("INSERT INTO Customer (login) VALUES (?)", (login,))
    except ConstraintViolation as e:
        log_event(db, None, AUDIT_EVENTS["USER_REGISTER"],
                  details=f"Failed to register {login}: {e}", success=False)
        raise LoginTaken(login) from e

    log_event(db, login, AUDIT_EVENTS["USER_REGISTER"], details=f"User {login} registered")
    return login


def login_user(db, login, password):
    """
    Check credentials of an existing user
    Returns the login on success, None on any mismatch
    """
    users = db.execute_query_rows("SELECT login, password FROM Users WHERE login = ?", (login,))

    if len(users) != 1:
        log_event(db, None, AUDIT_EVENTS["USER_LOGIN"], details=f"User {login} not found", success=False)
        return None

    if not verify_password(password, users[0]['password']):
        log_event(db, login, AUDIT_EVENTS["USER_LOGIN"], details="Invalid password", success=False)
        return None

    log_event(db, login, AUDIT_EVENTS["USER_LOGIN"], details="Login successful")
    return users[0]['login']
