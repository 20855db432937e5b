"""
Database management for Game Rental System
Handles SQLite connection, schema initialization and statement execution
"""
import sqlite3
from contextlib import closing, contextmanager
from tabulate import tabulate
from config import (DATABASE_NAME, DEFAULT_MANAGER_LOGIN, DEFAULT_MANAGER_PASSWORD,
                    RESULT_TABLE_FORMAT)
from errors import ConstraintViolation, DataAccessError, DatabaseConnectionError

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS Users (
        login TEXT PRIMARY KEY,
        password TEXT NOT NULL,
        role TEXT NOT NULL CHECK (role IN ('customer', 'employee', 'manager')),
        favGames TEXT,
        phoneNum TEXT,
        numOverDueGames INTEGER NOT NULL DEFAULT 0 CHECK (numOverDueGames >= 0)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS Customer (
        login TEXT PRIMARY KEY,
        FOREIGN KEY (login) REFERENCES Users (login) ON UPDATE CASCADE ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS Worker (
        login TEXT PRIMARY KEY,
        FOREIGN KEY (login) REFERENCES Users (login) ON UPDATE CASCADE ON DELETE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS Catalog (
        gameID TEXT PRIMARY KEY,
        gameName TEXT NOT NULL,
        genre TEXT,
        price NUMERIC NOT NULL CHECK (price >= 0),
        description TEXT,
        imageURL TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS RentalOrder (
        rentalOrderID INTEGER PRIMARY KEY AUTOINCREMENT,
        login TEXT NOT NULL,
        noOfGames INTEGER NOT NULL CHECK (noOfGames > 0),
        totalPrice NUMERIC NOT NULL,
        orderTimestamp TEXT NOT NULL,
        dueDate TEXT NOT NULL,
        FOREIGN KEY (login) REFERENCES Users (login) ON UPDATE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS GamesInOrder (
        rentalOrderID INTEGER NOT NULL,
        gameID TEXT NOT NULL,
        unitsOrdered INTEGER NOT NULL CHECK (unitsOrdered > 0),
        PRIMARY KEY (rentalOrderID, gameID),
        FOREIGN KEY (rentalOrderID) REFERENCES RentalOrder (rentalOrderID),
        FOREIGN KEY (gameID) REFERENCES Catalog (gameID) ON UPDATE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS TrackingInfo (
        trackingID INTEGER PRIMARY KEY AUTOINCREMENT,
        rentalOrderID INTEGER NOT NULL UNIQUE,
        status TEXT,
        currentLocation TEXT,
        courierName TEXT,
        lastUpdateDate TEXT,
        additionalComments TEXT,
        FOREIGN KEY (rentalOrderID) REFERENCES RentalOrder (rentalOrderID)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS audit_logs (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        event_type TEXT NOT NULL,
        login TEXT,
        timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
        details TEXT,
        success BOOLEAN
    )
    """
]


def database_path(database_name):
    """Map a database name to the SQLite file holding it"""
    if database_name == ":memory:" or database_name.endswith(".db"):
        return database_name
    return f"{database_name}.db"


def print_rows(rows, headers, out=None, table_format=RESULT_TABLE_FORMAT):
    """Print rows under a single header line; prints nothing for no rows"""
    if rows:
        print(tabulate(rows, headers=headers, tablefmt=table_format,
                       disable_numparse=True, missingval="null"), file=out)


def get_db_connection(database_name=DATABASE_NAME):
    """Create and return database connection"""
    try:
        conn = sqlite3.connect(database_path(database_name), isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
    except sqlite3.Error as e:
        raise DatabaseConnectionError(f"Unable to connect to database '{database_name}': {e}") from e
    return conn


class DataAccess:
    """
    Owns the single database connection of a console session
    Every statement is parameterized and runs on a cursor closed before returning
    """

    def __init__(self, conn, table_format=RESULT_TABLE_FORMAT):
        self.conn = conn
        self.table_format = table_format

    @classmethod
    def connect(cls, database_name=DATABASE_NAME):
        return cls(get_db_connection(database_name))

    @contextmanager
    def _cursor(self):
        with closing(self.conn.cursor()) as cursor:
            try:
                yield cursor
            except sqlite3.IntegrityError as e:
                raise ConstraintViolation(str(e)) from e
            except sqlite3.Error as e:
                raise DataAccessError(str(e)) from e
            except OverflowError as e:
                raise DataAccessError(str(e)) from e

    @contextmanager
    def transaction(self):
        """
        Run the enclosed statements atomically
        Rolls back on any exception; nested use joins the outer transaction
        """
        if self.conn.in_transaction:
            yield self
            return

        with self._cursor() as cursor:
            cursor.execute("BEGIN")
        try:
            yield self
        except BaseException:
            if self.conn.in_transaction:
                self.conn.execute("ROLLBACK")
            raise
        with self._cursor() as cursor:
            cursor.execute("COMMIT")

    def execute_update(self, statement, params=()):
        """Run INSERT, UPDATE or DELETE; returns the number of affected rows"""
        with self._cursor() as cursor:
            cursor.execute(statement, params)
            return cursor.rowcount

    def execute_insert(self, statement, params=()):
        """Run INSERT; returns the generated row id"""
        with self._cursor() as cursor:
            cursor.execute(statement, params)
            return cursor.lastrowid

    def execute_query(self, statement, params=()):
        """Run a query; returns the number of rows it produced"""
        with self._cursor() as cursor:
            cursor.execute(statement, params)
            return len(cursor.fetchall())

    def execute_query_rows(self, statement, params=()):
        """Run a query; returns its rows as dictionaries keyed by column name"""
        with self._cursor() as cursor:
            cursor.execute(statement, params)
            return [dict(row) for row in cursor.fetchall()]

    def execute_query_print(self, statement, params=(), out=None):
        """
        Run a query and print its rows, header line first
        Returns the number of rows printed
        """
        with self._cursor() as cursor:
            cursor.execute(statement, params)
            rows = cursor.fetchall()
            headers = [column[0] for column in cursor.description]

        print_rows([tuple(row) for row in rows], headers, out, self.table_format)
        return len(rows)

    def close(self):
        self.conn.close()


def init_database(db, out=None):
    """
    Initialize database with the rental schema
    Creates the default manager account when no user exists yet
    """
    from auth import hash_password

    with db.transaction():
        for statement in SCHEMA:
            db.execute_update(statement)

        if db.execute_query("SELECT 1 FROM Users LIMIT 1") == 0:
            db.execute_update("""
                INSERT INTO Users (login, password, role, favGames, phoneNum, numOverDueGames)
                VALUES (?, ?, 'manager', '', '', 0)
            """, (DEFAULT_MANAGER_LOGIN, hash_password(DEFAULT_MANAGER_PASSWORD)))
            db.execute_update("INSERT INTO Worker (login) VALUES (?)", (DEFAULT_MANAGER_LOGIN,))
            print(f"Default manager created: {DEFAULT_MANAGER_LOGIN} / {DEFAULT_MANAGER_PASSWORD}", file=out)

    print("Game Rental database initialized successfully", file=out)
