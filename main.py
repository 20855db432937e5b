"""
Main entry point for Game Rental System
Connects to the rental database and runs the menu state machine
"""
import argparse
import sys
from enum import Enum
from audit import log_event
from auth import login_user, register_user
from config import AUDIT_EVENTS, EXIT_CHOICE, LOGIN_CHOICE, REGISTER_CHOICE
from console_io import ConsoleIO
from database import DataAccess, init_database
from errors import DataAccessError, DatabaseConnectionError, GameRentalError, InputClosed
from session_manager import SessionManager
from user_console import UserConsole


class MenuState(Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
    TERMINATED = "terminated"


def display_welcome(io):
    """Display welcome banner"""
    io.write("\n\n" + "*" * 55)
    io.write("              GAME RENTAL - User Interface")
    io.write("*" * 55 + "\n")


class MainMenu:
    """
    Anonymous menu (register, log in, exit) and the hand-over to the user console
    Owns the session's database handle and console streams
    """

    def __init__(self, db, io):
        self.db = db
        self.io = io
        self.session_manager = SessionManager(db)
        self.user_console = UserConsole(db, io)
        self.state = MenuState.ANONYMOUS
        self.session = None

    def display_main_menu(self):
        self.io.write("MAIN MENU")
        self.io.write("---------")
        self.io.write(f"{REGISTER_CHOICE}. Create user")
        self.io.write(f"{LOGIN_CHOICE}. Log in")
        self.io.write(f"{EXIT_CHOICE}. < EXIT")

    def handle_register(self):
        login = self.io.prompt("\tEnter login: ").strip()
        password = self.io.prompt("\tEnter password: ")
        phone = self.io.prompt("\tEnter phone number: ").strip()
        favorite_games = self.io.prompt("\tFavorite games (0 for blank): ").strip()

        register_user(self.db, login, password, phone, favorite_games)
        self.io.write(f"User '{login}' registered. You can now log in.")

    def handle_login(self):
        login = self.io.prompt("\tEnter login: ").strip()
        password = self.io.prompt("\tEnter password: ")

        authorised_user = login_user(self.db, login, password)
        if authorised_user is None:
            self.io.write("Login failed. Please check credentials and try again.")
            return

        self.session = self.session_manager.start_session(authorised_user)
        self.state = MenuState.AUTHENTICATED
        self.io.write(f"Welcome {self.session.login}! Role: {self.session.role}")

    def run_anonymous(self):
        """One round of the anonymous menu"""
        self.display_main_menu()
        choice = self.io.read_choice()

        try:
            if choice == REGISTER_CHOICE:
                self.handle_register()
            elif choice == LOGIN_CHOICE:
                self.handle_login()
            elif choice == EXIT_CHOICE:
                self.state = MenuState.TERMINATED
            else:
                self.io.write("Unrecognized choice!")
        except GameRentalError as e:
            self.io.write(f"Error: {e}")
        except InputClosed:
            raise
        except Exception as e:
            self.io.write(f"System error: {e}")

    def run(self):
        """Drive the menu state machine until the user exits or input ends"""
        while self.state != MenuState.TERMINATED:
            if self.state == MenuState.ANONYMOUS:
                try:
                    self.run_anonymous()
                except (InputClosed, KeyboardInterrupt):
                    self.state = MenuState.TERMINATED
            else:
                exit_requested = self.user_console.run_user_console(self.session)
                self.session = None
                self.state = MenuState.TERMINATED if exit_requested else MenuState.ANONYMOUS


def port_number(value):
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port '{value}'")
    if not 0 < port < 65536:
        raise argparse.ArgumentTypeError(f"port {port} out of range")
    return port


def non_empty(value):
    if not value.strip():
        raise argparse.ArgumentTypeError("must not be empty")
    return value


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="gamerental", description="Game rental store console")
    parser.add_argument("dbname", type=non_empty, help="database name (SQLite file)")
    parser.add_argument("port", type=port_number, help="database port")
    parser.add_argument("user", type=non_empty, help="database user")
    return parser.parse_args(argv)


def main(argv=None, stdin=None, stdout=None):
    """
    Main function - connects to the database and runs the menus
    Returns the process exit status
    """
    args = parse_args(argv)
    io = ConsoleIO(stdin, stdout)
    display_welcome(io)

    io.write(f"Connecting to database '{args.dbname}'...")
    try:
        db = DataAccess.connect(args.dbname)
    except DatabaseConnectionError as e:
        print(f"Error - Unable to connect to database: {e}", file=sys.stderr)
        return 1
    try:
        init_database(db, out=io.stdout)
    except DataAccessError as e:
        print(f"Error - Unable to initialize database: {e}", file=sys.stderr)
        db.close()
        return 1
    io.write("Done")

    log_event(db, None, AUDIT_EVENTS["DATABASE_CONNECT"],
              details=f"Operator {args.user} connected on port {args.port}")
    try:
        MainMenu(db, io).run()
    finally:
        io.write("Disconnecting from database...")
        log_event(db, None, AUDIT_EVENTS["DATABASE_DISCONNECT"], details=f"Operator {args.user}")
        db.close()
        io.write("Done\n\nBye !")
    return 0


if __name__ == "__main__":
    sys.exit(main())
