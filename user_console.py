"""
User Console for Game Rental System
Authenticated menu: profile, catalog, orders and tracking, plus role-gated administration
"""
from tabulate import tabulate
from admin_console import AdminConsole
from catalog_manager import CATALOG_COLUMNS, CatalogManager
from config import LOGOUT_CHOICE, RECENT_ORDERS_LIMIT, USER_MENU
from database import print_rows
from errors import DataCorruption, GameRentalError, InputClosed, NotFound
from order_manager import OrderManager
from permission_checker import PermissionChecker
from session_manager import SessionManager
from tracking_manager import TrackingManager
from user_manager import UserManager


class UserConsole:
    """
    User interface for one authenticated session
    Menu entries the session's role cannot use are hidden and refused
    """

    def __init__(self, db, io):
        self.db = db
        self.io = io
        self.catalog_manager = CatalogManager(db)
        self.order_manager = OrderManager(db)
        self.tracking_manager = TrackingManager(db)
        self.user_manager = UserManager(db)
        self.session_manager = SessionManager(db)
        self.permission_checker = PermissionChecker(db)
        self.admin_console = AdminConsole(db, io)

        self.handlers = {
            1: self.handle_view_profile,
            2: self.handle_update_profile,
            3: self.handle_view_catalog,
            4: self.handle_place_order,
            5: self.handle_view_all_orders,
            6: self.handle_view_recent_orders,
            7: self.handle_view_order_info,
            8: self.handle_view_tracking,
            9: self.admin_console.handle_update_tracking,
            10: self.admin_console.handle_update_catalog,
            11: self.admin_console.handle_update_user,
            12: self.admin_console.handle_view_audit
        }

    def display_user_menu(self, session):
        """Display menu options available to the session's role"""
        self.io.write("MAIN MENU")
        self.io.write("---------")
        for choice, (label, permission) in USER_MENU.items():
            if self.permission_checker.has_permission(session.role, permission):
                self.io.write(f"{choice}. {label}")
        self.io.write(".........................")
        self.io.write(f"{LOGOUT_CHOICE}. Log out")

    def print_rows(self, rows, headers=None):
        if headers is None:
            headers = list(rows[0].keys()) if rows else []
        print_rows([[row[h] for h in headers] for row in rows], headers, self.io.stdout,
                   self.db.table_format)

    def handle_view_profile(self, session):
        profile = self.user_manager.get_profile(session.login)
        self.io.write(tabulate(profile.items(), tablefmt="grid"))

    def handle_update_profile(self, session):
        self.io.write("1. Change My Password")
        self.io.write("2. Change Phone Number")
        self.io.write("3. Change Favorite Games")
        choice = self.io.read_choice()

        if choice == 1:
            password = self.io.prompt("Your new password: ")
            confirmation = self.io.prompt("Re-enter new password: ")
            self.user_manager.change_password(session, password, confirmation)
            self.io.write("Changed Password")
        elif choice == 2:
            phone = self.io.prompt("Your new phone number: ")
            self.user_manager.change_phone(session, phone)
            self.io.write("Changed Phone Number")
        elif choice == 3:
            games = self.io.prompt("Your new favorite games (space between each game): ")
            self.user_manager.change_favorite_games(session, games)
            self.io.write("Changed Favorite Games")
        else:
            self.io.write("Unrecognized choice!")

    def handle_view_catalog(self, session):
        self.io.write("1. Print all Catalog")
        self.io.write("2. Search Catalog by genre")
        self.io.write("3. Search Catalog by price")
        choice = self.io.read_choice()

        if choice == 1:
            games = self.catalog_manager.list_games()
        elif choice == 2:
            genre = self.io.prompt("Which genre are you looking for: ")
            games = self.catalog_manager.games_by_genre(genre)
        elif choice == 3:
            max_price = self.io.prompt("Search games under this price: ")
            order = self.io.prompt("1. ascending order 2. descending order: ").strip()
            if order not in ("1", "2"):
                self.io.write("Unrecognized choice!")
                return
            games = self.catalog_manager.games_under_price(max_price, descending=order == "2")
        else:
            self.io.write("Unrecognized choice!")
            return

        if not games:
            self.io.write("No games found")
            return
        self.print_rows(games, CATALOG_COLUMNS)

    def handle_place_order(self, session):
        game_id = self.io.prompt("Game ID: ").strip()
        quantity = self.io.prompt("How many: ").strip()

        result = self.order_manager.place_order(session, game_id, quantity)
        order = result['order']
        self.io.write(f"Total Price is {order['totalPrice']}")
        self.print_rows([order])
        self.print_rows([result['tracking']])
        self.print_rows(result['lines'])
        self.io.write(f"Order {order['rentalOrderID']} placed, due back {order['dueDate']:%Y-%m-%d}")

    def handle_view_all_orders(self, session):
        if self.order_manager.print_orders(session.login, out=self.io.stdout) == 0:
            self.io.write(f"No rental history found for the user: {session.login}")

    def handle_view_recent_orders(self, session):
        count = self.order_manager.print_orders(session.login, RECENT_ORDERS_LIMIT, self.io.stdout)
        if count == 0:
            self.io.write(f"No recent orders found for the user: {session.login}")

    def handle_view_order_info(self, session):
        order_id = self.io.prompt("Enter rental order ID: ")
        info = self.order_manager.get_order_info(session, order_id)

        self.print_rows([info['order']])
        self.io.write(f"Tracking ID: {info['tracking_id']}")
        self.print_rows(info['games'])

    def handle_view_tracking(self, session):
        tracking_id = self.io.prompt("Enter the trackingID to view tracking information: ")
        self.print_rows([self.tracking_manager.get_tracking(session, tracking_id)])

    def dispatch(self, session, choice):
        """Run one menu action, reporting its errors without leaving the menu"""
        label, permission = USER_MENU[choice]
        if not self.permission_checker.has_permission(session.role, permission):
            self.io.write(f"Access denied: '{label}' is not available to role '{session.role}'")
            return

        try:
            self.handlers[choice](session)
        except GameRentalError as e:
            self.io.write(f"Error: {e}")
        except InputClosed:
            raise
        except Exception as e:
            self.io.write(f"System error: {e}")

    def run_user_console(self, session):
        """
        Main user console loop
        Returns True if input ended and the program should exit, False on logout
        """
        while True:
            self.display_user_menu(session)
            try:
                choice = self.io.read_choice()

                if choice == LOGOUT_CHOICE:
                    self.session_manager.end_session(session)
                    self.io.write("Logged out")
                    return False

                if choice not in USER_MENU:
                    self.io.write("Unrecognized choice!")
                    continue

                self.dispatch(session, choice)

                # Role or login may have changed through an admin edit
                if self.session_manager.refresh_session(session):
                    self.io.write(f"Your role is now: {session.role}")

            except (NotFound, DataCorruption) as e:
                self.io.write(f"Session ended: {e}")
                return False
            except (InputClosed, KeyboardInterrupt):
                self.io.write("\nLogging out... Goodbye!")
                self.session_manager.end_session(session)
                return True
