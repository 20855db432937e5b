"""
Admin Console for Game Rental System
Staff and manager screens: tracking, catalog and user administration, audit log
"""
from tabulate import tabulate
from audit import get_audit_logs
from catalog_manager import CatalogManager
from config import AUDIT_LOG_LIMIT, ROLES, TRACKING_FIELDS
from permission_checker import PermissionChecker
from role_manager import RoleManager
from tracking_manager import TrackingManager
from user_manager import UserManager


class AdminConsole:
    """
    Administrative interface reached from the user menu
    Each operation is re-checked against the session's role by its manager
    """

    def __init__(self, db, io):
        self.db = db
        self.io = io
        self.catalog_manager = CatalogManager(db)
        self.role_manager = RoleManager(db)
        self.tracking_manager = TrackingManager(db)
        self.user_manager = UserManager(db)
        self.permission_checker = PermissionChecker(db)

    def handle_update_tracking(self, session):
        """Update one field of a tracking record"""
        self.io.write("1. Update status")
        self.io.write("2. Update currentLocation")
        self.io.write("3. Update courierName")
        self.io.write("4. Update additionalComments")
        field = TRACKING_FIELDS.get(self.io.read_choice())
        if field is None:
            self.io.write("Unrecognized choice!")
            return

        tracking_id = self.io.prompt("Enter the trackingID to update: ")
        value = self.io.prompt(f"Enter the new {field}: ")
        self.tracking_manager.update_field(session, tracking_id, field, value)
        self.io.write(f"New {field} successfully updated")

    def _prompt_game_fields(self, prefix=""):
        return {
            'name': self.io.prompt(f"Enter {prefix}game name: "),
            'genre': self.io.prompt(f"Enter {prefix}genre: "),
            'price': self.io.prompt(f"Enter {prefix}price: "),
            'description': self.io.prompt(f"Enter {prefix}description: "),
            'image_url': self.io.prompt(f"Enter {prefix}image URL: ")
        }

    def handle_update_catalog(self, session):
        """Add, change or remove a catalog game"""
        self.io.write("1. Add new game")
        self.io.write("2. Change info of game")
        self.io.write("3. Remove game from catalog")
        choice = self.io.read_choice()

        if choice == 1:
            game_id = self.io.prompt("Enter game ID: ").strip()
            game = self.catalog_manager.add_game(session, game_id, **self._prompt_game_fields())
            self.io.write(f"Game '{game['gameID']}' added")
        elif choice == 2:
            game_id = self.io.prompt("Enter game ID to update: ").strip()
            game = self.catalog_manager.update_game(session, game_id, **self._prompt_game_fields("new "))
            self.io.write(f"Game '{game['gameID']}' updated")
        elif choice == 3:
            game_id = self.io.prompt("Enter game ID to remove: ").strip()
            confirm = self.io.prompt("Are you sure you want to remove this game? (yes/no): ").strip().lower()
            if confirm != 'yes':
                self.io.write("Removal cancelled")
                return
            self.catalog_manager.remove_game(session, game_id)
            self.io.write(f"Game '{game_id}' removed")
        else:
            self.io.write("Unrecognized choice!")

    def handle_list_users(self, session):
        users = self.user_manager.list_users(session)
        self.io.write(tabulate([list(user.values()) for user in users],
                               headers=list(users[0].keys()) if users else [], tablefmt="grid"))
        self.io.write(f"\nTotal users: {len(users)}")

    def handle_update_user(self, session):
        """Change login, role or details of any user"""
        self.io.write("1. Change One's Login")
        self.io.write("2. Change One's Role")
        self.io.write("3. Change One's numOverDueGames")
        self.io.write("4. Change One's Password")
        self.io.write("5. Change One's FavGames")
        self.io.write("6. Change One's Phone number")
        self.io.write("7. List users")
        choice = self.io.read_choice()

        if choice == 7:
            self.handle_list_users(session)
            return
        if choice not in range(1, 7):
            self.io.write("Unrecognized choice!")
            return

        target = self.io.prompt("Who do you want to change: ").strip()

        if choice == 1:
            new_login = self.io.prompt("To what login: ").strip()
            self.role_manager.rename_login(session, target, new_login)
            self.io.write(f"Changed login '{target}' to '{new_login}'")
        elif choice == 2:
            new_role = self.io.prompt(f"To what role? ({', '.join(ROLES)}): ")
            new_role = self.role_manager.change_role(session, target, new_role)
            self.io.write(f"Changed role of '{target}' to '{new_role}'")
        elif choice == 3:
            count = self.io.prompt("To what number of overdue games: ")
            self.user_manager.set_overdue_count(session, target, count)
            self.io.write("Changed number of overdue games")
        elif choice == 4:
            password = self.io.prompt("One's new password: ")
            confirmation = self.io.prompt("Re-enter new password: ")
            self.user_manager.admin_change_password(session, target, password, confirmation)
            self.io.write("Changed Password")
        elif choice == 5:
            games = self.io.prompt("One's new favorite games (space between each game): ")
            self.user_manager.admin_change_favorite_games(session, target, games)
            self.io.write("Changed Favorite Games")
        else:
            phone = self.io.prompt("One's new phone number: ")
            self.user_manager.admin_change_phone(session, target, phone)
            self.io.write("Changed Phone Number")

    def handle_view_audit(self, session):
        """Display the latest audit log entries"""
        self.permission_checker.require(session, 'view_audit')
        logs = get_audit_logs(self.db, limit=AUDIT_LOG_LIMIT)
        if not logs:
            self.io.write("No audit logs found")
            return

        table_data = [
            [log['timestamp'], log['login'] or '-', log['event_type'],
             "OK" if log['success'] else "FAILED", log['details']]
            for log in logs
        ]
        headers = ["Timestamp", "User", "Event", "Result", "Details"]
        self.io.write(tabulate(table_data, headers=headers, tablefmt="grid"))
