"""
Catalog Manager for Game Rental System
Handles catalog browsing and manager-only catalog maintenance
"""
from decimal import Decimal, InvalidOperation
from audit import log_event
from config import AUDIT_EVENTS
from errors import NotFound, ValidationError
from permission_checker import PermissionChecker

CATALOG_COLUMNS = ['gameID', 'gameName', 'genre', 'price', 'description', 'imageURL']


def parse_price(value):
    """Parse a non-negative price with two decimal places"""
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"Price '{value}' is not a number")
    if not price.is_finite() or price < 0:
        raise ValidationError("Price must be a non-negative number")
    try:
        return price.quantize(Decimal("0.01"))
    except InvalidOperation:
        raise ValidationError(f"Price '{value}' is out of range")


class CatalogManager:
    """
    Manages catalog games with role checks on every change
    """

    def __init__(self, db):
        self.db = db
        self.permission_checker = PermissionChecker(db)

    def _select(self, where="", params=(), order_by="gameID"):
        query = f"SELECT {', '.join(CATALOG_COLUMNS)} FROM Catalog {where} ORDER BY {order_by}"
        return self.db.execute_query_rows(query, params)

    def list_games(self):
        return self._select()

    def games_by_genre(self, genre):
        return self._select("WHERE genre = ?", (genre,))

    def games_under_price(self, max_price, descending=False):
        """Games cheaper than max_price, sorted by price"""
        max_price = parse_price(max_price)
        direction = "DESC" if descending else "ASC"
        return self._select("WHERE price < ?", (float(max_price),), f"price {direction}, gameID")

    def get_game(self, game_id):
        games = self._select("WHERE gameID = ?", (game_id,))
        if not games:
            raise NotFound(f"No such game '{game_id}'")
        return games[0]

    def _validate(self, game_id, name, price):
        if not game_id:
            raise ValidationError("Game ID must not be empty")
        if not name:
            raise ValidationError("Game name must not be empty")
        return parse_price(price)

    def add_game(self, session, game_id, name, genre, price, description, image_url):
        """Insert a new catalog game (requires update_catalog permission)"""
        self.permission_checker.require(session, 'update_catalog')
        price = self._validate(game_id, name, price)

        self.db.execute_update("""
            INSERT INTO Catalog (gameID, gameName, genre, price, description, imageURL)
            VALUES (?, ?, ?, ?, ?, ?)
        """, (game_id, name, genre, float(price), description, image_url))

        log_event(self.db, session.login, AUDIT_EVENTS["CATALOG_CREATE"], details=f"Added game '{game_id}'")
        return self.get_game(game_id)

    def update_game(self, session, game_id, name, genre, price, description, image_url):
        """Replace every field of an existing game (requires update_catalog permission)"""
        self.permission_checker.require(session, 'update_catalog')
        price = self._validate(game_id, name, price)

        updated = self.db.execute_update("""
            UPDATE Catalog
            SET gameName = ?, genre = ?, price = ?, description = ?, imageURL = ?
            WHERE gameID = ?
        """, (name, genre, float(price), description, image_url, game_id))
        if not updated:
            raise NotFound(f"No such game '{game_id}'")

        log_event(self.db, session.login, AUDIT_EVENTS["CATALOG_UPDATE"], details=f"Updated game '{game_id}'")
        return self.get_game(game_id)

    def remove_game(self, session, game_id):
        """Delete a game; games referenced by orders cannot be removed"""
        self.permission_checker.require(session, 'update_catalog')

        deleted = self.db.execute_update("DELETE FROM Catalog WHERE gameID = ?", (game_id,))
        if not deleted:
            raise NotFound(f"No such game '{game_id}'")

        log_event(self.db, session.login, AUDIT_EVENTS["CATALOG_DELETE"], details=f"Removed game '{game_id}'")
