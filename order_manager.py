"""
Order Manager for Game Rental System
Places rental orders and answers order history queries
"""
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from audit import log_event
from config import (AUDIT_EVENTS, INITIAL_COURIER_NAME, INITIAL_TRACKING_COMMENT,
                    INITIAL_TRACKING_LOCATION, INITIAL_TRACKING_STATUS, MAX_INTEGER,
                    RENTAL_PERIOD_DAYS)
from errors import GameRentalError, NotFound, ValidationError
from permission_checker import PermissionChecker

ORDER_COLUMNS = ['rentalOrderID', 'login', 'noOfGames', 'totalPrice', 'orderTimestamp', 'dueDate']


def format_timestamp(moment):
    return moment.isoformat(sep=' ')


def decode_order(row):
    """Convert stored text and REAL columns of an order back to typed values"""
    order = dict(row)
    order['totalPrice'] = Decimal(str(order['totalPrice'])).quantize(Decimal("0.01"))
    order['orderTimestamp'] = datetime.fromisoformat(order['orderTimestamp'])
    order['dueDate'] = datetime.fromisoformat(order['dueDate'])
    return order


def parse_id(value, name):
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{name} must be an integer")
    if abs(number) > MAX_INTEGER:
        raise ValidationError(f"{name} is out of range")
    return number


class OrderManager:
    """
    Manages rental orders, their tracking rows and order lines
    """

    def __init__(self, db):
        self.db = db
        self.permission_checker = PermissionChecker(db)

    def _game_price(self, game_id):
        rows = self.db.execute_query_rows("SELECT price FROM Catalog WHERE gameID = ?", (game_id,))
        if not rows:
            raise NotFound(f"No such game '{game_id}'")
        return Decimal(str(rows[0]['price']))

    def place_order(self, session, game_id, quantity):
        """
        Rent quantity copies of a catalog game for the session's user
        Order, tracking and order line rows are created in one transaction
        Returns the stored rows for confirmation
        """
        self.permission_checker.require(session, 'place_order')

        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            raise ValidationError("Quantity must be an integer")
        if quantity <= 0:
            raise ValidationError("Quantity must be positive")
        if quantity > MAX_INTEGER:
            raise ValidationError("Quantity is out of range")

        price = self._game_price(game_id)
        if price <= 0:
            raise ValidationError(f"Game '{game_id}' has an invalid price: {price}")

        try:
            total = (price * quantity).quantize(Decimal("0.01"))
        except InvalidOperation:
            raise ValidationError("Total price is out of range")
        ordered_at = datetime.now().replace(microsecond=0)
        due_date = ordered_at + timedelta(days=RENTAL_PERIOD_DAYS)

        try:
            with self.db.transaction():
                order_id = self.db.execute_insert("""
                    INSERT INTO RentalOrder (login, noOfGames, totalPrice, orderTimestamp, dueDate)
                    VALUES (?, ?, ?, ?, ?)
                """, (session.login, quantity, float(total),
                      format_timestamp(ordered_at), format_timestamp(due_date)))

                self.db.execute_insert("""
                    INSERT INTO TrackingInfo (rentalOrderID, status, currentLocation, courierName,
                                              lastUpdateDate, additionalComments)
                    VALUES (?, ?, ?, ?, ?, ?)
                """, (order_id, INITIAL_TRACKING_STATUS, INITIAL_TRACKING_LOCATION,
                      INITIAL_COURIER_NAME, format_timestamp(ordered_at), INITIAL_TRACKING_COMMENT))

                self.db.execute_update("""
                    INSERT INTO GamesInOrder (rentalOrderID, gameID, unitsOrdered)
                    VALUES (?, ?, ?)
                """, (order_id, game_id, quantity))
        except GameRentalError as e:
            log_event(self.db, session.login, AUDIT_EVENTS["ORDER_CREATE"],
                      details=f"Failed to order {quantity} x '{game_id}': {e}", success=False)
            raise

        log_event(self.db, session.login, AUDIT_EVENTS["ORDER_CREATE"],
                  details=f"Order {order_id}: {quantity} x '{game_id}' for {total}")

        return {
            'order': self._get_order(order_id),
            'tracking': self.db.execute_query_rows(
                "SELECT * FROM TrackingInfo WHERE rentalOrderID = ?", (order_id,))[0],
            'lines': self.db.execute_query_rows(
                "SELECT * FROM GamesInOrder WHERE rentalOrderID = ?", (order_id,))
        }

    def _get_order(self, order_id):
        rows = self.db.execute_query_rows(
            f"SELECT {', '.join(ORDER_COLUMNS)} FROM RentalOrder WHERE rentalOrderID = ?", (order_id,))
        if not rows:
            raise NotFound(f"No such rental order {order_id}")
        return decode_order(rows[0])

    def print_orders(self, login, limit=None, out=None):
        """Print orders of a user, newest first; returns how many were printed"""
        query = """
            SELECT rentalOrderID, orderTimestamp, dueDate, totalPrice
            FROM RentalOrder
            WHERE login = ?
            ORDER BY orderTimestamp DESC, rentalOrderID DESC
        """
        params = [login]
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)
        return self.db.execute_query_print(query, params, out)

    def get_order_info(self, session, order_id):
        """
        Order row, tracking ID and games of one order
        Customers only see their own orders
        """
        order_id = parse_id(order_id, "Rental order ID")
        order = self._get_order(order_id)
        if order['login'] != session.login and not self.permission_checker.has_permission(
                session.role, 'view_any_order'):
            raise NotFound(f"No such rental order {order_id} for '{session.login}'")

        tracking = self.db.execute_query_rows(
            "SELECT trackingID FROM TrackingInfo WHERE rentalOrderID = ?", (order_id,))
        games = self.db.execute_query_rows("""
            SELECT c.gameID, c.gameName, c.genre, g.unitsOrdered
            FROM GamesInOrder g
            JOIN Catalog c ON c.gameID = g.gameID
            WHERE g.rentalOrderID = ?
            ORDER BY c.gameID
        """, (order_id,))

        return {
            'order': order,
            'tracking_id': tracking[0]['trackingID'] if tracking else None,
            'games': games
        }
