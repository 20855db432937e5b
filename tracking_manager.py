"""
Tracking Manager for Game Rental System
Shows shipment tracking of rental orders and lets staff update it
"""
from datetime import datetime
from audit import log_event
from config import AUDIT_EVENTS, TRACKING_FIELDS
from errors import NotFound, ValidationError
from order_manager import format_timestamp, parse_id
from permission_checker import PermissionChecker


class TrackingManager:
    """
    Reads and updates TrackingInfo rows
    """

    def __init__(self, db):
        self.db = db
        self.permission_checker = PermissionChecker(db)

    def get_tracking(self, session, tracking_id):
        """Tracking row of an order the session may see"""
        tracking_id = parse_id(tracking_id, "Tracking ID")
        query = """
            SELECT t.trackingID, t.rentalOrderID, t.status, t.currentLocation, t.courierName,
                   t.lastUpdateDate, t.additionalComments
            FROM TrackingInfo t
            JOIN RentalOrder r ON t.rentalOrderID = r.rentalOrderID
            WHERE t.trackingID = ?
        """
        params = [tracking_id]
        if not self.permission_checker.has_permission(session.role, 'view_any_order'):
            query += " AND r.login = ?"
            params.append(session.login)

        rows = self.db.execute_query_rows(query, params)
        if not rows:
            raise NotFound(f"No tracking information found for the trackingID: {tracking_id}")
        return rows[0]

    def update_field(self, session, tracking_id, field, value):
        """
        Change one tracking field and stamp lastUpdateDate
        Any employee or manager may update any order's tracking
        """
        self.permission_checker.require(session, 'update_tracking')
        if field not in TRACKING_FIELDS.values():
            raise ValidationError(f"Tracking field '{field}' cannot be updated")
        tracking_id = parse_id(tracking_id, "Tracking ID")

        updated = self.db.execute_update(
            f"UPDATE TrackingInfo SET {field} = ?, lastUpdateDate = ? WHERE trackingID = ?",
            (value, format_timestamp(datetime.now().replace(microsecond=0)), tracking_id))
        if not updated:
            raise NotFound(f"No such tracking record {tracking_id}")

        log_event(self.db, session.login, AUDIT_EVENTS["TRACKING_UPDATE"],
                  details=f"Tracking {tracking_id}: {field} set to '{value}'")
