"""
Audit system for Game Rental
Logs account, order and administration events and provides audit queries
"""
from errors import DataAccessError


def log_event(db, login, event_type, details="", success=True, out=None):
    """
    Log event to audit database
    A failed write is reported and never interrupts the calling action
    """
    try:
        db.execute_update("""
            INSERT INTO audit_logs (event_type, login, details, success)
            VALUES (?, ?, ?, ?)
        """, (event_type, login, details, success))
    except DataAccessError as e:
        print(f"Audit logging error: {e}", file=out)


def get_audit_logs(db, limit=50, filters=None):
    """
    Retrieve audit logs with optional filtering
    Returns list of audit records, newest first
    """
    if filters is None:
        filters = {}

    query = """
        SELECT id, timestamp, event_type, login, details, success
        FROM audit_logs
        WHERE 1=1
    """
    params = []

    # Apply filters
    if filters.get('event_type'):
        query += " AND event_type = ?"
        params.append(filters['event_type'])

    if filters.get('success') is not None:
        query += " AND success = ?"
        params.append(filters['success'])

    if filters.get('login'):
        query += " AND login = ?"
        params.append(filters['login'])

    query += " ORDER BY id DESC LIMIT ?"
    params.append(limit)

    return db.execute_query_rows(query, params)
