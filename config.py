"""
Configuration file for Game Rental System
Defines roles, permissions, menu layout and system constants
"""

# System roles configuration
ROLES = {
    'customer': 'Customer - browses the catalog and rents games',
    'employee': 'Employee - updates shipment tracking',
    'manager': 'Manager - maintains the catalog and user accounts'
}

# Spellings accepted by the role change prompt
ROLE_ALIASES = {
    'customers': 'customer',
    'employees': 'employee',
    'managers': 'manager'
}

DEFAULT_ROLE = 'customer'

# Permissions every logged in user has
VIEWER_PERMISSIONS = [
    'view_profile', 'update_profile', 'view_catalog',
    'place_order', 'view_orders', 'view_tracking'
]

# Role-Permission mappings
ROLE_PERMISSIONS = {
    'customer': VIEWER_PERMISSIONS,
    'employee': VIEWER_PERMISSIONS + [
        'view_any_order', 'update_tracking'
    ],
    'manager': VIEWER_PERMISSIONS + [
        'view_any_order', 'update_tracking',
        'update_catalog', 'update_user', 'view_audit'
    ]
}

# Authenticated menu: choice -> (label, required permission)
USER_MENU = {
    1: ('View Profile', 'view_profile'),
    2: ('Update Profile', 'update_profile'),
    3: ('View Catalog', 'view_catalog'),
    4: ('Place Rental Order', 'place_order'),
    5: ('View Full Rental Order History', 'view_orders'),
    6: ('View Past 5 Rental Orders', 'view_orders'),
    7: ('View Rental Order Information', 'view_orders'),
    8: ('View Tracking Information', 'view_tracking'),
    9: ('Update Tracking Information', 'update_tracking'),
    10: ('Update Catalog', 'update_catalog'),
    11: ('Update User', 'update_user'),
    12: ('View Audit Log', 'view_audit')
}
LOGOUT_CHOICE = 20

# Anonymous menu choices
REGISTER_CHOICE = 1
LOGIN_CHOICE = 2
EXIT_CHOICE = 9

# Rental orders
RENTAL_PERIOD_DAYS = 14
RECENT_ORDERS_LIMIT = 5
INITIAL_TRACKING_STATUS = 'ordered'
INITIAL_TRACKING_LOCATION = 'shop'
INITIAL_COURIER_NAME = 'Name'
INITIAL_TRACKING_COMMENT = ' '

# Tracking fields an employee may change: menu choice -> column
TRACKING_FIELDS = {
    1: 'status',
    2: 'currentLocation',
    3: 'courierName',
    4: 'additionalComments'
}

# Field length limits
MAX_LOGIN_LENGTH = 50
MAX_PASSWORD_LENGTH = 30
MAX_PHONE_LENGTH = 20
# Largest value an SQLite INTEGER column holds
MAX_INTEGER = 2 ** 63 - 1
BLANK_FAVORITE_GAMES = '0'

# System settings
DATABASE_NAME = "game_rental.db"
DEFAULT_MANAGER_LOGIN = "admin"
DEFAULT_MANAGER_PASSWORD = "admin123"
PASSWORD_HASH_ITERATIONS = 120000
RESULT_TABLE_FORMAT = "tsv"
AUDIT_LOG_LIMIT = 20

# Audit event types
AUDIT_EVENTS = {
    "SESSION_START": "session_start",
    "DATABASE_CONNECT": "database_connect",
    "DATABASE_DISCONNECT": "database_disconnect",
    "USER_REGISTER": "user_register",
    "USER_LOGIN": "user_login",
    "USER_LOGOUT": "user_logout",
    "PROFILE_UPDATE": "profile_update",
    "USER_UPDATE": "user_update",
    "ROLE_CHANGE": "role_change",
    "LOGIN_CHANGE": "login_change",
    "ORDER_CREATE": "order_create",
    "TRACKING_UPDATE": "tracking_update",
    "CATALOG_CREATE": "catalog_create",
    "CATALOG_UPDATE": "catalog_update",
    "CATALOG_DELETE": "catalog_delete",
    "PERMISSION_CHECK": "permission_check"
}
