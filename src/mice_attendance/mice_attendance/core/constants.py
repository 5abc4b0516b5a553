"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_DB_CONNECT_TIMEOUT_SECONDS = 5
DEFAULT_MAIL_TIMEOUT_SECONDS = 10

OJT_REQUIRED_HOURS = 500.0
MAX_DAILY_HOURS = 24.0

QR_BOX_SIZE = 10
QR_BORDER = 2

MAIL_SENDER_NAME = "MICE Event System"
