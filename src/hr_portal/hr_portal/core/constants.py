"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

DEFAULT_ZENHR_API_URL = "https://api.zenhr.com/v1"
DEFAULT_LIST_LIMIT = 500

DATE_FORMAT = "%Y-%m-%d"

NEW_REQUEST_TITLE = "New HR Request"
REQUEST_UPDATE_TITLE = "HR Request Update"

# Column widths in database/schema.sql.
MAX_TYPE_LENGTH = 64
MAX_STATUS_LENGTH = 64
MAX_TITLE_LENGTH = 200
MAX_LOCATION_LENGTH = 255
