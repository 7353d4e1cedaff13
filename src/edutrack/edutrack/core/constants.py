"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DATE_FORMAT = "%Y-%m-%d"

# By-date partitions are "{date}_{center_id}"; "~" sorts after every
# character allowed in a center id, closing the range scan for one date.
PARTITION_SEPARATOR = "_"
PARTITION_RANGE_END = "~"

DEFAULT_TREND_DAYS = 30
MAX_TREND_DAYS = 366
DEFAULT_TOKEN_MAX_AGE_SECONDS = 12 * 60 * 60

MOCK_TOKEN = "mock-token"
MOCK_USER_ID = "mock-user-id"
