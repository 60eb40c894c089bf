"""
Remote API Constants

Constants for the Airtable REST API used as the remote table source.
"""

from .system import BASE_SECOND


class AirtableConfig:
    """Airtable REST API configuration constants."""

    BASE_URL = "https://api.airtable.com/v0"

    # Environment variable names used as credential fallbacks
    API_KEY_ENV = "AIRTABLE_API_KEY"
    BASE_ID_ENV = "AIRTABLE_BASE_ID"

    # Airtable enforces 5 requests per second per base
    RATE_LIMIT_RPS = 5.0
    MAX_PAGE_SIZE = 100
    DEFAULT_CONCURRENT_REQUESTS = 4

    # Response payload keys
    RECORDS_KEY = "records"
    OFFSET_KEY = "offset"
    ID_KEY = "id"
    FIELDS_KEY = "fields"
    CREATED_TIME_KEY = "createdTime"

    # Record ids look like "recXXXXXXXXXXXXXX"
    REFERENCE_PREFIX = "rec"


class NetworkConfig:
    """Network configuration constants."""

    TIMEOUT = 30 * BASE_SECOND
    RETRY_ATTEMPTS = 3
    RETRY_DELAY = 1.0 * BASE_SECOND
    MAX_RETRY_DELAY = 30 * BASE_SECOND
    RATE_LIMIT_POLL_INTERVAL = 0.1 * BASE_SECOND

    USER_AGENT = "LinkVault/0.1.0"
    ACCEPT_JSON = "application/json"


class HTTPStatusCodes:
    """HTTP status codes the table reader reacts to."""

    OK = 200
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    UNPROCESSABLE_ENTITY = 422
    TOO_MANY_REQUESTS = 429
    INTERNAL_SERVER_ERROR = 500

    RETRYABLE = frozenset({429, 500, 502, 503, 504})
