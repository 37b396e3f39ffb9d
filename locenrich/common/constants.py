"""Application constants."""

USER_AGENT = "locenrich/0.3 (+location enrichment; contact: configured-email)"
ADDRESS_NOT_FOUND = "Address not found"
ADDRESS_NOT_ATTEMPTED = "Address in background not fetched"
DISPLAY_PENDING = "Fetching..."
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "context",
    "source",
    "event",
    "status",
    "duration_ms",
    "error_code",
    "message",
)
