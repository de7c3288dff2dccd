"""API-related constants."""

# HTTP Headers
CORRELATION_ID_HEADER = "X-Correlation-ID"

# Routes
ACTIONS_PREFIX = "/actions"
