"""Small HTTP-related constants shared across Cogito.

This module is intentionally tiny to avoid circular imports and drift.
"""

from __future__ import annotations

JSON_CONTENT_TYPE = "application/json"

# Applied by HttpClientFactory; clients themselves impose no timeout.
DEFAULT_TIMEOUT_S = 60.0

# Status codes where the API key itself is the likely culprit.
AUTH_STATUS_CODES: frozenset[int] = frozenset({401, 403})
