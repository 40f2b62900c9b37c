"""Shared configuration defaults for the buildconfig SDK."""

import os

# Environment-derived defaults. These are read once at import time and
# used as parameter defaults throughout the SDK.

API_URL: str = os.getenv("OPENSHIFT_API_URL", "https://localhost:8443")
TOKEN: str | None = os.getenv("OPENSHIFT_TOKEN")
NAMESPACE: str | None = os.getenv("OPENSHIFT_NAMESPACE")
BUILD_API_VERSION: str = os.getenv(
    "OPENSHIFT_BUILD_API_VERSION", "build.openshift.io/v1"
)

# Creating a BuildConfig is cheap on the server side, but the API server may be
# slow to answer while admission plugins run.
DEFAULT_HTTP_TIMEOUT_SEC: float = 30.0

# Retry configuration for transient errors (connection failures, 429/502/503/504).
MAX_RETRIES: int = 3
RETRY_BACKOFF_SEC: float = 0.5
RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({429, 502, 503, 504})
