"""
Constants for DocVault.

This module contains all shared constants used across the codebase to avoid
magic numbers and improve maintainability.
"""

from typing import Final

# ============================================================================
# AUTHORIZATION CONSTANTS
# ============================================================================

DEFAULT_AUTHZ_PROVIDER: Final[str] = "local"
"""Authorization strategy used when AUTHZ_PROVIDER is not set."""

SUPPORTED_AUTHZ_PROVIDERS: Final[tuple[str, ...]] = ("local", "remote")
"""Authorization strategies understood by the provider factory."""

DEFAULT_AUTHZ_TIMEOUT_SECONDS: Final[float] = 5.0
"""Timeout for a single remote policy decision (seconds)."""

PDP_ALLOWED_PATH: Final[str] = "/allowed"
"""Path of the policy decision point's check endpoint."""

# ============================================================================
# TOKEN CONSTANTS
# ============================================================================

DEFAULT_ACCESS_TOKEN_TTL: Final[int] = 900  # 15 minutes
"""Default access token lifetime in seconds."""

JWT_ALGORITHM: Final[str] = "HS256"
"""Signing algorithm for access tokens."""

MIN_SECRET_KEY_LENGTH: Final[int] = 32
"""Recommended minimum secret key length."""

# ============================================================================
# DOCUMENT CONSTANTS
# ============================================================================

DOCUMENTS_PATH: Final[str] = "/documents"
"""Presentation path invalidated whenever the document list changes."""

MAX_TITLE_LENGTH: Final[int] = 200
"""Maximum length of a document title after trimming."""

# ============================================================================
# OBSERVABILITY CONSTANTS
# ============================================================================

CORRELATION_ID_HEADER: Final[str] = "X-Correlation-ID"
"""Header used to propagate request correlation IDs."""

DEFAULT_MAX_METRICS: Final[int] = 10000
"""Maximum number of metric series kept before LRU eviction."""
