"""
Constants for Chirpy

Module: core.constants
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial constants definition
  - Token lifetimes and issuer tags
  - Chirp content policy limits
  - Store collection names
  - Server configuration defaults

SECURITY NOTES:
- Access tokens are short-lived, refresh tokens are revocable
- Signing secret must be at least 32 bytes
"""

from typing import Final

# ============================================================================
# Server Configuration
# ============================================================================

SERVER_NAME: Final[str] = "chirpy"
SERVER_VERSION: Final[str] = "0.1.0"

DEFAULT_HTTP_HOST: Final[str] = "0.0.0.0"
DEFAULT_HTTP_PORT: Final[int] = 8080
DEFAULT_DB_PATH: Final[str] = "db.json"
DEFAULT_STATIC_DIR: Final[str] = "static"

# Max accepted request body
MAX_REQUEST_SIZE: Final[int] = 1024 * 1024  # 1 MB

# ============================================================================
# Store Collections
# ============================================================================

COLLECTION_CHIRPS: Final[str] = "chirps"
COLLECTION_USERS: Final[str] = "users"
COLLECTION_TOKENS: Final[str] = "tokens"

# ============================================================================
# Token Lifecycle
# ============================================================================

JWT_ALGORITHM: Final[str] = "HS256"
JWT_MIN_SECRET_LENGTH: Final[int] = 32

ISSUER_ACCESS: Final[str] = "chirpy-access"
ISSUER_REFRESH: Final[str] = "chirpy-refresh"

ACCESS_TOKEN_EXPIRE_MINUTES: Final[int] = 60
REFRESH_TOKEN_EXPIRE_DAYS: Final[int] = 60

AUTH_SCHEME_BEARER: Final[str] = "Bearer"
AUTH_SCHEME_API_KEY: Final[str] = "ApiKey"

DEFAULT_BCRYPT_ROUNDS: Final[int] = 10

# ============================================================================
# Content Policy
# ============================================================================

MAX_CHIRP_LENGTH: Final[int] = 140
PROFANITY_MASK: Final[str] = "****"
PROFANE_WORDS: Final[frozenset] = frozenset({
    "kerfuffle",
    "sharbert",
    "fornax",
})

# ============================================================================
# Webhooks
# ============================================================================

EVENT_USER_UPGRADED: Final[str] = "user.upgraded"

# ============================================================================
# Logging
# ============================================================================

LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL_INFO: Final[str] = "INFO"


def get_default_config() -> dict:
    """
    Get default server configuration

    Returns:
        dict: Default configuration
    """
    return {
        "server": {
            "name": SERVER_NAME,
            "version": SERVER_VERSION,
        },
        "http": {
            "host": DEFAULT_HTTP_HOST,
            "port": DEFAULT_HTTP_PORT,
            "static_dir": DEFAULT_STATIC_DIR,
            "max_request_size": MAX_REQUEST_SIZE,
        },
        "store": {
            "path": DEFAULT_DB_PATH,
        },
        "tokens": {
            "algorithm": JWT_ALGORITHM,
            "access_expire_minutes": ACCESS_TOKEN_EXPIRE_MINUTES,
            "refresh_expire_days": REFRESH_TOKEN_EXPIRE_DAYS,
        },
        "chirps": {
            "max_length": MAX_CHIRP_LENGTH,
        },
        "logging": {
            "level": LOG_LEVEL_INFO,
            "format": LOG_FORMAT,
        },
    }
