"""
Chirpy

A small social-posting backend: users post short "chirps", log in with
email and password, and keep their session alive with refresh tokens.
State lives in one JSON file.

CHANGELOG:
[2026-10-19 v0.1.0] Initial project setup
  - Flat JSON store with read/write locking
  - Chirp, user and revocation repositories
  - JWT access/refresh tokens with revocation
  - aiohttp HTTP API and billing webhook

ARCHITECTURE:
- Layer 1 : Transport (aiohttp routes, middlewares)
- Layer 2 : Sessions & Webhooks (auth flows, billing events)
- Layer 3 : Repositories (chirps, users, revoked tokens)
- Layer 4 : Flat Store (single JSON document)

SECURITY NOTES:
- bcrypt password hashes
- HS256 tokens; refresh tokens revocable
- Webhook gated by a pre-shared key
"""

__version__ = "0.1.0"

VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

from .core.config import ServerConfig
from .persistence import FlatStore, ChirpRepository, UserRepository, RevocationStore
from .security.authentication import JWTHandler, SessionManager, TokenKind
from .transport.http_transport import HttpTransport, build_app

__all__ = [
    "ServerConfig",
    "FlatStore",
    "ChirpRepository",
    "UserRepository",
    "RevocationStore",
    "JWTHandler",
    "SessionManager",
    "TokenKind",
    "HttpTransport",
    "build_app",
]
