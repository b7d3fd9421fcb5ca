"""
Authentication module - JWT sessions and credential management

Provides:
- JWTHandler: Access/refresh token issue and verification (HS256)
- PasswordHasher: bcrypt password hashing
- SessionManager: Login, refresh, revoke and authorization flows
"""

from .jwt_handler import (
    JWTHandler,
    TokenError,
    TokenMalformedError,
    TokenSignatureError,
    TokenExpiredError,
    TokenIssuerError,
    TokenRevokedError,
    TokenKind,
    TokenPair,
    TokenClaims,
)
from .password_hasher import PasswordHasher
from .session_manager import (
    SessionManager,
    LoginResult,
    AuthenticationError,
    MalformedAuthHeaderError,
    parse_authorization,
)

__all__ = [
    "JWTHandler",
    "TokenError",
    "TokenMalformedError",
    "TokenSignatureError",
    "TokenExpiredError",
    "TokenIssuerError",
    "TokenRevokedError",
    "TokenKind",
    "TokenPair",
    "TokenClaims",
    "PasswordHasher",
    "SessionManager",
    "LoginResult",
    "AuthenticationError",
    "MalformedAuthHeaderError",
    "parse_authorization",
]
