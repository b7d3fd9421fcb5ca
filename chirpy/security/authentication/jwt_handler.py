"""
JWT Handler - Access and refresh token lifecycle

Module: security.authentication.jwt_handler
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - JWT generation with HS256
  - Token kind (access/refresh) carried in the issuer claim
  - Validation with typed failures per cause

ARCHITECTURE:
JWTHandler provides:
  - Stateless issuance of access (1h) and refresh (60d) tokens
  - HS256 (HMAC-SHA256) signature with one shared secret
  - Verification of signature, expiry, required claims and kind

Revocation is not checked here; see session_manager.

SECURITY NOTES:
- Secret key must be 32+ bytes
- A refresh token is never accepted where an access token is
  expected, and vice versa
- All times in UTC
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Union

import jwt

from ...core.constants import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ISSUER_ACCESS,
    ISSUER_REFRESH,
    JWT_ALGORITHM,
    JWT_MIN_SECRET_LENGTH,
    REFRESH_TOKEN_EXPIRE_DAYS,
)


class TokenError(Exception):
    """Base token error"""
    pass


class TokenMalformedError(TokenError):
    """Token (or Authorization header) cannot be parsed"""
    pass


class TokenSignatureError(TokenError):
    """Token signature does not verify"""
    pass


class TokenExpiredError(TokenError):
    """Token has expired"""
    pass


class TokenIssuerError(TokenError):
    """Token is of the wrong kind (or not issued by us)"""
    pass


class TokenRevokedError(TokenError):
    """Token has been revoked"""
    pass


class TokenKind(Enum):
    """Session class of a token, stored as its issuer"""
    ACCESS = ISSUER_ACCESS
    REFRESH = ISSUER_REFRESH


@dataclass
class TokenPair:
    """Access and refresh token pair"""
    access_token: str
    refresh_token: str
    access_expires_at: datetime
    refresh_expires_at: datetime


@dataclass
class TokenClaims:
    """Verified token claims"""
    user_id: int
    kind: TokenKind
    jti: str
    issued_at: datetime
    expires_at: datetime


class JWTHandler:
    """
    Issues and verifies Chirpy tokens

    Uses HS256 (HMAC-SHA256) for signing. Tokens are stateless; refresh
    tokens can be revoked via the revocation store.
    """

    def __init__(
        self,
        secret_key: Union[str, bytes],
        algorithm: str = JWT_ALGORITHM,
        access_token_expire_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES,
        refresh_token_expire_days: int = REFRESH_TOKEN_EXPIRE_DAYS,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        """
        Initialize JWT handler

        Args:
            secret_key: Secret key for signing (32+ bytes)
            algorithm: JWT algorithm (default HS256)
            access_token_expire_minutes: Access token TTL in minutes
            refresh_token_expire_days: Refresh token TTL in days
            clock: Source of the issue time

        Raises:
            ValueError: If secret_key too short
        """
        if isinstance(secret_key, str):
            secret_key = secret_key.encode("utf-8")
        if len(secret_key) < JWT_MIN_SECRET_LENGTH:
            raise ValueError(
                f"Secret key must be at least {JWT_MIN_SECRET_LENGTH} bytes"
            )

        self.logger = logging.getLogger("security.jwt_handler")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.lifetimes = {
            TokenKind.ACCESS: timedelta(minutes=access_token_expire_minutes),
            TokenKind.REFRESH: timedelta(days=refresh_token_expire_days),
        }
        self._clock = clock

        self.logger.info(
            f"JWT Handler initialized (algo={algorithm}, "
            f"access_expires={access_token_expire_minutes}min, "
            f"refresh_expires={refresh_token_expire_days}d)"
        )

    def issue(self, user_id: int, kind: TokenKind) -> str:
        """
        Issue a signed token

        Args:
            user_id: Subject of the token
            kind: TokenKind.ACCESS or TokenKind.REFRESH

        Returns:
            Encoded JWT
        """
        token, _ = self._issue(user_id, kind)
        return token

    def issue_pair(self, user_id: int) -> TokenPair:
        """
        Issue an access and refresh token pair

        Args:
            user_id: Subject of both tokens

        Returns:
            TokenPair with both tokens and expiration times
        """
        access_token, access_exp = self._issue(user_id, TokenKind.ACCESS)
        refresh_token, refresh_exp = self._issue(user_id, TokenKind.REFRESH)

        self.logger.info(f"Tokens generated for user {user_id}")

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            access_expires_at=access_exp,
            refresh_expires_at=refresh_exp,
        )

    def verify(self, token: str, expected_kind: TokenKind) -> TokenClaims:
        """
        Verify a token and its kind

        Args:
            token: JWT token string
            expected_kind: Kind the caller requires

        Returns:
            TokenClaims with extracted data

        Raises:
            TokenMalformedError: If token cannot be decoded or lacks claims
            TokenSignatureError: If signature or algorithm is wrong
            TokenExpiredError: If token expired
            TokenIssuerError: If token is not of expected_kind
        """
        if not token or not isinstance(token, str):
            raise TokenMalformedError("Token must be non-empty string")

        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat", "sub", "iss"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError(f"Token expired: {e}")
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as e:
            raise TokenSignatureError(f"Invalid signature: {e}")
        except jwt.ImmatureSignatureError as e:
            raise TokenExpiredError(f"Token not valid yet: {e}")
        except jwt.InvalidTokenError as e:
            raise TokenMalformedError(f"Invalid token: {e}")

        try:
            kind = TokenKind(payload["iss"])
        except ValueError:
            raise TokenIssuerError(f"Unknown token issuer: {payload['iss']!r}")
        if kind is not expected_kind:
            raise TokenIssuerError(
                f"Expected {expected_kind.name.lower()} token, "
                f"got {kind.name.lower()} token"
            )

        try:
            user_id = int(payload["sub"])
            issued_at = datetime.fromtimestamp(payload["iat"], tz=timezone.utc)
            expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        except (ValueError, TypeError) as e:
            raise TokenMalformedError(f"Invalid claim: {e}")

        return TokenClaims(
            user_id=user_id,
            kind=kind,
            jti=payload.get("jti", ""),
            issued_at=issued_at,
            expires_at=expires_at,
        )

    def _issue(self, user_id: int, kind: TokenKind):
        now = self._clock()
        expires_at = now + self.lifetimes[kind]
        claims = {
            "iss": kind.value,
            "sub": str(user_id),
            "jti": str(uuid.uuid4()),
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(claims, self.secret_key, algorithm=self.algorithm)
        return token, expires_at
