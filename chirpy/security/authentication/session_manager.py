"""
Session Manager - Login, refresh, revocation and authorization

Module: security.authentication.session_manager
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - Registration with bcrypt-hashed passwords
  - Login issuing an access/refresh token pair
  - Access-token authorization from the Authorization header
  - Refresh and revocation of refresh tokens
  - Credential update for the authorized user

ARCHITECTURE:
SessionManager composes:
  - JWTHandler (stateless token issue/verify)
  - UserRepository (accounts)
  - RevocationStore (revoked refresh tokens)
  - PasswordHasher (bcrypt)

It raises typed errors only; mapping to HTTP lives in the transport.

SECURITY NOTES:
- Refresh tokens are checked against the revocation list before
  their signature and kind are trusted
- Passwords and tokens are never logged
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ...core.constants import AUTH_SCHEME_BEARER
from ...persistence.base_repository import RecordValidationError
from ...persistence.revocation_store import RevocationStore, RevokedToken
from ...persistence.user_store import User, UserRepository
from .jwt_handler import (
    JWTHandler,
    TokenClaims,
    TokenKind,
    TokenMalformedError,
    TokenPair,
    TokenRevokedError,
)
from .password_hasher import PasswordHasher


class AuthenticationError(Exception):
    """Credential check failed"""
    pass


class MalformedAuthHeaderError(TokenMalformedError):
    """Authorization header is missing or has the wrong scheme"""
    pass


@dataclass
class LoginResult:
    """Authenticated user and their fresh tokens"""
    user: User
    tokens: TokenPair

    @property
    def access_token(self) -> str:
        return self.tokens.access_token

    @property
    def refresh_token(self) -> str:
        return self.tokens.refresh_token


def parse_authorization(header: Optional[str], scheme: str = AUTH_SCHEME_BEARER) -> str:
    """
    Extract the credential from an Authorization header

    Args:
        header: Raw header value ("<scheme> <credential>")
        scheme: Expected scheme

    Returns:
        The credential string

    Raises:
        MalformedAuthHeaderError: If header is missing or malformed
    """
    if not header:
        raise MalformedAuthHeaderError("no authorization header")
    prefix = f"{scheme} "
    if not header.startswith(prefix):
        raise MalformedAuthHeaderError("malformed authorization header")
    credential = header[len(prefix):].strip()
    if not credential:
        raise MalformedAuthHeaderError("empty credential in authorization header")
    return credential


class SessionManager:
    """
    Account and token session flows.
    """

    def __init__(
        self,
        jwt_handler: JWTHandler,
        users: UserRepository,
        revocations: RevocationStore,
        hasher: Optional[PasswordHasher] = None,
    ):
        self.logger = logging.getLogger("security.session_manager")
        self.jwt_handler = jwt_handler
        self.users = users
        self.revocations = revocations
        self.hasher = hasher or PasswordHasher()

    def register(self, email: str, password: str) -> User:
        """
        Create an account

        Raises:
            RecordValidationError: If email or password is empty/too long
            RecordExistsError: If email already registered
        """
        password_hash = self._hash_credentials(email, password)
        user = self.users.create(User(email=email, password_hash=password_hash))
        self.logger.info(f"User registered: {user.id}")
        return user

    def login(self, email: str, password: str) -> LoginResult:
        """
        Check credentials and issue a token pair

        Raises:
            RecordNotFoundError: If no account has this email
            AuthenticationError: If password is wrong
        """
        user = self.users.get_by_email(email)
        if not self.hasher.verify(password or "", user.password_hash):
            self.logger.warning(f"Authentication failed for user {user.id}")
            raise AuthenticationError("Invalid password")

        tokens = self.jwt_handler.issue_pair(user.id)
        self.logger.info(f"User logged in: {user.id}")
        return LoginResult(user=user, tokens=tokens)

    def authorize(self, authorization: Optional[str]) -> int:
        """
        Resolve the user id behind a Bearer access token

        Raises:
            TokenError: If header or token is invalid, or token is a refresh token
        """
        token = parse_authorization(authorization)
        claims = self.jwt_handler.verify(token, TokenKind.ACCESS)
        return claims.user_id

    def validate_refresh_token(self, token: str) -> TokenClaims:
        """
        Validate a refresh token, revocation first

        Raises:
            TokenRevokedError: If token is on the revocation list
            TokenError: If token is otherwise invalid
        """
        if self.revocations.is_revoked(token):
            raise TokenRevokedError("this token has been revoked")
        return self.jwt_handler.verify(token, TokenKind.REFRESH)

    def refresh(self, authorization: Optional[str]) -> str:
        """
        Mint a new access token from a Bearer refresh token

        Raises:
            TokenError: If the refresh token is invalid or revoked
        """
        token = parse_authorization(authorization)
        claims = self.validate_refresh_token(token)
        access_token = self.jwt_handler.issue(claims.user_id, TokenKind.ACCESS)
        self.logger.info(f"Access token refreshed for user {claims.user_id}")
        return access_token

    def revoke(self, authorization: Optional[str]) -> RevokedToken:
        """
        Revoke a Bearer refresh token

        Raises:
            TokenError: If the refresh token is invalid or already revoked
        """
        token = parse_authorization(authorization)
        claims = self.validate_refresh_token(token)
        revoked = self.revocations.revoke(token)
        self.logger.info(f"Refresh token revoked for user {claims.user_id}")
        return revoked

    def update_credentials(
        self,
        authorization: Optional[str],
        email: str,
        password: str,
    ) -> User:
        """
        Replace email and password of the authorized user

        Raises:
            TokenError: If the access token is invalid
            RecordValidationError: If email or password is empty/too long
            RecordNotFoundError: If the user no longer exists
            RecordExistsError: If email belongs to another account
        """
        user_id = self.authorize(authorization)
        password_hash = self._hash_credentials(email, password)
        return self.users.update(
            User(id=user_id, email=email, password_hash=password_hash)
        )

    def _hash_credentials(self, email: str, password: str) -> str:
        if not email or not password:
            raise RecordValidationError("Both email and password are required")
        try:
            return self.hasher.hash(password)
        except ValueError as e:
            raise RecordValidationError(str(e))
