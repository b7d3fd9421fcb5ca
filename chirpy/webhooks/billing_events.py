"""
Billing webhook events

Module: webhooks.billing_events
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - Event payload parsing into a closed set of kinds
  - Pre-shared API key check
  - Dispatch of user upgrade events

ARCHITECTURE:
The billing provider posts {"event": str, "data": {"user_id": int}}.
Known event names map to an EventKind; anything else becomes
EventKind.UNHANDLED and is acknowledged without side effects.

SECURITY NOTES:
- Authorization: ApiKey <base64 key>
- Key compared in constant time on the decoded bytes
"""

import base64
import binascii
import hmac
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..core.constants import AUTH_SCHEME_API_KEY, EVENT_USER_UPGRADED
from ..persistence.user_store import UserRepository
from ..security.authentication.session_manager import (
    MalformedAuthHeaderError,
    parse_authorization,
)


class WebhookError(Exception):
    """Base webhook error"""
    pass


class WebhookAuthError(WebhookError):
    """Missing or wrong API key"""
    pass


class MalformedEventError(WebhookError):
    """Event payload does not have the expected shape"""
    pass


class EventKind(Enum):
    """Billing events the service understands"""
    USER_UPGRADED = EVENT_USER_UPGRADED
    UNHANDLED = None


@dataclass(frozen=True)
class WebhookEvent:
    """A parsed billing event"""
    kind: EventKind
    name: str
    user_id: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "WebhookEvent":
        """
        Parse an event payload

        Raises:
            MalformedEventError: If the payload shape is wrong
        """
        if not isinstance(payload, dict):
            raise MalformedEventError("Event payload must be a JSON object")
        name = payload.get("event")
        if not isinstance(name, str):
            raise MalformedEventError("Event name must be a string")

        try:
            kind = EventKind(name)
        except ValueError:
            return cls(kind=EventKind.UNHANDLED, name=name)

        data = payload.get("data")
        user_id = data.get("user_id") if isinstance(data, dict) else None
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise MalformedEventError(f"Event '{name}' requires an integer data.user_id")
        return cls(kind=kind, name=name, user_id=user_id)


class WebhookDispatcher:
    """
    Verifies and applies billing webhook events.
    """

    def __init__(self, users: UserRepository, api_key: bytes):
        """
        Args:
            users: User repository to upgrade accounts in
            api_key: Pre-shared key (raw bytes)
        """
        self.logger = logging.getLogger("webhooks.dispatcher")
        self.users = users
        self.api_key = api_key

    def verify_api_key(self, authorization: Optional[str]) -> None:
        """
        Check the ApiKey Authorization header

        Raises:
            WebhookAuthError: If header is missing, malformed or the key differs
        """
        try:
            encoded = parse_authorization(authorization, AUTH_SCHEME_API_KEY)
        except MalformedAuthHeaderError as e:
            raise WebhookAuthError(str(e))
        try:
            key = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            raise WebhookAuthError("API key is not valid base64")
        if not hmac.compare_digest(key, self.api_key):
            raise WebhookAuthError("invalid api key")

    def dispatch(self, event: WebhookEvent) -> bool:
        """
        Apply an event

        Args:
            event: Parsed event

        Returns:
            True if the event had an effect, False if it was ignored

        Raises:
            RecordNotFoundError: If an upgrade names an unknown user
        """
        if event.kind is EventKind.USER_UPGRADED:
            self.users.upgrade(event.user_id)
            self.logger.info(f"User {event.user_id} upgraded via webhook")
            return True

        self.logger.info(f"Unhandled billing event: {event.name}")
        return False

    def handle(self, authorization: Optional[str], payload: Any) -> bool:
        """
        Verify the key, parse the payload and dispatch it

        The key is checked before the payload is looked at, so an
        undecodable body (payload None) from an unauthorized caller is
        still refused as unauthorized.

        Raises:
            WebhookAuthError: If the API key is missing or wrong
            MalformedEventError: If the payload shape is wrong
            RecordNotFoundError: If an upgrade names an unknown user
        """
        self.verify_api_key(authorization)
        return self.dispatch(WebhookEvent.from_payload(payload))
