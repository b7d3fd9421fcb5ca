"""
HTTP request handlers

Module: transport.handlers
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] Initial implementation
  - Chirp, user, session and webhook endpoints
  - One table mapping core errors to HTTP status codes
  - Core calls run in the default thread pool

ARCHITECTURE:
Handlers decode the request, call the synchronous core through
run_in_executor and encode the result. They never decide policy;
errors raised by the core reach error_middleware, which picks the
status from ERROR_STATUS.
"""

import asyncio
import functools
import json
import logging
from typing import Any, Dict, Tuple, Type

from aiohttp import web

from ..core.content_policy import ContentPolicyError, validate_chirp
from ..persistence.base_repository import (
    RecordExistsError,
    RecordNotFoundError,
    RecordOwnershipError,
    RecordValidationError,
)
from ..persistence.chirp_store import ChirpRepository
from ..persistence.json_store import JSONStoreError, StoreEmptyError
from ..security.authentication.jwt_handler import TokenError
from ..security.authentication.session_manager import (
    AuthenticationError,
    SessionManager,
)
from ..webhooks.billing_events import (
    MalformedEventError,
    WebhookAuthError,
    WebhookDispatcher,
)


class MalformedRequestError(Exception):
    """Request body or path parameter cannot be decoded"""
    pass


# First match wins; subclasses before their bases
ERROR_STATUS: Tuple[Tuple[Type[BaseException], int], ...] = (
    (StoreEmptyError, 404),
    (RecordNotFoundError, 404),
    (RecordExistsError, 409),
    (RecordValidationError, 400),
    (RecordOwnershipError, 403),
    (ContentPolicyError, 400),
    (MalformedRequestError, 400),
    (MalformedEventError, 400),
    (TokenError, 401),
    (AuthenticationError, 401),
    (WebhookAuthError, 401),
    (JSONStoreError, 500),
)

logger = logging.getLogger("transport.handlers")


def status_for(error: BaseException) -> int:
    """HTTP status for a core error (500 when unknown)"""
    for error_type, status in ERROR_STATUS:
        if isinstance(error, error_type):
            return status
    return 500


@web.middleware
async def error_middleware(request: web.Request, handler):
    """Turn core errors into JSON error responses"""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except Exception as e:
        status = status_for(e)
        if status >= 500:
            logger.error(f"{request.method} {request.path} failed: {e}", exc_info=True)
            message = "Something went wrong"
        else:
            logger.warning(f"{request.method} {request.path} rejected ({status}): {e}")
            message = str(e)
        return web.json_response({"error": message}, status=status)


async def read_json(request: web.Request, *fields: str) -> Dict[str, Any]:
    """
    Decode a JSON object body and check string fields

    Raises:
        MalformedRequestError: If body is not a JSON object or a field
            is missing or not a string
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedRequestError(f"failed to decode request body: {e}")
    if not isinstance(body, dict):
        raise MalformedRequestError("request body must be a JSON object")
    for field in fields:
        if not isinstance(body.get(field), str):
            raise MalformedRequestError(f"field '{field}' must be a string")
    return body


def path_id(request: web.Request, name: str) -> int:
    """
    Integer path parameter

    Raises:
        MalformedRequestError: If the parameter is not an integer
    """
    raw = request.match_info.get(name, "")
    try:
        return int(raw)
    except ValueError:
        raise MalformedRequestError(f"{name} must be an integer, got {raw!r}")


class ApiHandlers:
    """
    Route handlers for the /api endpoints.
    """

    def __init__(
        self,
        chirps: ChirpRepository,
        sessions: SessionManager,
        webhooks: WebhookDispatcher,
    ):
        self.chirps = chirps
        self.sessions = sessions
        self.webhooks = webhooks
        self.logger = logging.getLogger("transport.handlers")

    @staticmethod
    async def _run(func, *args, **kwargs):
        """Run a blocking core call in the default executor"""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))

    def register(self, app: web.Application) -> None:
        """Attach all routes to an application"""
        app.router.add_get("/api/healthz", self.healthz)
        app.router.add_get("/api/chirps", self.list_chirps)
        app.router.add_post("/api/chirps", self.create_chirp)
        app.router.add_get("/api/chirps/{chirpID}", self.get_chirp)
        app.router.add_delete("/api/chirps/{chirpID}", self.delete_chirp)
        app.router.add_post("/api/users", self.create_user)
        app.router.add_put("/api/users", self.update_user)
        app.router.add_post("/api/login", self.login)
        app.router.add_post("/api/refresh", self.refresh)
        app.router.add_post("/api/revoke", self.revoke)
        app.router.add_post("/api/polka/webhooks", self.polka_webhook)

    # ========================================================================
    # Health
    # ========================================================================

    async def healthz(self, request: web.Request) -> web.Response:
        return web.Response(text="OK", content_type="text/plain", charset="utf-8")

    # ========================================================================
    # Chirps
    # ========================================================================

    async def list_chirps(self, request: web.Request) -> web.Response:
        try:
            chirps = await self._run(self.chirps.list)
        except StoreEmptyError:
            self.logger.info("found no chirps")
            return web.Response(status=204)
        return web.json_response([chirp.to_dict() for chirp in chirps])

    async def get_chirp(self, request: web.Request) -> web.Response:
        chirp_id = path_id(request, "chirpID")
        chirp = await self._run(self.chirps.get, chirp_id)
        return web.json_response(chirp.to_dict())

    async def create_chirp(self, request: web.Request) -> web.Response:
        author_id = await self._run(
            self.sessions.authorize, request.headers.get("Authorization")
        )
        body = await read_json(request, "body")
        clean = validate_chirp(body["body"])
        chirp = await self._run(self.chirps.create, clean, author_id)
        return web.json_response(chirp.to_dict(), status=201)

    async def delete_chirp(self, request: web.Request) -> web.Response:
        user_id = await self._run(
            self.sessions.authorize, request.headers.get("Authorization")
        )
        chirp_id = path_id(request, "chirpID")
        await self._run(self.chirps.delete, chirp_id, author_id=user_id)
        return web.Response(status=204)

    # ========================================================================
    # Users and sessions
    # ========================================================================

    async def create_user(self, request: web.Request) -> web.Response:
        body = await read_json(request, "email", "password")
        user = await self._run(self.sessions.register, body["email"], body["password"])
        return web.json_response(user.to_public_dict(), status=201)

    async def update_user(self, request: web.Request) -> web.Response:
        authorization = request.headers.get("Authorization")
        # Check the token before looking at the body
        await self._run(self.sessions.authorize, authorization)
        body = await read_json(request, "email", "password")
        user = await self._run(
            self.sessions.update_credentials,
            authorization,
            body["email"],
            body["password"],
        )
        return web.json_response(user.to_public_dict())

    async def login(self, request: web.Request) -> web.Response:
        body = await read_json(request, "email", "password")
        result = await self._run(self.sessions.login, body["email"], body["password"])
        payload = result.user.to_public_dict()
        payload["token"] = result.access_token
        payload["refresh_token"] = result.refresh_token
        return web.json_response(payload)

    async def refresh(self, request: web.Request) -> web.Response:
        token = await self._run(
            self.sessions.refresh, request.headers.get("Authorization")
        )
        return web.json_response({"token": token})

    async def revoke(self, request: web.Request) -> web.Response:
        await self._run(self.sessions.revoke, request.headers.get("Authorization"))
        return web.Response(status=204)

    # ========================================================================
    # Webhooks
    # ========================================================================

    async def polka_webhook(self, request: web.Request) -> web.Response:
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            # handle() checks the key first, then rejects the missing payload
            payload = None
        await self._run(
            self.webhooks.handle, request.headers.get("Authorization"), payload
        )
        return web.Response(status=204)
