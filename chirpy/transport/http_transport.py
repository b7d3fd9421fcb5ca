"""
HTTP Transport for Chirpy

Module: transport.http_transport
Date: 2026-10-19
Version: 0.1.0

CHANGELOG:
[2026-10-19 v0.1.0] HTTP Transport Implementation
  - aiohttp application wiring store, repositories and sessions
  - CORS, request logging, hit metrics and error middlewares
  - Static file server under /app
  - Admin metrics page and reset endpoint

ARCHITECTURE:
HttpTransport owns the aiohttp runner. build_app() assembles the
whole service from a ServerConfig:
  FlatStore -> repositories -> SessionManager / WebhookDispatcher
  -> ApiHandlers -> routes

SECURITY NOTES:
- CORS is fully open (any origin)
- Request bodies capped at MAX_REQUEST_SIZE
- /app is never mounted over the directory holding the store
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Optional

from aiohttp import web

from ..core.config import ServerConfig
from ..core.constants import MAX_REQUEST_SIZE
from ..persistence.chirp_store import ChirpRepository
from ..persistence.json_store import FlatStore
from ..persistence.revocation_store import RevocationStore
from ..persistence.user_store import UserRepository
from ..security.authentication.jwt_handler import JWTHandler
from ..security.authentication.password_hasher import PasswordHasher
from ..security.authentication.session_manager import SessionManager
from ..webhooks.billing_events import WebhookDispatcher
from .handlers import ApiHandlers, error_middleware
from .metrics import RequestMetrics

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS, PUT, DELETE",
    "Access-Control-Allow-Headers": "*",
}

access_logger = logging.getLogger("transport.http.access")


@web.middleware
async def cors_middleware(request: web.Request, handler):
    """Add CORS headers; answer preflight requests directly"""
    if request.method == "OPTIONS":
        return web.Response(status=200, headers=CORS_HEADERS)
    try:
        response = await handler(request)
    except web.HTTPException as e:
        e.headers.update(CORS_HEADERS)
        raise
    response.headers.update(CORS_HEADERS)
    return response


@web.middleware
async def logging_middleware(request: web.Request, handler):
    """Log method, path and duration of each request"""
    start = time.monotonic()
    access_logger.info(f"{request.method:>7} @ {request.path}")
    try:
        return await handler(request)
    finally:
        elapsed_ms = (time.monotonic() - start) * 1000
        access_logger.info(f"finished in {elapsed_ms:.1f}ms")


def exposes_store(static_dir: Path, db_path: Path) -> bool:
    """Whether serving static_dir would publish the store file or its temp file"""
    store_dir = Path(db_path).resolve().parent
    try:
        store_dir.relative_to(Path(static_dir).resolve())
    except ValueError:
        return False
    return True


def build_app(
    config: ServerConfig,
    store: Optional[FlatStore] = None,
    jwt_handler: Optional[JWTHandler] = None,
    metrics: Optional[RequestMetrics] = None,
) -> web.Application:
    """
    Assemble the Chirpy application

    Args:
        config: Server configuration
        store: Flat store to use (opened from config.db_path if None)
        jwt_handler: Token handler (built from config.jwt_secret if None)
        metrics: Hit counter (fresh one if None)

    Returns:
        Configured aiohttp Application
    """
    store = store or FlatStore(config.db_path)
    jwt_handler = jwt_handler or JWTHandler(config.jwt_secret)
    metrics = metrics or RequestMetrics()

    users = UserRepository(store)
    sessions = SessionManager(
        jwt_handler=jwt_handler,
        users=users,
        revocations=RevocationStore(store),
        hasher=PasswordHasher(rounds=config.bcrypt_rounds),
    )
    handlers = ApiHandlers(
        chirps=ChirpRepository(store),
        sessions=sessions,
        webhooks=WebhookDispatcher(users, config.polka_key),
    )

    app = web.Application(
        middlewares=[cors_middleware, logging_middleware, metrics.middleware, error_middleware],
        client_max_size=MAX_REQUEST_SIZE,
    )
    handlers.register(app)
    app.router.add_get("/admin/metrics", metrics.handle_get_metrics)
    app.router.add_route("*", "/api/reset", metrics.handle_reset_metrics)

    static_dir = Path(config.static_dir)
    http_logger = logging.getLogger("transport.http")
    if not static_dir.is_dir():
        http_logger.warning(f"Static directory not found, /app disabled: {static_dir}")
    elif exposes_store(static_dir, store.file_path):
        http_logger.warning(
            f"Static directory {static_dir} contains the store {store.file_path}, "
            f"/app disabled"
        )
    else:
        app.router.add_static("/app/", static_dir, show_index=True)

    return app


class HttpTransport:
    """
    HTTP server for the Chirpy API.
    """

    def __init__(self, config: ServerConfig, store: Optional[FlatStore] = None):
        """
        Initialize HTTP Transport

        Args:
            config: ServerConfig instance
            store: Flat store to serve (opened from config if None)
        """
        self.config = config
        self.store = store or FlatStore(config.db_path)
        self.app: Optional[web.Application] = None
        self.runner: Optional[web.AppRunner] = None
        self.logger = logging.getLogger("transport.http")
        self.is_running = False

    async def start(self) -> None:
        """Start the HTTP server"""
        try:
            self.app = build_app(self.config, store=self.store)
            self.runner = web.AppRunner(self.app)
            await self.runner.setup()
            site = web.TCPSite(self.runner, self.config.host, self.config.port)
            await site.start()

            self.is_running = True
            self.logger.info(
                f"HTTP server started on {self.config.host}:{self.config.port}"
            )
        except Exception as e:
            self.logger.error(f"Server startup failed: {e}")
            self.is_running = False
            raise

    async def serve_forever(self) -> None:
        """Start and block until cancelled"""
        await self.start()
        try:
            await asyncio.Event().wait()
        finally:
            await self.stop()

    async def stop(self) -> None:
        """Stop the HTTP server"""
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
        self.is_running = False
        self.logger.info("HTTP transport stopped")
