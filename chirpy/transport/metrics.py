"""
File server hit metrics

Module: transport.metrics
Date: 2026-10-19
Version: 0.1.0

Counts requests served under /app and exposes them on the admin
page. Shared across request threads, so every access takes a lock.
"""

import logging
import threading

from aiohttp import web

METRICS_PAGE = """<html>

<body>
    <h1>Welcome, Chirpy Admin</h1>
    <p>Chirpy has been visited {hits} times!</p>
</body>

</html>
"""


class RequestMetrics:
    """Thread-safe hit counter"""

    def __init__(self, prefix: str = "/app"):
        self.logger = logging.getLogger("transport.metrics")
        self.prefix = prefix
        self._hits = 0
        self._lock = threading.Lock()

    @property
    def hits(self) -> int:
        with self._lock:
            return self._hits

    def increment(self) -> int:
        with self._lock:
            self._hits += 1
            return self._hits

    def reset(self) -> None:
        with self._lock:
            self._hits = 0
        self.logger.info("Hit counter reset")

    def counts(self, path: str) -> bool:
        """Whether a request path is a file server hit"""
        return path == self.prefix or path.startswith(self.prefix + "/")

    @web.middleware
    async def middleware(self, request: web.Request, handler):
        if self.counts(request.path):
            self.increment()
        return await handler(request)

    async def handle_get_metrics(self, request: web.Request) -> web.Response:
        return web.Response(
            text=METRICS_PAGE.format(hits=self.hits),
            content_type="text/html",
        )

    async def handle_reset_metrics(self, request: web.Request) -> web.Response:
        self.reset()
        return web.Response(status=200)
