"""Cross-origin allow-list enforcement.

Starlette's CORSMiddleware only decides which headers to send back; a browser
is trusted to drop the response. This middleware rejects requests from
origins outside the allow-list before they reach any route.
"""

from collections.abc import Iterable

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp


class OriginAllowListMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, origins: Iterable[str]):
        super().__init__(app)
        self.allowed_origins = {origin.rstrip("/") for origin in origins}

    def is_allowed(self, origin: str | None) -> bool:
        # Same-origin requests and non-browser clients send no Origin header
        return not origin or origin.rstrip("/") in self.allowed_origins

    async def dispatch(self, request: Request, call_next) -> Response:
        origin = request.headers.get("origin")
        if self.is_allowed(origin):
            return await call_next(request)

        logger.warning("CORS blocked: {} {} from {}", request.method, request.url.path, origin)
        return JSONResponse(status_code=403, content={"detail": "Origin not allowed"})
