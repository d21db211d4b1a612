"""
CORS strategies. Exactly one is mounted, chosen by settings.cors_mode:
- allowlist: Starlette CORSMiddleware restricted to settings.cors_origins (production)
- mirror: echo the request Origin (or "*") with credentials (local debugging only)
- permissive: echo the Origin, allow any header, credentials (local debugging only)
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from constru.config import Settings

logger = logging.getLogger(__name__)

ALLOWED_METHODS = "GET, POST, PUT, PATCH, DELETE, OPTIONS"
MIRROR_ALLOWED_HEADERS = "Content-Type, Authorization, X-Requested-With, Accept"


class MirrorCorsMiddleware(BaseHTTPMiddleware):
    allow_headers = MIRROR_ALLOWED_HEADERS

    def _origin_header(self, origin: str | None) -> str | None:
        return origin or "*"

    def _apply(self, response: Response, origin: str | None) -> Response:
        allow_origin = self._origin_header(origin)
        if allow_origin:
            response.headers["Access-Control-Allow-Origin"] = allow_origin
            response.headers["Vary"] = "Origin"
        response.headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
        response.headers["Access-Control-Allow-Headers"] = self.allow_headers
        response.headers["Access-Control-Allow-Credentials"] = "true"
        return response

    async def dispatch(self, request, call_next):
        origin = request.headers.get("origin")
        if request.method == "OPTIONS":
            logger.debug("CORS preflight from %s", origin)
            return self._apply(Response(status_code=204), origin)
        response = await call_next(request)
        return self._apply(response, origin)


class PermissiveCorsMiddleware(MirrorCorsMiddleware):
    allow_headers = "*"

    def _origin_header(self, origin: str | None) -> str | None:
        # No Origin header: not a cross-origin request, nothing to allow
        return origin


def install_cors(app: FastAPI, settings: Settings) -> str:
    """Mount the configured CORS strategy; returns the mode used."""
    settings.validate_cors_config()
    mode = settings.cors_mode
    if mode == "mirror":
        logger.warning("CORS mirror mode enabled: any origin gets credentialed access (development only)")
        app.add_middleware(MirrorCorsMiddleware)
    elif mode == "permissive":
        logger.warning("CORS permissive mode enabled: any origin and header allowed (development only)")
        app.add_middleware(PermissiveCorsMiddleware)
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origin_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    return mode
