"""
instapull HTTP API
==================
FastAPI surface over the resolver.

Endpoints:
    POST /api/download        {"url": "..."} -> CanonicalPost JSON
    GET  /api/download        service description
    GET  /api/proxy?url=...   media relay (same bytes, our hostname)

Usage:
    instapull serve --port 8877
    # or: uvicorn --factory instapull.server:app_from_env
"""

import logging
import re
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote, urlparse

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from . import __version__
from .config import Settings
from .exceptions import USER_MESSAGES, ErrorCode, TransportError
from .models import CanonicalPost, is_absolute_http_url
from .resolver import Resolver
from .strategies import STRATEGY_ORDER
from .transport import HttpTransport

logger = logging.getLogger("instapull.server")

# Caller-facing HTTP status per error tag
STATUS_CODES = {
    ErrorCode.INVALID_URL.value: 400,
    ErrorCode.PRIVATE_PROFILE.value: 403,
    ErrorCode.AGE_RESTRICTED.value: 403,
    ErrorCode.ALL_METHODS_FAILED.value: 404,
}

# Hosts the relay is willing to fetch from
PROXY_ALLOWED_HOSTS = ("cdninstagram.com", "fbcdn.net", "instagram.com")

_FILENAME_RE = re.compile(r"[^A-Za-z0-9._-]+")


def _error(msg: str, status_code: int, error: str = ErrorCode.INVALID_URL.value) -> JSONResponse:
    return JSONResponse(
        {"success": False, "error": error, "message": msg, "media": []},
        status_code=status_code,
    )


def _post_response(post: CanonicalPost) -> JSONResponse:
    body: Dict[str, Any] = post.to_dict()
    if post.success:
        return JSONResponse(body)
    code = ErrorCode(post.error)
    body["message"] = USER_MESSAGES[code]
    return JSONResponse(body, status_code=STATUS_CODES.get(post.error, 500))


def _proxy_host_allowed(url: str) -> bool:
    host = (urlparse(url).hostname or "").lower()
    return any(host == h or host.endswith("." + h) for h in PROXY_ALLOWED_HOSTS)


def _safe_filename(name: str) -> str:
    return _FILENAME_RE.sub("_", name).strip("._") or "download"


def create_app(
    settings: Optional[Settings] = None,
    transport_factory: Optional[Callable[[], Any]] = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        settings: Runtime settings (default: Settings())
        transport_factory: Returns an async-context-managed transport per
                           request (default: HttpTransport)
    """
    settings = settings or Settings()
    if transport_factory is None:
        def transport_factory():
            return HttpTransport(settings)

    app = FastAPI(title="instapull", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/download")
    async def describe():
        return JSONResponse({
            "message": "instapull API",
            "version": __version__,
            "description": "Resolve Instagram posts, reels and stories into downloadable media",
            "endpoints": {
                "download": "POST /api/download",
                "body": {"url": "string (Instagram URL)"},
                "proxy": "GET /api/proxy?url=<media url>&filename=<optional>",
            },
            "supportedUrls": [
                "https://www.instagram.com/p/...",
                "https://www.instagram.com/reel/...",
                "https://www.instagram.com/tv/...",
                "https://www.instagram.com/stories/<username>/...",
            ],
            "methods": [cls.name for cls in STRATEGY_ORDER],
        })

    @app.post("/api/download")
    async def download(request: Request, proxy: bool = Query(False)):
        try:
            body = await request.json()
        except ValueError:
            return _error("Request body must be JSON", 400)
        url = body.get("url") if isinstance(body, dict) else None
        if not url or not isinstance(url, str):
            return _error("URL is required", 400)

        async with transport_factory() as transport:
            post = await Resolver(transport, settings).resolve(url)

        if proxy and post.success:
            base = str(request.base_url).rstrip("/")
            post = post.with_rewritten_urls(
                lambda u: f"{base}/api/proxy?url={quote(u, safe='')}"
            )
        return _post_response(post)

    @app.get("/api/proxy")
    async def relay(url: Optional[str] = Query(None), filename: Optional[str] = Query(None)):
        if not url:
            return Response("URL parameter is required", status_code=400)
        if not is_absolute_http_url(url) or not _proxy_host_allowed(url):
            return Response("URL is not an Instagram media URL", status_code=400)

        try:
            async with transport_factory() as transport:
                upstream = await transport.request("GET", url)
        except TransportError as e:
            logger.warning("Proxy fetch failed for %s: %s", url, e)
            return Response("Error fetching media", status_code=502)

        if not upstream.ok:
            return Response("Failed to fetch media", status_code=upstream.status_code)

        headers = {}
        if filename:
            headers["content-disposition"] = f'attachment; filename="{_safe_filename(filename)}"'
        return Response(
            content=upstream.content,
            media_type=upstream.headers.get("content-type", "application/octet-stream"),
            headers=headers,
        )

    return app


def app_from_env(env_path: str = ".env") -> FastAPI:
    """Factory for `uvicorn --factory`; settings are read only when called."""
    return create_app(Settings.from_env(env_path))
