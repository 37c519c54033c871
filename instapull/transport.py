"""
Async HTTP Transport
====================
Thin async wrapper over curl_cffi.AsyncSession.

Every outbound call of the resolution pipeline goes through a
Transport. HttpTransport is the real one; tests inject a fake that
records calls. There is no retry loop here: one call, one answer.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

from curl_cffi import CurlError
from curl_cffi.requests import AsyncSession

from .anti_detect import BrowserIdentity, pick_identity
from .config import REQUEST_TIMEOUT, Settings
from .exceptions import TransportError

logger = logging.getLogger("instapull.transport")


@dataclass
class TransportResponse:
    """Upstream response, fully read."""
    status_code: int
    text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    content: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Parse body as JSON (raises ValueError on invalid JSON)."""
        return json.loads(self.text)


class Transport(Protocol):
    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        data: Optional[Dict[str, str]] = None,
    ) -> TransportResponse:
        ...


class HttpTransport:
    """
    Real transport: curl_cffi.AsyncSession with browser impersonation.

    Usage:
        async with HttpTransport() as transport:
            resp = await transport.request("GET", url)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        identity: Optional[BrowserIdentity] = None,
    ):
        self._settings = settings or Settings()
        self.identity = identity or pick_identity()
        self._session: Optional[AsyncSession] = None

    def _get_session(self) -> AsyncSession:
        if self._session is None:
            self._session = AsyncSession(impersonate=self.identity.impersonation)
        return self._session

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        data: Optional[Dict[str, str]] = None,
    ) -> TransportResponse:
        """
        Send one request.

        Raises:
            TransportError: connection, TLS or timeout failure
        """
        req_headers = self.identity.base_headers()
        if headers:
            req_headers.update(headers)

        kwargs: Dict[str, Any] = {
            "headers": req_headers,
            "timeout": self._settings.timeout or REQUEST_TIMEOUT,
            "allow_redirects": True,
        }
        if params:
            kwargs["params"] = params
        if data is not None:
            kwargs["data"] = data
        if self._settings.proxy:
            kwargs["proxies"] = {"https": self._settings.proxy, "http": self._settings.proxy}

        logger.debug("%s %s", method, url)
        try:
            response = await self._get_session().request(method, url, **kwargs)
        except (CurlError, OSError) as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return TransportResponse(
            status_code=response.status_code,
            text=response.text,
            headers={k.lower(): v for k, v in response.headers.items()},
            content=response.content,
        )

    async def close(self) -> None:
        if self._session is not None:
            session, self._session = self._session, None
            await session.close()

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()
