"""
Minimal async JSON API client used by the remote automation backends.

One client wraps one aiohttp session; open it with ``async with`` so the
session is closed on every exit path.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
import logging

import aiohttp

from ..errors import NetworkError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


@dataclass
class ApiResponse:
    """Decoded response of a remote API call"""
    status: int
    data: Dict[str, Any] = field(default_factory=dict)
    reason: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def message(self) -> str:
        if isinstance(self.data, dict) and self.data.get("message"):
            return str(self.data["message"])
        return self.reason or f"HTTP {self.status}"


class JsonApiClient:
    """Bearer-authenticated JSON client over aiohttp"""

    def __init__(self, base_url: str, api_key: str, timeout: int = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> 'JsonApiClient':
        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> ApiResponse:
        """
        Send one request and decode the JSON body.

        Raises:
            NetworkError: on transport failure or timeout
        """
        if self._session is None:
            raise RuntimeError("JsonApiClient must be used as an async context manager")

        url = f"{self.base_url}{path}"
        try:
            async with self._session.request(method, url, json=payload) as resp:
                text = await resp.text()
                data: Dict[str, Any] = {}
                if text:
                    try:
                        decoded = await resp.json(content_type=None)
                    except ValueError:
                        decoded = None
                    if isinstance(decoded, dict):
                        data = decoded
                    elif decoded is not None:
                        data = {"result": decoded}
                logger.debug(f"{method} {url} -> {resp.status}")
                return ApiResponse(status=resp.status, data=data, reason=resp.reason or "")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"{method} {url} failed: {e or type(e).__name__}") from e
