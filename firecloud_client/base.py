"""Base FireCloud HTTP client with retry logic."""

import asyncio

import httpx
from loguru import logger
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from settings import FIRECLOUD_ACCESS_TOKEN, FIRECLOUD_API_ROOT, FIRECLOUD_API_TIMEOUT, MAX_CONCURRENT

# Default settings
API_ROOT = FIRECLOUD_API_ROOT
API_TIMEOUT = FIRECLOUD_API_TIMEOUT


def set_api_config(api_root: str, timeout: int) -> None:
    """Set API configuration."""
    global API_ROOT, API_TIMEOUT
    API_ROOT = api_root
    API_TIMEOUT = timeout


def _is_retryable_error(exc: BaseException) -> bool:
    """Check if exception is retryable (network errors + 5xx server errors)."""
    if isinstance(exc, (httpx.ReadError, httpx.ConnectError, httpx.TimeoutException)):
        return True
    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code >= 500


class BaseClient:
    """Base async FireCloud client with bearer auth, throttling and exponential backoff."""

    def __init__(
        self,
        access_token: str | None = FIRECLOUD_ACCESS_TOKEN,
        max_concurrent: int = MAX_CONCURRENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client: httpx.AsyncClient | None = None
        self._token = access_token
        self._transport = transport
        self._sem = asyncio.Semaphore(max_concurrent)
        self._request_count = 0
        logger.info("{}: max_concurrent={}", self.__class__.__name__, max_concurrent)

    @property
    def api_root(self) -> str:
        return API_ROOT

    async def __aenter__(self):
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        self._client = httpx.AsyncClient(
            base_url=API_ROOT,
            headers=headers,
            timeout=API_TIMEOUT,
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *_):
        logger.info("Total FireCloud requests: {}", self._request_count)
        if self._client:
            await self._client.aclose()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=30),
        retry=retry_if_exception(_is_retryable_error),
        reraise=True,
    )
    async def _get(self, path: str) -> dict:
        """GET request with retry logic."""
        async with self._sem:
            self._request_count += 1
            resp = await self._client.get(f"/api/{path}")
            resp.raise_for_status()
            return resp.json()


async def safe_request(coro, default=None):
    """Execute coroutine, return default on failure."""
    try:
        return await coro
    except Exception as e:
        logger.warning("Request failed: {}", e)
        return default
