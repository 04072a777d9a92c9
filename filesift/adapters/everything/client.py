"""
Everything Client - Filename index queries over Everything's HTTP server.

Features:
- Async HTTP client with a shared connection pool
- Paged queries with scope restriction and prefix wildcards
- Optional launch of a bundled Everything executable
- Bounded wait for the index to come up
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import httpx
from tenacity import AsyncRetrying, RetryError, retry_if_result, stop_after_delay, wait_fixed

from filesift.config.errors import EngineUnavailableError

from .query import build_search_string

logger = logging.getLogger(__name__)

__all__ = ["EverythingClient"]


class EverythingClient:
    """
    Everything HTTP server client.

    Implements the IndexProvider contract.

    Example:
        >>> client = EverythingClient("http://127.0.0.1:8080")
        >>> await client.initialize()
        >>> paths = await client.query("report", limit=100)
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8080",
        timeout: float = 10.0,
        executable: Path | None = None,
        init_timeout: float = 5.0,
        poll_interval: float = 0.1,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize Everything client.

        Args:
            base_url: Everything HTTP server URL
            timeout: Request timeout in seconds
            executable: Everything binary to launch when the server is down
            init_timeout: How long initialize() waits for the index
            poll_interval: Delay between readiness checks
            transport: Custom httpx transport (tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.executable = executable
        self.init_timeout = init_timeout
        self.poll_interval = poll_interval
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._process: asyncio.subprocess.Process | None = None
        self._initialized = False

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def initialize(self) -> bool:
        """
        Attach to a running Everything, or start the bundled one.

        Returns:
            True once the index answers queries
        """
        if await self.is_running():
            if not self._initialized:
                logger.info("Attached to Everything at %s", self.base_url)
            self._initialized = True
            return True

        if self.executable is None or not self.executable.exists():
            logger.warning("Everything is not running and no executable is configured")
            return False

        try:
            self._process = await asyncio.create_subprocess_exec(
                str(self.executable),
                "-startup",
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            logger.error("Failed to launch Everything at %s: %s", self.executable, e)
            return False

        logger.info("Started Everything (pid=%s), waiting for index", self._process.pid)

        retrying = AsyncRetrying(
            stop=stop_after_delay(self.init_timeout),
            wait=wait_fixed(self.poll_interval),
            retry=retry_if_result(lambda ready: not ready),
        )
        try:
            await retrying(self.is_running)
        except RetryError:
            logger.warning("Everything did not load its index within %.1fs", self.init_timeout)
            return False

        self._initialized = True
        return True

    async def is_running(self) -> bool:
        """True when the HTTP server answers an empty query."""
        client = await self._get_client()
        try:
            response = await client.get("/", params={"search": "", "json": 1, "count": 0})
        except httpx.HTTPError as e:
            logger.debug("Everything not reachable: %s", e)
            return False
        return response.status_code == 200

    async def query(
        self,
        keyword: str,
        scope_root: str | None = None,
        offset: int = 0,
        limit: int = 1000,
        match_case: bool = False,
        match_whole_word: bool = False,
    ) -> list[str]:
        """
        Query one page of full paths.

        Args:
            keyword: Search text
            scope_root: Restrict matches to this directory tree
            offset: Index of the first result
            limit: Page size
            match_case: Case-sensitive matching
            match_whole_word: Whole-word matching

        Returns:
            Full paths in Everything's order

        Raises:
            EngineUnavailableError: Server unreachable or returned an error
        """
        client = await self._get_client()
        params: dict[str, Any] = {
            "search": build_search_string(keyword, scope_root),
            "json": 1,
            "path_column": 1,
            "offset": offset,
            "count": limit,
            "case": int(match_case),
            "wholeword": int(match_whole_word),
            "path": 1,
        }

        try:
            response = await client.get("/", params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise EngineUnavailableError(
                f"Everything query failed: {e}", {"keyword": keyword}
            ) from e

        results = data.get("results", [])
        logger.debug(
            "Everything '%s' offset=%d: %d of %s results",
            keyword,
            offset,
            len(results),
            data.get("totalResults"),
        )
        return [_full_path(item) for item in results if item.get("name")]

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None


def _full_path(item: dict[str, Any]) -> str:
    name = item["name"]
    folder = item.get("path") or ""
    if not folder:
        return name
    sep = "/" if "/" in folder and "\\" not in folder else "\\"
    return folder.rstrip("\\/") + sep + name
