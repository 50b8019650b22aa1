"""
Context7 catalog client.

Async HTTP access to the two endpoints the mirror needs:
    GET <base>/api/projects                   -> JSON array of projects
    GET <base>/<project>/llm.txt?tokens=<cap> -> raw text payload

Usage:
    async with CatalogClient("https://context7.com") as client:
        projects = await client.fetch_projects()
        text = await client.fetch_payload(projects[0].project, tokens=10000)
"""

import asyncio
import json
from enum import Enum, auto
from typing import Any, List, Optional, Protocol, runtime_checkable

import aiohttp

from utils.exceptions import FetchError, ParseError
from utils.logging_config import get_logger

from .models import ProjectSummary, parse_catalog

logger = get_logger(__name__)


class ResponseKind(Enum):
    """How a response body is decoded."""

    JSON = auto()
    TEXT = auto()


@runtime_checkable
class CatalogSource(Protocol):
    """Anything the exporter can pull a catalog and payloads from."""

    async def fetch_projects(self) -> List[ProjectSummary]:
        ...

    async def fetch_payload(self, project_id: str, tokens: int) -> str:
        ...


class CatalogClient:
    """
    Context7 API client.

    Owns its aiohttp session unless one is injected. No retries: the
    first transport or HTTP error is raised as FetchError.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Args:
            base_url: API root, e.g. "https://context7.com".
            timeout: Total per-request timeout in seconds (None = aiohttp default).
            session: Existing session to use; it is not closed by this client.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "CatalogClient":
        if self._session is None:
            if self.timeout is not None:
                self._session = aiohttp.ClientSession(
                    timeout=aiohttp.ClientTimeout(total=self.timeout)
                )
            else:
                self._session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def _get(self, path: str, kind: ResponseKind, params: Optional[dict] = None) -> Any:
        if self._session is None:
            raise RuntimeError("CatalogClient must be used as an async context manager")

        url = self.url_for(path)
        logger.debug(f"GET {url} params={params or {}}")
        try:
            async with self._session.get(url, params=params) as resp:
                if resp.status >= 400:
                    raise FetchError(f"GET {url} returned HTTP {resp.status}")
                if kind is ResponseKind.JSON:
                    return await self._decode_json(resp, url)
                return await self._decode_text(resp, url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchError(f"GET {url} failed: {e}") from e

    @staticmethod
    async def _decode_json(resp: Any, url: str) -> Any:
        try:
            # content_type=None: the API does not always label JSON correctly
            return await resp.json(content_type=None)
        except (json.JSONDecodeError, UnicodeDecodeError, aiohttp.ContentTypeError) as e:
            raise ParseError(f"Response from {url} is not valid JSON: {e}") from e

    @staticmethod
    async def _decode_text(resp: Any, url: str) -> str:
        try:
            return await resp.text()
        except UnicodeDecodeError as e:
            raise ParseError(f"Response from {url} is not valid text: {e}") from e

    async def fetch_projects(self) -> List[ProjectSummary]:
        """Fetch and parse the full project catalog."""
        data = await self._get("api/projects", ResponseKind.JSON)
        projects = parse_catalog(data)
        logger.info(f"Fetched catalog with {len(projects)} project(s)")
        return projects

    async def fetch_payload(self, project_id: str, tokens: int) -> str:
        """Fetch a project's llm.txt payload, capped at `tokens` tokens."""
        text = await self._get(
            f"{project_id.strip('/')}/llm.txt",
            ResponseKind.TEXT,
            params={"tokens": str(tokens)},
        )
        logger.debug(f"Fetched payload for {project_id}: {len(text)} chars")
        return text
