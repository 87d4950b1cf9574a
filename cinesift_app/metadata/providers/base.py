"""
================================================================================
CineSift - Base Metadata Provider
================================================================================
Abstract base class for all upstream media providers.

Providers implement one operation, search(query), for:
  - TMDb (REST, bearer token)
  - Bangumi (HTML scraping + detail pages)
  - Maoyan (mobile JSON)
  - Douban (HTML scraping)

search() never raises. Network failures, non-2xx responses and malformed
payloads are logged and turn into an empty result for that provider, so one
outage never fails the aggregate request.
================================================================================
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging

import httpx

from ..models import MediaRecord


logger = logging.getLogger(__name__)


DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 13_2_3 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/13.0.3 Mobile/15E148 Safari/604.1"
)


class ProviderError(Exception):
    """Upstream responded with something we cannot use."""


class BaseMetadataProvider(ABC):
    """
    Abstract base class for media providers.

    All providers must implement:
      - _search(): Query upstream and map results to MediaRecord

    The base class handles:
      - HTTP client lifecycle (one AsyncClient per provider instance)
      - Status checking and JSON/HTML decoding
      - Turning any failure into an empty result
    """

    # Provider identification
    id: str = "base"
    name: str = "Base Provider"

    base_url: str = ""

    # Request timeout (seconds)
    timeout: float = 10.0

    user_agent: str = DESKTOP_USER_AGENT

    # Maximum candidates taken from one upstream search
    max_results: int = 8

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None
    ):
        """
        Initialize provider.

        Args:
            client: Pre-built HTTP client (tests inject one with a MockTransport)
            timeout: Per-request timeout override in seconds
        """
        if timeout is not None:
            self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def default_headers(self) -> Dict[str, str]:
        """Headers sent with every request."""
        return {'User-Agent': self.user_agent}

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self.default_headers(),
                follow_redirects=True
            )
            self._owns_client = True
        return self._client

    async def close(self):
        """Close HTTP client (only if this provider created it)."""
        if self._client and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    @property
    def is_configured(self) -> bool:
        """Whether the provider has what it needs to query upstream."""
        return True

    # =========================================================================
    # REQUEST HELPERS
    # =========================================================================

    async def _get(self, url: str, **kwargs) -> httpx.Response:
        """
        GET a URL and require a 2xx status.

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status
        """
        client = self._get_client()
        response = await client.get(url, **kwargs)
        response.raise_for_status()
        return response

    async def _get_json(self, url: str, **kwargs) -> Any:
        response = await self._get(url, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"{self.id}: invalid JSON from {url}") from e

    async def _get_html(self, url: str, **kwargs) -> str:
        response = await self._get(url, **kwargs)
        return response.text

    # =========================================================================
    # SEARCH
    # =========================================================================

    async def search(self, query: str) -> List[MediaRecord]:
        """
        Search upstream for titles matching query.

        Args:
            query: Free-text title query

        Returns:
            List of MediaRecord objects (empty on any failure)
        """
        if not self.is_configured:
            logger.error(f"{self.id}: not configured, skipping search")
            return []

        try:
            results = await self._search(query)
        except httpx.HTTPStatusError as e:
            logger.error(
                f"{self.id}: Search failed for '{query}': "
                f"HTTP {e.response.status_code}"
            )
            return []
        except Exception as e:
            logger.error(f"{self.id}: Search failed for '{query}': {e!r}")
            return []

        logger.info(f"{self.id}: {len(results)} results for '{query}'")
        return results

    @abstractmethod
    async def _search(self, query: str) -> List[MediaRecord]:
        """
        Provider-specific search; may raise, search() catches everything.

        Args:
            query: Free-text title query

        Returns:
            List of MediaRecord objects
        """
        pass

    def describe(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'base_url': self.base_url,
            'configured': self.is_configured,
        }

    def __repr__(self):
        return f"<{self.__class__.__name__}(id='{self.id}', timeout={self.timeout}s)>"
