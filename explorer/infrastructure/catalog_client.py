"""Catalog payload client.

Fetches the base and full catalog payloads from HTTP(S) URLs or local
file paths. Each fetch is a one-shot read; retries and caching are left
to the staged loader, which never fetches a tier twice.
"""

import asyncio
import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import httpx
import structlog

from explorer.domain.value_objects import Tier
from explorer.infrastructure.config import settings

logger = structlog.get_logger()


class CatalogFetchError(Exception):
    """Error while fetching or decoding a catalog payload."""

    def __init__(self, source: str, message: str, status_code: int | None = None) -> None:
        self.source = source
        self.message = message
        self.status_code = status_code
        super().__init__(f"[{source}] {message}")


def is_remote(source: str) -> bool:
    """Check whether a source is an HTTP(S) URL."""
    return source.startswith(("http://", "https://"))


class CatalogClient:
    """Client reading catalog payloads per tier.

    Example usage:
        client = CatalogClient({Tier.BASE: "https://example.org/base.json"})
        payload = await client.fetch(Tier.BASE)
        await client.close()
    """

    def __init__(
        self,
        sources: Mapping[Tier, str] | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize catalog client.

        Args:
            sources: Source (URL or path) per tier; defaults from settings.
            timeout: Request timeout in seconds; defaults from settings.
        """
        if sources is None:
            sources = {
                Tier.BASE: settings.base_data_source,
                Tier.FULL: settings.full_data_source,
            }
        self.sources = dict(sources)
        self.timeout = timeout if timeout is not None else settings.fetch_timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def source_for(self, tier: Tier) -> str:
        """Get the configured source of a tier.

        Raises:
            CatalogFetchError: If no source is configured for the tier.
        """
        source = self.sources.get(tier)
        if not source:
            raise CatalogFetchError(tier.value, "No source configured")
        return source

    async def fetch(self, tier: Tier) -> dict[str, Any]:
        """Fetch and decode the payload of a tier.

        Args:
            tier: Payload tier.

        Returns:
            Decoded JSON document.

        Raises:
            CatalogFetchError: On network, IO or decoding errors.
        """
        source = self.source_for(tier)
        logger.info("Fetching catalog", tier=tier.value, source=source)
        if is_remote(source):
            data = await self._fetch_url(source)
        else:
            data = await self._read_file(source)
        logger.info("Catalog fetched", tier=tier.value, source=source)
        return data

    async def _fetch_url(self, url: str) -> Any:
        try:
            client = await self._get_client()
            response = await client.get(url)

            if response.status_code != 200:
                raise CatalogFetchError(
                    url,
                    f"Unexpected response: {response.status_code}",
                    response.status_code,
                )

            return response.json()

        except httpx.RequestError as e:
            logger.error("Catalog request failed", source=url, error=str(e))
            raise CatalogFetchError(url, f"Request failed: {str(e)}") from e
        except ValueError as e:
            logger.error("Catalog response is not JSON", source=url, error=str(e))
            raise CatalogFetchError(url, f"Invalid JSON: {str(e)}") from e

    async def _read_file(self, path: str) -> Any:
        try:
            text = await asyncio.to_thread(Path(path).read_text, encoding="utf-8")
            return json.loads(text)
        except OSError as e:
            logger.error("Catalog file unreadable", source=path, error=str(e))
            raise CatalogFetchError(path, f"Read failed: {str(e)}") from e
        except ValueError as e:
            logger.error("Catalog file is not JSON", source=path, error=str(e))
            raise CatalogFetchError(path, f"Invalid JSON: {str(e)}") from e
