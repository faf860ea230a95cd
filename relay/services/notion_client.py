"""HTTP client for the Notion REST API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from relay import config

logger = logging.getLogger(__name__)


class NotionClient:
    """
    Minimal Notion API client.

    Only the database query endpoint is needed: the member directory is a
    Notion database that maps Notion users to Discord user IDs.
    """

    def __init__(self) -> None:
        self._base_url = config.settings.NOTION_API_BASE_URL
        self._api_key = config.settings.NOTION_API_KEY
        self._version = config.settings.NOTION_VERSION
        self._timeout = config.settings.HTTP_TIMEOUT_SECONDS

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Notion-Version": self._version,
            "Content-Type": "application/json",
        }

    async def query_database(
        self,
        database_id: str,
        *,
        filter: dict[str, Any] | None = None,
        page_size: int | None = None,
    ) -> dict[str, Any]:
        """
        Query a Notion database.

        Args:
            database_id: Database to query
            filter: Notion filter object
            page_size: Maximum number of results to return

        Returns:
            Response dict from Notion ({"results": [...], "has_more": ...})

        Raises:
            httpx.HTTPError: If Notion is unreachable or returns an error
        """
        payload: dict[str, Any] = {}
        if filter is not None:
            payload["filter"] = filter
        if page_size is not None:
            payload["page_size"] = page_size

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(
                f"{self._base_url}/databases/{database_id}/query",
                json=payload,
                headers=self._headers(),
            )
            if response.is_error:
                logger.error("Notion query on %s failed: %s %s", database_id, response.status_code, response.text)
            response.raise_for_status()
            return response.json()


notion_client = NotionClient()
