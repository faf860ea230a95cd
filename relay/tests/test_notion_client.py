"""Tests for NotionClient with mocked HTTP."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from relay.services.notion_client import NotionClient

pytestmark = pytest.mark.asyncio(loop_scope="session")


def _patched_client(mock_client_cls, response):
    mock_client = AsyncMock()
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=None)
    mock_client.post = AsyncMock(return_value=response)
    mock_client_cls.return_value = mock_client
    return mock_client


async def test_query_database_posts_filter_and_page_size():
    """Test that query_database POSTs to the query endpoint with auth headers."""
    client = NotionClient()

    mock_response = MagicMock()
    mock_response.is_error = False
    mock_response.json.return_value = {"results": [], "has_more": False}
    mock_response.raise_for_status = MagicMock()

    with patch("httpx.AsyncClient") as mock_client_cls:
        mock_client = _patched_client(mock_client_cls, mock_response)
        result = await client.query_database(
            "members-db",
            filter={"property": "ユーザー", "people": {"contains": "u1"}},
            page_size=2,
        )

    assert result == {"results": [], "has_more": False}
    call = mock_client.post.call_args
    assert call.args[0].endswith("/databases/members-db/query")
    assert call.kwargs["json"] == {
        "filter": {"property": "ユーザー", "people": {"contains": "u1"}},
        "page_size": 2,
    }
    headers = call.kwargs["headers"]
    assert headers["Authorization"] == "Bearer test-notion-key"
    assert "Notion-Version" in headers


async def test_query_database_omits_unset_arguments():
    client = NotionClient()

    mock_response = MagicMock()
    mock_response.is_error = False
    mock_response.json.return_value = {"results": []}

    with patch("httpx.AsyncClient") as mock_client_cls:
        mock_client = _patched_client(mock_client_cls, mock_response)
        await client.query_database("members-db")

    assert mock_client.post.call_args.kwargs["json"] == {}


async def test_query_database_raises_on_http_error():
    """Test that Notion errors propagate instead of being retried."""
    client = NotionClient()

    mock_response = MagicMock()
    mock_response.is_error = True
    mock_response.status_code = 401
    mock_response.text = '{"message": "API token is invalid."}'
    mock_response.raise_for_status.side_effect = httpx.HTTPStatusError(
        "401 Unauthorized", request=MagicMock(), response=MagicMock()
    )

    with patch("httpx.AsyncClient") as mock_client_cls:
        mock_client = _patched_client(mock_client_cls, mock_response)

        with pytest.raises(httpx.HTTPStatusError):
            await client.query_database("members-db", page_size=2)

    assert mock_client.post.call_count == 1
