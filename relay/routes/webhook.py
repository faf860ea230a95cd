"""Notion webhook route — render a page and relay it to a Discord channel."""

from __future__ import annotations

import logging
import re

import httpx
from fastapi import APIRouter, HTTPException, Response, status

from relay.models.page import NotionWebhookBody
from relay.repos.identity_cache import identity_cache
from relay.services.discord_service import DiscordAPIError, discord_service
from relay.services.identity_resolver import IdentityResolver
from relay.services.notion_client import notion_client
from relay.services.property_renderer import PropertyRenderer
from relay.services.record_renderer import MessageLayout, build_message, render_properties

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhook"])

identity_resolver = IdentityResolver(notion_client, identity_cache)
property_renderer = PropertyRenderer(identity_resolver)

# Discord channel IDs are 17-19 digit snowflakes
_CHANNEL_ID_RE = re.compile(r"^[0-9]{17,19}$")


@router.get("/", status_code=200)
async def root() -> dict:
    """Liveness probe for the webhook host."""
    return {"message": "ok"}


@router.post("/{discord_channel_id}", status_code=204)
async def relay_notion_page(
    discord_channel_id: str,
    body: NotionWebhookBody,
    title: str | None = None,
    layout: MessageLayout = "content",
) -> Response:
    """
    Receive a Notion automation webhook and post the page to Discord.

    The page is rendered in full before anything is sent; if rendering or
    sending fails, the caller gets 502 and no partial message goes out.

    Query params:
      - title: optional heading for the message
      - layout: "content" (plain lines) or "embed"
    """
    if not _CHANNEL_ID_RE.match(discord_channel_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid Discord channel ID.",
        )

    page = body.data
    try:
        rendered = await render_properties(property_renderer, page.properties)
    except httpx.HTTPError as exc:
        logger.exception("Failed to render Notion page %s", page.id)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to resolve Notion users.",
        ) from exc

    message = build_message(
        rendered,
        title=(title or "").strip() or None,
        url=page.url,
        layout=layout,
    )

    try:
        await discord_service.send_message(discord_channel_id, message)
    except (DiscordAPIError, httpx.HTTPError) as exc:
        logger.exception("Failed to relay Notion page %s to channel %s", page.id, discord_channel_id)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to send Discord message.",
        ) from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)
