"""
Record renderer — a whole Notion page → Discord message payload.

Properties are rendered concurrently; output always follows the page's
property order. Rendering is all-or-nothing: any error propagates and no
partial message is built.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Literal

from relay.models.page import RenderedProperty
from relay.models.property import Property
from relay.services.property_renderer import PropertyRenderer

logger = logging.getLogger(__name__)

MessageLayout = Literal["content", "embed"]

# Discord API limits
CONTENT_LIMIT = 2000
EMBED_TITLE_LIMIT = 256
EMBED_FIELD_LIMIT = 25
EMBED_FIELD_NAME_LIMIT = 256
EMBED_FIELD_VALUE_LIMIT = 1024
EMBED_TOTAL_LIMIT = 6000

NO_PROPERTIES = "[No properties to display]"


async def render_properties(
    renderer: PropertyRenderer,
    properties: Mapping[str, Property],
) -> list[RenderedProperty]:
    """
    Render every property of a page.

    Args:
        renderer: PropertyRenderer to use
        properties: Property name → parsed property, in page order

    Returns:
        RenderedProperty list in the same order as `properties`
    """
    names = list(properties)
    values = await asyncio.gather(*(renderer.render(properties[name]) for name in names))
    return [RenderedProperty(name=name, value=value) for name, value in zip(names, values)]


def format_properties(rendered: list[RenderedProperty]) -> str:
    """One "name: value" line per property."""
    return "\n".join(f"{item.name}: {item.value}" for item in rendered)


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


def build_message(
    rendered: list[RenderedProperty],
    *,
    title: str | None = None,
    url: str | None = None,
    layout: MessageLayout = "content",
) -> dict[str, Any]:
    """
    Build a Discord create-message payload.

    `content` layout: title, property lines and page url, one per line.
    `embed` layout: one embed with the title linking to the page and a
    field per property.

    Args:
        rendered: Rendered properties in page order
        title: Optional heading (from the webhook URL)
        url: Notion page URL
        layout: "content" or "embed"

    Returns:
        JSON body for POST /channels/{id}/messages
    """
    if layout == "embed":
        return {"embeds": [_build_embed(rendered, title=title, url=url)]}

    lines = [title, format_properties(rendered) or NO_PROPERTIES, url]
    content = "\n".join(line for line in lines if line)
    if len(content) > CONTENT_LIMIT:
        logger.info("Message content truncated from %d to %d characters", len(content), CONTENT_LIMIT)
    return {"content": truncate(content, CONTENT_LIMIT)}


def _build_embed(
    rendered: list[RenderedProperty],
    *,
    title: str | None,
    url: str | None,
) -> dict[str, Any]:
    embed: dict[str, Any] = {}
    if title:
        embed["title"] = truncate(title, EMBED_TITLE_LIMIT)
    if url:
        embed["url"] = url

    if not rendered:
        embed["description"] = NO_PROPERTIES
        return embed

    # Title, field names and field values share one character budget.
    budget = EMBED_TOTAL_LIMIT - len(embed.get("title", ""))
    fields = []
    for item in rendered[:EMBED_FIELD_LIMIT]:
        name = truncate(item.name, EMBED_FIELD_NAME_LIMIT)
        room = min(EMBED_FIELD_VALUE_LIMIT, budget - len(name))
        if room < 1:
            break
        value = truncate(item.value, room)
        fields.append({"name": name, "value": value, "inline": False})
        budget -= len(name) + len(value)

    if len(fields) < len(rendered):
        logger.info("Embed limited to %d of %d properties", len(fields), len(rendered))

    embed["fields"] = fields
    return embed
