"""
Identity resolver — maps Notion users to Discord users.

Two tiers:
  1. IdentityCache (expiring, process-wide)
  2. Member directory: a Notion database with one page per member, holding
     a people property (the Notion user) and a rich text property (the
     Discord user ID)

Data-shape problems in the directory are logged and resolve to "no mapping".
Errors from the Notion API propagate to the caller.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any

from pydantic import StringConstraints, TypeAdapter, ValidationError

from relay import config
from relay.models.property import RichTextProperty, parse_property
from relay.repos.identity_cache import IdentityCache
from relay.services.notion_client import NotionClient

logger = logging.getLogger(__name__)

# Discord snowflakes are 17-19 digits; kept as strings since they exceed
# what a float can hold exactly.
DiscordUserId = Annotated[str, StringConstraints(min_length=17, max_length=19, pattern=r"^[0-9]+$")]

_discord_user_id_adapter: TypeAdapter[str] = TypeAdapter(DiscordUserId)

# Two results are enough to tell "exactly one" from "ambiguous".
_DIRECTORY_PAGE_SIZE = 2


class IdentityResolver:
    """Resolve a Notion user ID to a Discord user ID, with caching."""

    def __init__(
        self,
        notion: NotionClient,
        cache: IdentityCache,
        *,
        member_database_id: str | None = None,
        member_property: str | None = None,
        discord_id_property: str | None = None,
        ttl_seconds: int | None = None,
    ) -> None:
        self._notion = notion
        self._cache = cache
        self._member_database_id = member_database_id or config.settings.NOTION_MEMBER_DATABASE_ID
        self._member_property = member_property or config.settings.NOTION_MEMBER_PROPERTY
        self._discord_id_property = discord_id_property or config.settings.NOTION_DISCORD_ID_PROPERTY
        self._ttl_seconds = ttl_seconds or config.settings.IDENTITY_CACHE_TTL_SECONDS

    async def resolve(self, notion_user_id: str) -> str | None:
        """
        Resolve through the cache, falling back to the member directory.

        Concurrent misses for the same user are not de-duplicated; both
        query Notion and the later cache write wins.

        Args:
            notion_user_id: Notion user ID

        Returns:
            Discord user ID, or None if the user has no valid mapping
        """
        cached = await self._cache.get(notion_user_id)
        if cached:
            return cached

        discord_user_id = await self.lookup(notion_user_id)
        if not discord_user_id:
            return None

        try:
            await self._cache.put(notion_user_id, discord_user_id, self._ttl_seconds)
        except Exception:
            logger.warning("Failed to cache Discord ID for Notion user %s", notion_user_id, exc_info=True)

        return discord_user_id

    async def lookup(self, notion_user_id: str) -> str | None:
        """
        Query the member directory directly, bypassing the cache.

        Args:
            notion_user_id: Notion user ID

        Returns:
            Discord user ID, or None if no member page holds a valid one

        Raises:
            httpx.HTTPError: If the Notion query fails
        """
        response = await self._notion.query_database(
            self._member_database_id,
            filter={
                "property": self._member_property,
                "people": {"contains": notion_user_id},
            },
            page_size=_DIRECTORY_PAGE_SIZE,
        )

        results: list[dict[str, Any]] = response.get("results") or []
        if len(results) != 1:
            logger.warning("Notion user %s expected 1 member page, got %d", notion_user_id, len(results))
        if not results:
            return None

        member = results[0]
        if member.get("object") != "page" or "properties" not in member:
            return None

        raw_property = member["properties"].get(self._discord_id_property)
        if raw_property is None:
            return None

        discord_id_property = parse_property(raw_property)
        if not isinstance(discord_id_property, RichTextProperty):
            logger.warning('Notion Database Property "%s" is not rich_text', self._discord_id_property)
            return None

        if not discord_id_property.rich_text:
            return None
        discord_id = getattr(discord_id_property.rich_text[0], "plain_text", "")
        if not discord_id:
            return None

        try:
            return _discord_user_id_adapter.validate_python(discord_id)
        except ValidationError as exc:
            reason = "; ".join(error["msg"] for error in exc.errors())
            logger.warning("Notion user %s Discord ID is invalid. reason: %s", notion_user_id, reason)
            return None
