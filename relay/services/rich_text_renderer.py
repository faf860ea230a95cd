"""Render Notion rich text spans to Discord-flavoured Markdown."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from relay import config
from relay.models.rich_text import (
    CustomEmojiMention,
    DatabaseMention,
    DateMention,
    DateValue,
    EquationSpan,
    LinkMention,
    LinkPreviewMention,
    MentionSpan,
    PageMention,
    RichText,
    TemplateMention,
    TextSpan,
    UserMention,
)
from relay.services.person_formatter import PersonFormatter
from relay.utils.diagnostics import dump_for_diagnostics


def format_date(date: DateValue | None) -> str:
    """
    Format a date or date range: "start", "start - end", plus " (tz)" if set.

    Shared by date properties, date mentions, formulas and rollups.
    """
    if date is None:
        return "[No Date]"
    if not date.start:
        return "[Invalid Date]"

    text = f"{date.start} - {date.end}" if date.end else date.start

    if date.time_zone:
        return f"{text} ({date.time_zone})"

    return text


class RichTextRenderer:
    """Render rich text spans. Only user mentions touch the network."""

    def __init__(self, people: PersonFormatter, page_host: str | None = None) -> None:
        self._people = people
        self._page_host = page_host or config.settings.NOTION_PAGE_HOST

    async def render_all(self, spans: Sequence[RichText]) -> str:
        """Render spans concurrently and concatenate them in their original order."""
        return "".join(await asyncio.gather(*(self.render(span) for span in spans)))

    async def render(self, span: RichText) -> str:
        if isinstance(span, TextSpan):
            if span.text.link:
                return f"[{span.text.content}]({span.text.link.url})"
            return span.text.content
        if isinstance(span, MentionSpan):
            return await self._render_mention(span)
        if isinstance(span, EquationSpan):
            return span.plain_text
        return f"[Unsupported Rich Text Type: {dump_for_diagnostics(span)}]"

    async def _render_mention(self, span: MentionSpan) -> str:
        mention = span.mention
        if isinstance(mention, UserMention):
            return await self._people.format(mention.user)
        if isinstance(mention, DateMention):
            return format_date(mention.date)
        if isinstance(mention, LinkPreviewMention):
            return f"[{span.plain_text}]({mention.link_preview.url})"
        if isinstance(mention, TemplateMention):
            return span.plain_text
        if isinstance(mention, PageMention):
            return f"[{span.plain_text}]({self._page_url(mention.page.id)})"
        if isinstance(mention, DatabaseMention):
            return f"[{span.plain_text}]({self._page_url(mention.database.id)})"
        if isinstance(mention, LinkMention):
            return f"[{mention.link_mention.title or span.plain_text}]({mention.link_mention.href})"
        if isinstance(mention, CustomEmojiMention):
            return f"[{mention.custom_emoji.name}]({mention.custom_emoji.url})"
        return f"[Unsupported Mention Type: {mention.type}]"

    def _page_url(self, object_id: str) -> str:
        return f"https://{self._page_host}/{object_id.replace('-', '')}"
