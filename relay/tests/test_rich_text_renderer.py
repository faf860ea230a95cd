"""Tests for rich text span rendering and the shared date/person rules."""

from __future__ import annotations

import pytest
from pydantic import TypeAdapter

from relay.models.person import Person
from relay.models.rich_text import DateValue, RichText
from relay.services.person_formatter import PersonFormatter
from relay.services.rich_text_renderer import RichTextRenderer, format_date
from relay.tests.notion_factories import ALICE_DISCORD_ID, full_user, mention_span, partial_user, text_span

pytestmark = pytest.mark.asyncio(loop_scope="session")

_span = TypeAdapter(RichText)
_person = TypeAdapter(Person)


def make_renderer(resolver) -> RichTextRenderer:
    return RichTextRenderer(PersonFormatter(resolver), page_host="www.notion.so")


# ── date rule ───────────────────────────────────────────────────────────────


async def test_format_date_start_only():
    assert format_date(DateValue(start="2024-01-01")) == "2024-01-01"


async def test_format_date_range_with_timezone():
    date = DateValue(start="2024-01-01", end="2024-01-03", time_zone="Asia/Tokyo")
    assert format_date(date) == "2024-01-01 - 2024-01-03 (Asia/Tokyo)"


async def test_format_date_start_with_timezone():
    assert format_date(DateValue(start="2024-01-01T09:00:00", time_zone="UTC")) == "2024-01-01T09:00:00 (UTC)"


async def test_format_date_none():
    assert format_date(None) == "[No Date]"


async def test_format_date_without_start():
    assert format_date(DateValue(start=None, end="2024-01-03")) == "[Invalid Date]"


# ── person rule ─────────────────────────────────────────────────────────────


async def test_partial_user_returns_raw_id_without_resolving(resolver):
    formatter = PersonFormatter(resolver)
    assert await formatter.format(_person.validate_python(partial_user("u1"))) == "u1"
    resolver.resolve.assert_not_called()


async def test_unresolved_user_falls_back_to_name(resolver):
    formatter = PersonFormatter(resolver)
    assert await formatter.format(_person.validate_python(full_user("u1", "Alice"))) == "Alice"
    resolver.resolve.assert_called_once_with("u1")


async def test_unresolved_user_without_name_falls_back_to_id(resolver):
    formatter = PersonFormatter(resolver)
    assert await formatter.format(_person.validate_python(full_user("u1", None))) == "u1"


async def test_resolved_user_becomes_discord_mention(resolver):
    resolver.resolve.return_value = ALICE_DISCORD_ID
    formatter = PersonFormatter(resolver)
    assert await formatter.format(_person.validate_python(full_user("u1"))) == f"<@{ALICE_DISCORD_ID}>"


# ── spans ───────────────────────────────────────────────────────────────────


async def test_plain_text(resolver):
    assert await make_renderer(resolver).render(_span.validate_python(text_span("hello"))) == "hello"


async def test_linked_text(resolver):
    span = _span.validate_python(text_span("docs", link="https://example.com"))
    assert await make_renderer(resolver).render(span) == "[docs](https://example.com)"


async def test_equation_renders_plain_text(resolver):
    span = _span.validate_python(
        {"type": "equation", "equation": {"expression": "e=mc^2"}, "plain_text": "e=mc^2"}
    )
    assert await make_renderer(resolver).render(span) == "e=mc^2"


async def test_user_mention_delegates_to_person_rule(resolver):
    resolver.resolve.return_value = ALICE_DISCORD_ID
    span = _span.validate_python(mention_span({"type": "user", "user": full_user("u1")}, "@Alice"))
    assert await make_renderer(resolver).render(span) == f"<@{ALICE_DISCORD_ID}>"


async def test_date_mention(resolver):
    span = _span.validate_python(
        mention_span({"type": "date", "date": {"start": "2024-05-01", "end": None}}, "May 1, 2024")
    )
    assert await make_renderer(resolver).render(span) == "2024-05-01"


async def test_link_preview_mention(resolver):
    span = _span.validate_python(
        mention_span({"type": "link_preview", "link_preview": {"url": "https://github.com/x/y"}}, "x/y")
    )
    assert await make_renderer(resolver).render(span) == "[x/y](https://github.com/x/y)"


async def test_template_mention_renders_plain_text(resolver):
    span = _span.validate_python(
        mention_span(
            {"type": "template_mention", "template_mention": {"type": "template_mention_date", "template_mention_date": "today"}},
            "@Today",
        )
    )
    assert await make_renderer(resolver).render(span) == "@Today"


async def test_page_mention_strips_dashes(resolver):
    span = _span.validate_python(
        mention_span({"type": "page", "page": {"id": "1a2b3c4d-0000-1111-2222-333344445555"}}, "Roadmap")
    )
    assert (
        await make_renderer(resolver).render(span)
        == "[Roadmap](https://www.notion.so/1a2b3c4d000011112222333344445555)"
    )


async def test_database_mention_strips_dashes(resolver):
    span = _span.validate_python(mention_span({"type": "database", "database": {"id": "ab-cd"}}, "Tasks"))
    assert await make_renderer(resolver).render(span) == "[Tasks](https://www.notion.so/abcd)"


async def test_link_mention_prefers_title(resolver):
    span = _span.validate_python(
        mention_span(
            {"type": "link_mention", "link_mention": {"href": "https://example.com/a", "title": "Example A"}},
            "https://example.com/a",
        )
    )
    assert await make_renderer(resolver).render(span) == "[Example A](https://example.com/a)"


async def test_link_mention_without_title_uses_plain_text(resolver):
    span = _span.validate_python(
        mention_span({"type": "link_mention", "link_mention": {"href": "https://example.com/a"}}, "example.com")
    )
    assert await make_renderer(resolver).render(span) == "[example.com](https://example.com/a)"


async def test_custom_emoji_mention(resolver):
    span = _span.validate_python(
        mention_span(
            {"type": "custom_emoji", "custom_emoji": {"id": "e1", "name": "party", "url": "https://img/party.png"}},
            ":party:",
        )
    )
    assert await make_renderer(resolver).render(span) == "[party](https://img/party.png)"


async def test_unknown_mention_names_its_kind(resolver):
    span = _span.validate_python(mention_span({"type": "hologram", "hologram": {}}, "?"))
    assert await make_renderer(resolver).render(span) == "[Unsupported Mention Type: hologram]"


async def test_unknown_span_embeds_raw_value(resolver):
    span = _span.validate_python({"type": "sticker", "sticker": {"id": "s1"}, "plain_text": ""})
    result = await make_renderer(resolver).render(span)
    assert result.startswith("[Unsupported Rich Text Type: ")
    assert '"sticker"' in result
    assert '"s1"' in result


async def test_render_all_keeps_span_order(resolver):
    spans = [_span.validate_python(text_span(part)) for part in ("a", "b", "c")]
    assert await make_renderer(resolver).render_all(spans) == "abc"


async def test_malformed_span_is_rendered_in_place(resolver):
    spans = [
        _span.validate_python(text_span("see ")),
        _span.validate_python(mention_span({"type": "page"}, "Page")),
        _span.validate_python(text_span(" now")),
    ]
    assert await make_renderer(resolver).render_all(spans) == "see [Unsupported Mention Type: page] now"
