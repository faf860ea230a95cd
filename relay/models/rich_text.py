"""Rich text spans and mentions as delivered by the Notion API."""

from __future__ import annotations

import logging
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Discriminator, Tag, ValidationError, ValidatorFunctionWrapHandler, WrapValidator

from relay.models.person import Person

logger = logging.getLogger(__name__)


def tagged_by_type(known: frozenset[str]):
    """
    Build a discriminator that routes on the wire `type` value.

    Values whose `type` is missing or not in `known` are routed to the
    "unknown" member so new Notion kinds never fail validation.
    """

    def discriminate(value: Any) -> str:
        kind = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
        return kind if isinstance(kind, str) and kind in known else "unknown"

    return discriminate


def unsupported_on_error(unknown: type[BaseModel], label: str):
    """
    Build a wrap validator that keeps a malformed element as `unknown`.

    Applied to list items so one bad element only replaces itself and its
    siblings still parse.
    """

    def validate(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError as exc:
            kind = value.get("type") if isinstance(value, dict) else type(value).__name__
            logger.warning("Malformed %s %s kept as unsupported (%d errors)", kind, label, exc.error_count())
            if isinstance(value, dict):
                return unknown.model_validate(value)
            return unknown(value=value)

    return WrapValidator(validate)


class DateValue(BaseModel):
    """A date or date range. `start` is missing only in malformed rollup output."""

    model_config = {"frozen": True}

    start: str | None = None
    end: str | None = None
    time_zone: str | None = None


# ── mentions ─────────────────────────────────────────────────────────────────


class PageReference(BaseModel):
    model_config = {"frozen": True}

    id: str


class LinkPreview(BaseModel):
    model_config = {"frozen": True}

    url: str


class LinkMentionTarget(BaseModel):
    model_config = {"frozen": True}

    href: str
    title: str | None = None


class CustomEmoji(BaseModel):
    model_config = {"frozen": True}

    id: str | None = None
    name: str
    url: str


class UserMention(BaseModel):
    model_config = {"frozen": True}

    type: Literal["user"] = "user"
    user: Person


class DateMention(BaseModel):
    model_config = {"frozen": True}

    type: Literal["date"] = "date"
    date: DateValue | None = None


class LinkPreviewMention(BaseModel):
    model_config = {"frozen": True}

    type: Literal["link_preview"] = "link_preview"
    link_preview: LinkPreview


class TemplateMention(BaseModel):
    """Template placeholder (e.g. "@Today"); rendered from its plain text only."""

    model_config = {"frozen": True}

    type: Literal["template_mention"] = "template_mention"
    template_mention: dict[str, Any] = {}


class PageMention(BaseModel):
    model_config = {"frozen": True}

    type: Literal["page"] = "page"
    page: PageReference


class DatabaseMention(BaseModel):
    model_config = {"frozen": True}

    type: Literal["database"] = "database"
    database: PageReference


class LinkMention(BaseModel):
    model_config = {"frozen": True}

    type: Literal["link_mention"] = "link_mention"
    link_mention: LinkMentionTarget


class CustomEmojiMention(BaseModel):
    model_config = {"frozen": True}

    type: Literal["custom_emoji"] = "custom_emoji"
    custom_emoji: CustomEmoji


class UnknownMention(BaseModel):
    model_config = {"frozen": True, "extra": "allow"}

    type: Any = None


MENTION_TYPES = frozenset(
    {"user", "date", "link_preview", "template_mention", "page", "database", "link_mention", "custom_emoji"}
)

Mention = Annotated[
    Union[
        Annotated[UserMention, Tag("user")],
        Annotated[DateMention, Tag("date")],
        Annotated[LinkPreviewMention, Tag("link_preview")],
        Annotated[TemplateMention, Tag("template_mention")],
        Annotated[PageMention, Tag("page")],
        Annotated[DatabaseMention, Tag("database")],
        Annotated[LinkMention, Tag("link_mention")],
        Annotated[CustomEmojiMention, Tag("custom_emoji")],
        Annotated[UnknownMention, Tag("unknown")],
    ],
    Discriminator(tagged_by_type(MENTION_TYPES)),
    unsupported_on_error(UnknownMention, "mention"),
]


# ── spans ────────────────────────────────────────────────────────────────────


class Link(BaseModel):
    model_config = {"frozen": True}

    url: str


class TextContent(BaseModel):
    model_config = {"frozen": True}

    content: str
    link: Link | None = None


class EquationContent(BaseModel):
    model_config = {"frozen": True}

    expression: str


class TextSpan(BaseModel):
    model_config = {"frozen": True}

    type: Literal["text"] = "text"
    text: TextContent
    plain_text: str = ""
    href: str | None = None


class MentionSpan(BaseModel):
    model_config = {"frozen": True}

    type: Literal["mention"] = "mention"
    mention: Mention
    plain_text: str = ""
    href: str | None = None


class EquationSpan(BaseModel):
    model_config = {"frozen": True}

    type: Literal["equation"] = "equation"
    equation: EquationContent
    plain_text: str = ""


class UnknownSpan(BaseModel):
    model_config = {"frozen": True, "extra": "allow"}

    type: Any = None


SPAN_TYPES = frozenset({"text", "mention", "equation"})

RichText = Annotated[
    Union[
        Annotated[TextSpan, Tag("text")],
        Annotated[MentionSpan, Tag("mention")],
        Annotated[EquationSpan, Tag("equation")],
        Annotated[UnknownSpan, Tag("unknown")],
    ],
    Discriminator(tagged_by_type(SPAN_TYPES)),
    unsupported_on_error(UnknownSpan, "rich text span"),
]
