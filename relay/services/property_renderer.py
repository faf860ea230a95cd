"""
Property renderer — Notion page property → display string.

Dispatches on the property kind through `_HANDLERS`. Every handler returns
non-empty text: missing values render as a bracketed placeholder, and kinds
without a handler render as `[Unsupported Type: <json>]`.

Rollups over arrays are the only recursive case; each element is a smaller
property value, so depth is bounded by the data. `max_depth` guards anyway.
"""

from __future__ import annotations

import asyncio
import math
from decimal import Decimal
from typing import Any

from relay.models.property import (
    ArrayRollup,
    BooleanFormula,
    ButtonProperty,
    CheckboxProperty,
    CreatedByProperty,
    CreatedTimeProperty,
    DateFormula,
    DateProperty,
    DateRollup,
    EmailProperty,
    ExternalFile,
    FilesProperty,
    FormulaProperty,
    HostedFile,
    LastEditedByProperty,
    LastEditedTimeProperty,
    MultiSelectProperty,
    NumberFormula,
    NumberProperty,
    NumberRollup,
    PeopleProperty,
    PhoneNumberProperty,
    Property,
    RelationProperty,
    RichTextProperty,
    RollupProperty,
    SelectProperty,
    StatusProperty,
    StringFormula,
    TitleProperty,
    UniqueIdProperty,
    UnknownProperty,
    UrlProperty,
    VerificationProperty,
)
from relay.services.identity_resolver import IdentityResolver
from relay.services.person_formatter import PersonFormatter
from relay.services.rich_text_renderer import RichTextRenderer, format_date
from relay.utils.diagnostics import dump_for_diagnostics

DEFAULT_MAX_DEPTH = 8

_VERIFICATION_LABELS = {
    "unverified": "🔴 未認証",
    "expired": "🟡 有効期限切れ",
}
_VERIFIED_LABEL = "🟢 認証済み"


def format_number(value: int | float) -> str:
    """
    Format a number the way JavaScript's Number#toString does.

    Integral floats drop ".0" (3.0 → "3"); exponent form is used below
    1e-6 and from 1e21 up, written as "1e-7" and "1e+21".
    """
    if isinstance(value, int) and abs(value) < 10**21:
        return str(value)
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    # repr gives the shortest round-tripping digits, as JavaScript does
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(map(str, digit_tuple))
    k = len(digits)
    n = exponent + k  # value = 0.<digits> * 10**n

    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * -n + digits
    mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
    return f"{sign}{mantissa}e{n - 1:+d}"


def format_checkbox(value: bool) -> str:
    return "✅" if value else "❌"


class PropertyRenderer:
    """Render any Notion property value to text."""

    def __init__(
        self,
        resolver: IdentityResolver,
        *,
        page_host: str | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.people = PersonFormatter(resolver)
        self.rich_text = RichTextRenderer(self.people, page_host)
        self.max_depth = max_depth

    async def render(self, prop: Property, depth: int = 0) -> str:
        """
        Render one property value.

        Args:
            prop: Parsed property (see relay.models.property)
            depth: Current rollup nesting level

        Returns:
            Non-empty display text

        Raises:
            httpx.HTTPError: If resolving an embedded user fails
        """
        handler = None if isinstance(prop, UnknownProperty) else _HANDLERS.get(prop.type)
        if handler is None:
            return f"[Unsupported Type: {dump_for_diagnostics(prop)}]"
        return await handler(self, prop, depth)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def _render_title(r: PropertyRenderer, prop: TitleProperty, depth: int) -> str:
    return await r.rich_text.render_all(prop.title) or "[Empty Title]"


async def _render_rich_text(r: PropertyRenderer, prop: RichTextProperty, depth: int) -> str:
    return await r.rich_text.render_all(prop.rich_text) or "[Empty Text]"


async def _render_url(r: PropertyRenderer, prop: UrlProperty, depth: int) -> str:
    return prop.url or "[No URL]"


async def _render_select(r: PropertyRenderer, prop: SelectProperty, depth: int) -> str:
    return (prop.select.name if prop.select else "") or "[No Selection]"


async def _render_multi_select(r: PropertyRenderer, prop: MultiSelectProperty, depth: int) -> str:
    return ", ".join(option.name for option in prop.multi_select or []) or "[No Selections]"


async def _render_date(r: PropertyRenderer, prop: DateProperty, depth: int) -> str:
    return format_date(prop.date)


async def _render_checkbox(r: PropertyRenderer, prop: CheckboxProperty, depth: int) -> str:
    return format_checkbox(prop.checkbox)


async def _render_email(r: PropertyRenderer, prop: EmailProperty, depth: int) -> str:
    return prop.email or "[No Email]"


async def _render_phone_number(r: PropertyRenderer, prop: PhoneNumberProperty, depth: int) -> str:
    return prop.phone_number or "[No Phone]"


async def _render_number(r: PropertyRenderer, prop: NumberProperty, depth: int) -> str:
    return "[No Number]" if prop.number is None else format_number(prop.number)


async def _render_status(r: PropertyRenderer, prop: StatusProperty, depth: int) -> str:
    return (prop.status.name if prop.status else "") or "[No Status]"


async def _render_created_time(r: PropertyRenderer, prop: CreatedTimeProperty, depth: int) -> str:
    return prop.created_time or "[No Time]"


async def _render_last_edited_time(r: PropertyRenderer, prop: LastEditedTimeProperty, depth: int) -> str:
    return prop.last_edited_time or "[No Time]"


async def _render_created_by(r: PropertyRenderer, prop: CreatedByProperty, depth: int) -> str:
    return await r.people.format(prop.created_by)


async def _render_last_edited_by(r: PropertyRenderer, prop: LastEditedByProperty, depth: int) -> str:
    return await r.people.format(prop.last_edited_by)


async def _render_unique_id(r: PropertyRenderer, prop: UniqueIdProperty, depth: int) -> str:
    unique_id = prop.unique_id
    if unique_id.number is None:
        return "[No ID]"
    if unique_id.prefix is None:
        return str(unique_id.number)
    return f"{unique_id.prefix}-{unique_id.number}"


async def _render_relation(r: PropertyRenderer, prop: RelationProperty, depth: int) -> str:
    return ", ".join(relation.id for relation in prop.relation) or "[No Relations]"


async def _render_people(r: PropertyRenderer, prop: PeopleProperty, depth: int) -> str:
    names = await asyncio.gather(*(r.people.format(person) for person in prop.people))
    return ", ".join(names) or "[No People]"


async def _render_formula(r: PropertyRenderer, prop: FormulaProperty, depth: int) -> str:
    formula = prop.formula
    if isinstance(formula, StringFormula):
        return formula.string or "[No Formula String]"
    if isinstance(formula, NumberFormula):
        return "[No Formula Number]" if formula.number is None else format_number(formula.number)
    if isinstance(formula, BooleanFormula):
        return "[No Formula Boolean]" if formula.boolean is None else format_checkbox(formula.boolean)
    if isinstance(formula, DateFormula):
        return format_date(formula.date)
    return "[Unsupported Formula Type]"


async def _render_files(r: PropertyRenderer, prop: FilesProperty, depth: int) -> str:
    links = []
    for entry in prop.files:
        if isinstance(entry, HostedFile):
            links.append(f"[{entry.name}]({entry.file.url})")
        elif isinstance(entry, ExternalFile):
            links.append(f"[{entry.name}]({entry.external.url})")
        else:
            links.append(entry.name)
    return ", ".join(links) or "[No Files]"


async def _render_rollup(r: PropertyRenderer, prop: RollupProperty, depth: int) -> str:
    rollup = prop.rollup
    if isinstance(rollup, NumberRollup):
        return "[No Rollup Number]" if rollup.number is None else format_number(rollup.number)
    if isinstance(rollup, DateRollup):
        return format_date(rollup.date)
    if isinstance(rollup, ArrayRollup):
        if depth >= r.max_depth:
            return "[Rollup Too Deep]"
        values = await asyncio.gather(*(r.render(item, depth + 1) for item in rollup.array))
        return ", ".join(values) or "[Empty Rollup Array]"
    return "[Unsupported Rollup Type]"


async def _render_verification(r: PropertyRenderer, prop: VerificationProperty, depth: int) -> str:
    if prop.verification is None:
        return "[No Verification]"
    return _VERIFICATION_LABELS.get(prop.verification.state, _VERIFIED_LABEL)


async def _render_button(r: PropertyRenderer, prop: ButtonProperty, depth: int) -> str:
    return "[Button]"


# ---------------------------------------------------------------------------
# Handler dispatch table
# ---------------------------------------------------------------------------

_HANDLERS: dict[str, Any] = {
    # Text
    "title": _render_title,
    "rich_text": _render_rich_text,
    "url": _render_url,
    "email": _render_email,
    "phone_number": _render_phone_number,
    # Choices
    "select": _render_select,
    "multi_select": _render_multi_select,
    "status": _render_status,
    "checkbox": _render_checkbox,
    # Values
    "date": _render_date,
    "number": _render_number,
    "unique_id": _render_unique_id,
    "verification": _render_verification,
    # Metadata
    "created_time": _render_created_time,
    "last_edited_time": _render_last_edited_time,
    "created_by": _render_created_by,
    "last_edited_by": _render_last_edited_by,
    # References
    "relation": _render_relation,
    "people": _render_people,
    "files": _render_files,
    # Computed
    "formula": _render_formula,
    "rollup": _render_rollup,
    "button": _render_button,
}
