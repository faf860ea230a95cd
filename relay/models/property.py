"""
Notion page property models.

One model per property kind, discriminated on the wire `type` value.
Unrecognised kinds, and recognised kinds with a malformed payload, become
`UnknownProperty` so a single odd property never fails a whole page.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Discriminator, Tag, TypeAdapter, ValidationError

from relay.models.person import Person
from relay.models.rich_text import DateValue, RichText, tagged_by_type, unsupported_on_error

logger = logging.getLogger(__name__)


class SelectOption(BaseModel):
    model_config = {"frozen": True}

    name: str
    id: str | None = None
    color: str | None = None


class UniqueId(BaseModel):
    model_config = {"frozen": True}

    number: int | None = None
    prefix: str | None = None


class RelationReference(BaseModel):
    model_config = {"frozen": True}

    id: str


class FileUrl(BaseModel):
    model_config = {"frozen": True}

    url: str
    expiry_time: str | None = None


class Verification(BaseModel):
    model_config = {"frozen": True}

    state: str = "verified"
    verified_by: Person | None = None
    date: DateValue | None = None


# ── formula results ──────────────────────────────────────────────────────────


class StringFormula(BaseModel):
    model_config = {"frozen": True}

    type: Literal["string"] = "string"
    string: str | None = None


class NumberFormula(BaseModel):
    model_config = {"frozen": True}

    type: Literal["number"] = "number"
    number: int | float | None = None


class BooleanFormula(BaseModel):
    model_config = {"frozen": True}

    type: Literal["boolean"] = "boolean"
    boolean: bool | None = None


class DateFormula(BaseModel):
    model_config = {"frozen": True}

    type: Literal["date"] = "date"
    date: DateValue | None = None


class UnknownFormula(BaseModel):
    model_config = {"frozen": True, "extra": "allow"}

    type: Any = None


FormulaResult = Annotated[
    Union[
        Annotated[StringFormula, Tag("string")],
        Annotated[NumberFormula, Tag("number")],
        Annotated[BooleanFormula, Tag("boolean")],
        Annotated[DateFormula, Tag("date")],
        Annotated[UnknownFormula, Tag("unknown")],
    ],
    Discriminator(tagged_by_type(frozenset({"string", "number", "boolean", "date"}))),
]


# ── file entries ─────────────────────────────────────────────────────────────


class HostedFile(BaseModel):
    """A file uploaded to Notion. Its url is signed and expires."""

    model_config = {"frozen": True}

    type: Literal["file"] = "file"
    name: str
    file: FileUrl


class ExternalFile(BaseModel):
    model_config = {"frozen": True}

    type: Literal["external"] = "external"
    name: str
    external: FileUrl


class UnknownFile(BaseModel):
    model_config = {"frozen": True, "extra": "allow"}

    type: Any = None
    name: str = ""


FileEntry = Annotated[
    Union[
        Annotated[HostedFile, Tag("file")],
        Annotated[ExternalFile, Tag("external")],
        Annotated[UnknownFile, Tag("unknown")],
    ],
    Discriminator(tagged_by_type(frozenset({"file", "external"}))),
]


# ── rollup results ───────────────────────────────────────────────────────────


class NumberRollup(BaseModel):
    model_config = {"frozen": True}

    type: Literal["number"] = "number"
    number: int | float | None = None
    function: str | None = None


class DateRollup(BaseModel):
    model_config = {"frozen": True}

    type: Literal["date"] = "date"
    date: DateValue | None = None
    function: str | None = None


class ArrayRollup(BaseModel):
    """Rollup over related pages: each element is itself a property value."""

    model_config = {"frozen": True}

    type: Literal["array"] = "array"
    array: list[RollupElement] = []
    function: str | None = None


class UnknownRollup(BaseModel):
    model_config = {"frozen": True, "extra": "allow"}

    type: Any = None


RollupResult = Annotated[
    Union[
        Annotated[NumberRollup, Tag("number")],
        Annotated[DateRollup, Tag("date")],
        Annotated[ArrayRollup, Tag("array")],
        Annotated[UnknownRollup, Tag("unknown")],
    ],
    Discriminator(tagged_by_type(frozenset({"number", "date", "array"}))),
]


# ── properties ───────────────────────────────────────────────────────────────


class TitleProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["title"] = "title"
    title: list[RichText] = []


class RichTextProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["rich_text"] = "rich_text"
    rich_text: list[RichText] = []


class UrlProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["url"] = "url"
    url: str | None = None


class SelectProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["select"] = "select"
    select: SelectOption | None = None


class MultiSelectProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["multi_select"] = "multi_select"
    multi_select: list[SelectOption] | None = None


class DateProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["date"] = "date"
    date: DateValue | None = None


class CheckboxProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["checkbox"] = "checkbox"
    checkbox: bool = False


class EmailProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["email"] = "email"
    email: str | None = None


class PhoneNumberProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["phone_number"] = "phone_number"
    phone_number: str | None = None


class NumberProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["number"] = "number"
    number: int | float | None = None


class StatusProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["status"] = "status"
    status: SelectOption | None = None


class CreatedTimeProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["created_time"] = "created_time"
    created_time: str | None = None


class LastEditedTimeProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["last_edited_time"] = "last_edited_time"
    last_edited_time: str | None = None


class CreatedByProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["created_by"] = "created_by"
    created_by: Person


class LastEditedByProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["last_edited_by"] = "last_edited_by"
    last_edited_by: Person


class UniqueIdProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["unique_id"] = "unique_id"
    unique_id: UniqueId = UniqueId()


class RelationProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["relation"] = "relation"
    relation: list[RelationReference] = []
    has_more: bool = False


class PeopleProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["people"] = "people"
    people: list[Person] = []


class FormulaProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["formula"] = "formula"
    formula: FormulaResult


class FilesProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["files"] = "files"
    files: list[FileEntry] = []


class RollupProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["rollup"] = "rollup"
    rollup: RollupResult


class VerificationProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["verification"] = "verification"
    verification: Verification | None = None


class ButtonProperty(BaseModel):
    model_config = {"frozen": True}

    type: Literal["button"] = "button"
    button: dict[str, Any] = {}


class UnknownProperty(BaseModel):
    """Anything we cannot model. Keeps every raw key for diagnostics."""

    model_config = {"frozen": True, "extra": "allow"}

    type: Any = None


PROPERTY_TYPES = frozenset(
    {
        "title",
        "rich_text",
        "url",
        "select",
        "multi_select",
        "date",
        "checkbox",
        "email",
        "phone_number",
        "number",
        "status",
        "created_time",
        "last_edited_time",
        "created_by",
        "last_edited_by",
        "unique_id",
        "relation",
        "people",
        "formula",
        "files",
        "rollup",
        "verification",
        "button",
    }
)

Property = Annotated[
    Union[
        Annotated[TitleProperty, Tag("title")],
        Annotated[RichTextProperty, Tag("rich_text")],
        Annotated[UrlProperty, Tag("url")],
        Annotated[SelectProperty, Tag("select")],
        Annotated[MultiSelectProperty, Tag("multi_select")],
        Annotated[DateProperty, Tag("date")],
        Annotated[CheckboxProperty, Tag("checkbox")],
        Annotated[EmailProperty, Tag("email")],
        Annotated[PhoneNumberProperty, Tag("phone_number")],
        Annotated[NumberProperty, Tag("number")],
        Annotated[StatusProperty, Tag("status")],
        Annotated[CreatedTimeProperty, Tag("created_time")],
        Annotated[LastEditedTimeProperty, Tag("last_edited_time")],
        Annotated[CreatedByProperty, Tag("created_by")],
        Annotated[LastEditedByProperty, Tag("last_edited_by")],
        Annotated[UniqueIdProperty, Tag("unique_id")],
        Annotated[RelationProperty, Tag("relation")],
        Annotated[PeopleProperty, Tag("people")],
        Annotated[FormulaProperty, Tag("formula")],
        Annotated[FilesProperty, Tag("files")],
        Annotated[RollupProperty, Tag("rollup")],
        Annotated[VerificationProperty, Tag("verification")],
        Annotated[ButtonProperty, Tag("button")],
        Annotated[UnknownProperty, Tag("unknown")],
    ],
    Discriminator(tagged_by_type(PROPERTY_TYPES)),
]

# A malformed rollup element only replaces itself.
RollupElement = Annotated[Property, unsupported_on_error(UnknownProperty, "rollup element")]

ArrayRollup.model_rebuild()
RollupProperty.model_rebuild()

_property_adapter: TypeAdapter[Any] = TypeAdapter(Property)


def parse_property(raw: Any) -> Property:
    """
    Parse one raw property payload. Never raises.

    A malformed payload for a known kind is logged and kept as an
    `UnknownProperty` carrying the raw keys.
    """
    try:
        return _property_adapter.validate_python(raw)
    except ValidationError as exc:
        kind = raw.get("type") if isinstance(raw, dict) else type(raw).__name__
        logger.warning("Malformed %s property kept as unsupported (%d errors)", kind, exc.error_count())
        if isinstance(raw, dict):
            return UnknownProperty.model_validate(raw)
        return UnknownProperty(value=raw)
