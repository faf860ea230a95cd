"""Notion user references embedded in properties and mentions."""

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import BaseModel, Discriminator, Tag


class PartialUser(BaseModel):
    """A bare user reference. Only the opaque id is known."""

    model_config = {"frozen": True}

    object: str = "user"
    id: str


class FullUser(BaseModel):
    """A user with a known kind (person or bot) and usually a display name."""

    model_config = {"frozen": True}

    object: str = "user"
    id: str
    type: str
    name: str | None = None


def _person_tag(value: Any) -> str:
    if isinstance(value, dict):
        return "full" if "type" in value else "partial"
    return "full" if isinstance(value, FullUser) else "partial"


Person = Annotated[
    Union[
        Annotated[PartialUser, Tag("partial")],
        Annotated[FullUser, Tag("full")],
    ],
    Discriminator(_person_tag),
]
