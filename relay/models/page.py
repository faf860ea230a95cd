"""Inbound Notion page (webhook payload) and rendered output models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidatorFunctionWrapHandler, field_validator

from relay.models.property import Property, parse_property


class Page(BaseModel):
    """A Notion page: the record being relayed."""

    model_config = {"frozen": True}

    object: str = "page"
    id: str
    url: str | None = None
    properties: dict[str, Property] = Field(default_factory=dict)

    @field_validator("properties", mode="wrap")
    @classmethod
    def _parse_each_property(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        """Parse properties one at a time so a malformed one cannot reject the page."""
        if not isinstance(value, dict):
            return handler(value)
        return {name: parse_property(raw) for name, raw in value.items()}


class NotionWebhookBody(BaseModel):
    """What a Notion automation webhook POSTs."""

    data: Page


class RenderedProperty(BaseModel):
    """One property rendered for display."""

    name: str
    value: str
