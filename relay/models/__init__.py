"""
Pydantic models for the relay.

All data shapes defined here. No imports from services, repos, or routes.
"""

from relay.models.page import NotionWebhookBody, Page, RenderedProperty
from relay.models.person import FullUser, PartialUser, Person
from relay.models.property import PROPERTY_TYPES, Property, UnknownProperty, parse_property
from relay.models.rich_text import DateValue, Mention, RichText

__all__ = [
    # Page models
    "NotionWebhookBody",
    "Page",
    "RenderedProperty",
    # Person models
    "FullUser",
    "PartialUser",
    "Person",
    # Property models
    "PROPERTY_TYPES",
    "Property",
    "UnknownProperty",
    "parse_property",
    # Rich text models
    "DateValue",
    "Mention",
    "RichText",
]
