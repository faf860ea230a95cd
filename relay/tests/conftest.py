"""
Pytest configuration and fixtures for relay tests.
"""

from __future__ import annotations

import os

# Set test environment variables before importing config
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("DISCORD_BOT_TOKEN", "test-discord-token")
os.environ.setdefault("NOTION_API_KEY", "test-notion-key")
os.environ.setdefault("NOTION_MEMBER_DATABASE_ID", "members-db")

from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402

from relay.services.property_renderer import PropertyRenderer  # noqa: E402


@pytest.fixture
def resolver():
    """Identity resolver stub: maps nobody unless a test sets `resolve.return_value`."""
    stub = AsyncMock()
    stub.resolve = AsyncMock(return_value=None)
    return stub


@pytest.fixture
def renderer(resolver):
    """PropertyRenderer wired to the stub resolver."""
    return PropertyRenderer(resolver)


class FakeClock:
    """Controllable clock for IdentityCache."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
