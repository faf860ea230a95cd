"""
Relay configuration — all environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Discord
    DISCORD_BOT_TOKEN: str = os.environ.get("DISCORD_BOT_TOKEN", "")
    DISCORD_API_BASE_URL: str = os.environ.get("DISCORD_API_BASE_URL", "https://discord.com/api/v10")

    # Notion
    NOTION_API_KEY: str = os.environ.get("NOTION_API_KEY", "")
    NOTION_API_BASE_URL: str = os.environ.get("NOTION_API_BASE_URL", "https://api.notion.com/v1")
    NOTION_VERSION: str = os.environ.get("NOTION_VERSION", "2022-06-28")
    NOTION_PAGE_HOST: str = os.environ.get("NOTION_PAGE_HOST", "www.notion.so")

    # Member directory (Notion database mapping Notion users to Discord users)
    NOTION_MEMBER_DATABASE_ID: str = os.environ.get("NOTION_MEMBER_DATABASE_ID", "")
    NOTION_MEMBER_PROPERTY: str = os.environ.get("NOTION_MEMBER_PROPERTY", "ユーザー")
    NOTION_DISCORD_ID_PROPERTY: str = os.environ.get("NOTION_DISCORD_ID_PROPERTY", "Discord ID")

    # Identity cache
    IDENTITY_CACHE_TTL_SECONDS: int = int(os.environ.get("IDENTITY_CACHE_TTL_SECONDS", "3600"))  # 1 hour
    IDENTITY_CACHE_CLEANUP_INTERVAL_SECONDS: int = 60

    # HTTP
    HTTP_TIMEOUT_SECONDS: float = float(os.environ.get("HTTP_TIMEOUT_SECONDS", "10"))

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")


# Singleton instance
settings = Settings()

# Validate required settings (skip in test mode)
_testing = os.environ.get("TESTING", "").lower() == "true"

if not _testing:
    if not settings.DISCORD_BOT_TOKEN:
        raise RuntimeError("DISCORD_BOT_TOKEN environment variable is required")
    if not settings.NOTION_API_KEY:
        raise RuntimeError("NOTION_API_KEY environment variable is required")
    if not settings.NOTION_MEMBER_DATABASE_ID:
        raise RuntimeError("NOTION_MEMBER_DATABASE_ID environment variable is required")
