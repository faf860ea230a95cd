"""HTTP client for the Discord REST API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from relay import config

logger = logging.getLogger(__name__)


class DiscordAPIError(Exception):
    """Discord rejected a request."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Discord API error: {status_code} - {message}")
        self.status_code = status_code
        self.message = message


class DiscordService:
    """
    HTTP client for the Discord REST API.

    Posts messages to channels as the configured bot user.
    """

    def __init__(self) -> None:
        self._base_url = config.settings.DISCORD_API_BASE_URL
        self._token = config.settings.DISCORD_BOT_TOKEN
        self._timeout = config.settings.HTTP_TIMEOUT_SECONDS

    async def send_message(self, channel_id: str, message: dict[str, Any]) -> dict[str, Any]:
        """
        Send a message to a Discord channel.

        Args:
            channel_id: Discord channel ID
            message: Create-message JSON body ({"content": ...} or {"embeds": [...]})

        Returns:
            The created message object from Discord

        Raises:
            DiscordAPIError: If Discord returns an error status
            httpx.HTTPError: If Discord is unreachable
        """
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(
                f"{self._base_url}/channels/{channel_id}/messages",
                json=message,
                headers={
                    "Authorization": f"Bot {self._token}",
                    "Content-Type": "application/json",
                },
            )

        if response.is_error:
            try:
                error_body = response.json()
            except ValueError:
                error_body = {"message": response.text}
            if not isinstance(error_body, dict):
                error_body = {"message": str(error_body)}
            logger.error("Discord error body: %s", error_body)
            raise DiscordAPIError(response.status_code, str(error_body.get("message", "")))

        return response.json()


discord_service = DiscordService()
