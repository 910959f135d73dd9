"""Client for an optional external chat bot that speaks `{message}` -> `{reply}`."""

from __future__ import annotations

from typing import Any

import httpx


class BotError(Exception):
    """Raised when the external bot cannot produce a usable reply."""


class BotClient:
    def __init__(
        self,
        *,
        url: str,
        api_key: str = "",
        timeout_seconds: float = 10.0,
    ) -> None:
        self.url = url
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds

    @property
    def configured(self) -> bool:
        return bool(self.url)

    async def ask(self, message: str) -> str:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(self.url, json={"message": message}, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise BotError(f"Bot request failed: {exc.__class__.__name__}") from exc

        if not response.is_success:
            raise BotError(f"Bot API error {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise BotError("Invalid JSON from bot") from exc

        reply = _extract_reply(payload)
        if not reply:
            raise BotError("Bot response missing reply")
        return reply


def _extract_reply(payload: Any) -> str:
    if not isinstance(payload, dict):
        return ""
    for key in ("reply", "answer"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""
